"""Custom exceptions for the repository module."""


class RepositoryError(Exception):
    """Base class for failures while working with the status repository."""

    pass


class RepositoryOperationError(RepositoryError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, operation: str, returncode: int, stderr: str) -> None:
        """Initializes the exception with the failed operation and git's output."""
        super().__init__(f"git {operation} failed with exit code {returncode}: {stderr.strip()}")
        self.operation = operation
        self.returncode = returncode
        self.stderr = stderr


class DocumentReadError(RepositoryError):
    """Raised when the status document cannot be read."""

    pass


class DocumentWriteError(RepositoryError):
    """Raised when the status document cannot be written."""

    pass
