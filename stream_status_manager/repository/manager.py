"""Manages the local working copy of the status repository."""

import asyncio
import os
from pathlib import Path

import structlog

from stream_status_manager.repository.exceptions import DocumentReadError, DocumentWriteError, RepositoryError, RepositoryOperationError
from stream_status_manager.utils.constants import (
    COMMIT_AUTHOR_EMAIL,
    COMMIT_AUTHOR_NAME,
    DEFAULT_DOCUMENT_PATH,
    DEFAULT_REMOTE_NAME,
    OFFLINE_COMMIT_MESSAGE_TEMPLATE,
    ONLINE_COMMIT_MESSAGE_TEMPLATE,
)
from stream_status_manager.utils.helpers import basic_auth_header

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

REDACTED = "***"


def commit_message(entity: str, online: bool) -> str:
    """Build the commit message for a status change."""
    template = ONLINE_COMMIT_MESSAGE_TEMPLATE if online else OFFLINE_COMMIT_MESSAGE_TEMPLATE
    return template.format(entity=entity)


class DocumentRepositoryManager:
    """Owns a local clone of the status repository and the tracked document in it.

    The manager is created once at startup and reused for every sync cycle:
    the first cycle clones the repository, later cycles force-pull the
    existing working copy. Credentials are sent as an HTTP Authorization
    header on each command, so they are never stored in the clone's config.
    """

    def __init__(
        self,
        repo_url: str,
        local_path: Path,
        document_path: str = DEFAULT_DOCUMENT_PATH,
        username: str | None = None,
        token: str | None = None,
        branch: str | None = None,
        author_name: str = COMMIT_AUTHOR_NAME,
        author_email: str = COMMIT_AUTHOR_EMAIL,
    ) -> None:
        """Initialize the manager for a remote repository and its local path."""
        self.repo_url = repo_url
        self.local_path = Path(local_path)
        self.document_path = document_path
        self.username = username
        self.token = token
        self.branch = branch
        self.author_name = author_name
        self.author_email = author_email

    @property
    def document_file(self) -> Path:
        """Absolute location of the tracked document in the working copy."""
        return self.local_path / self.document_path

    def _auth_config(self) -> list[str]:
        if not (self.username and self.token):
            return []
        return ["-c", f"http.extraHeader=Authorization: {basic_auth_header(self.username, self.token)}"]

    def _redact(self, args: list[str]) -> list[str]:
        redacted = []
        for arg in args:
            if arg.startswith("http.extraHeader="):
                arg = f"http.extraHeader={REDACTED}"
            elif self.token and self.token in arg:
                arg = arg.replace(self.token, REDACTED)
            redacted.append(arg)
        return redacted

    async def _run_git(
        self,
        *args: str,
        cwd: Path | None = None,
        authenticated: bool = False,
        extra_env: dict[str, str] | None = None,
    ) -> str:
        """Run a git command and return its standard output.

        Raises:
            RepositoryOperationError: If git exits with a non-zero status.
        """
        command = ["git", *(self._auth_config() if authenticated else []), *args]
        logger.debug("Running git command", command=" ".join(self._redact(command)), cwd=str(cwd) if cwd else None)
        # ensure_working_copy matches on untranslated git messages.
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0", "LC_ALL": "C", "LANGUAGE": "C", **(extra_env or {})}
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RepositoryError(f"Unable to run git {args[0]}: {e}") from e
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise RepositoryOperationError(args[0], process.returncode or 1, stderr.decode("utf-8", errors="replace"))
        return stdout.decode("utf-8", errors="replace")

    async def ensure_working_copy(self) -> None:
        """Clone the repository, or force-pull it if a clone already exists.

        Raises:
            RepositoryOperationError: If cloning fails for any reason other than an
                existing working copy, or if the forced pull fails.
        """
        try:
            await self._run_git("clone", "--quiet", self.repo_url, str(self.local_path), authenticated=True)
            logger.info("Cloned status repository", repo_url=self.repo_url, local_path=str(self.local_path))
            return
        except RepositoryOperationError as e:
            if "already exists" not in e.stderr:
                raise
        logger.warning("Working copy already exists, doing git pull", local_path=str(self.local_path))
        await self.force_pull()

    async def force_pull(self) -> None:
        """Fetch the branch from origin and reset the working copy onto it, discarding local changes."""
        ref = self.branch or "HEAD"
        await self._run_git("fetch", "--quiet", "--force", DEFAULT_REMOTE_NAME, ref, cwd=self.local_path, authenticated=True)
        await self._run_git("reset", "--quiet", "--hard", "FETCH_HEAD", cwd=self.local_path)
        logger.info("Pulled status repository", ref=ref, commit=await self.head_commit())

    def read_document(self) -> str:
        """Read the tracked document, keeping its line endings as they are.

        Raises:
            DocumentReadError: If the document does not exist or cannot be read.
        """
        try:
            with self.document_file.open(encoding="utf-8", newline="") as document:
                return document.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Unable to read {self.document_file}: {e}") from e

    def write_document(self, text: str) -> None:
        """Overwrite the tracked document with new text."""
        try:
            with self.document_file.open("w", encoding="utf-8", newline="") as document:
                document.write(text)
        except OSError as e:
            raise DocumentWriteError(f"Unable to write {self.document_file}: {e}") from e

    async def stage_and_commit(self, entity: str, online: bool) -> str:
        """Stage the tracked document and commit it as the bot.

        Returns:
            str: The SHA of the new commit.
        """
        await self._run_git("add", "--", self.document_path, cwd=self.local_path)
        identity = {
            "GIT_AUTHOR_NAME": self.author_name,
            "GIT_AUTHOR_EMAIL": self.author_email,
            "GIT_COMMITTER_NAME": self.author_name,
            "GIT_COMMITTER_EMAIL": self.author_email,
        }
        await self._run_git("commit", "--quiet", "--message", commit_message(entity, online), cwd=self.local_path, extra_env=identity)
        summary = await self._run_git("log", "-1", "--format=%H %an <%ae> %s", cwd=self.local_path)
        logger.info("Created commit", commit=summary.strip())
        return await self.head_commit()

    async def push(self) -> None:
        """Push the current branch to origin."""
        await self._run_git("push", "--quiet", DEFAULT_REMOTE_NAME, "HEAD", cwd=self.local_path, authenticated=True)
        logger.info("Remote repository updated", document=self.document_path)

    async def head_commit(self) -> str:
        """Return the SHA of the commit at HEAD."""
        return (await self._run_git("rev-parse", "HEAD", cwd=self.local_path)).strip()
