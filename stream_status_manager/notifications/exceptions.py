"""Custom exceptions for the notifications module."""


class NotificationDecodeError(Exception):
    """Raised when a verified notification body cannot be decoded."""

    pass
