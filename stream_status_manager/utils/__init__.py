"""Utility modules for shared functionality."""

from .helpers import basic_auth_header, get_header, repository_directory_from_url
from .logging import configure_logging

__all__ = [
    "basic_auth_header",
    "configure_logging",
    "get_header",
    "repository_directory_from_url",
]
