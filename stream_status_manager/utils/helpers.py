"""General utility functions and helper classes."""

import base64
from collections.abc import Mapping


def repository_directory_from_url(url: str) -> str:
    """Return the local directory name for a repository URL.

    The directory is everything after the owner segment of the URL path, so
    ``https://github.com/owner/repo`` becomes ``repo``.
    """
    parts = url.rstrip("/").split("/", 4)
    if len(parts) < 5 or not parts[4]:
        raise ValueError(f"Repository URL must look like 'https://host/owner/repo', got '{url}'")
    return parts[4]


def basic_auth_header(username: str, token: str) -> str:
    """Build an HTTP basic Authorization header value."""
    credentials = base64.b64encode(f"{username}:{token}".encode()).decode("ascii")
    return f"Basic {credentials}"


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Look up a header by name, ignoring case."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None
