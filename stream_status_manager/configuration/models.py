"""Configuration models resolved from CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class AbsentEntityPolicy(str, Enum):
    """How to treat an event for an entity that has no row in the document."""

    IGNORE = "ignore"
    ERROR = "error"


@dataclass
class BaseConfig:
    """Configuration shared by every command of the Stream Status Manager CLI."""

    debug: bool
    repo_url: str
    git_username: str
    git_token: str
    local_path: Path
    document_path: str
    branch: str | None
    absent_entity_policy: AbsentEntityPolicy


@dataclass
class ServeConfig(BaseConfig):
    """Configuration class for the serve command."""

    webhook_secret: str
    port: int
    max_message_age: int | None
