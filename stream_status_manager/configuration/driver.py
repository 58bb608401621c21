"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from stream_status_manager.configuration import reconcile
from stream_status_manager.configuration.models import BaseConfig, ServeConfig


def get_base_config(
    debug: bool = False,
    repo_url: str | None = None,
    git_username: str | None = None,
    git_token: str | None = None,
    workspace: Path | None = None,
    document_path: str | None = None,
    branch: str | None = None,
    absent_entity_policy: str | None = None,
) -> BaseConfig:
    """Synchronously get the reconciled configuration shared by all commands."""
    return asyncio.run(
        reconcile.reconcile_base_configuration(
            cli_debug=debug,
            cli_repo_url=repo_url,
            cli_git_username=git_username,
            cli_git_token=git_token,
            cli_workspace=workspace,
            cli_document_path=document_path,
            cli_branch=branch,
            cli_absent_entity_policy=absent_entity_policy,
        )
    )


def get_serve_config(
    debug: bool = False,
    repo_url: str | None = None,
    git_username: str | None = None,
    git_token: str | None = None,
    workspace: Path | None = None,
    document_path: str | None = None,
    branch: str | None = None,
    absent_entity_policy: str | None = None,
    webhook_secret: str | None = None,
    port: int | None = None,
    max_message_age: int | None = None,
) -> ServeConfig:
    """Synchronously get the reconciled serve configuration."""
    return asyncio.run(
        reconcile.reconcile_serve_configuration(
            cli_debug=debug,
            cli_repo_url=repo_url,
            cli_git_username=git_username,
            cli_git_token=git_token,
            cli_workspace=workspace,
            cli_document_path=document_path,
            cli_branch=branch,
            cli_absent_entity_policy=absent_entity_policy,
            cli_webhook_secret=webhook_secret,
            cli_port=port,
            cli_max_message_age=max_message_age,
        )
    )
