"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import structlog
import typer
import uvicorn
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from stream_status_manager.api.app import create_app
from stream_status_manager.configuration.driver import get_base_config, get_serve_config
from stream_status_manager.configuration.exceptions import InvalidConfigurationElementError, RequiredConfigurationElementError
from stream_status_manager.repository.manager import DocumentRepositoryManager
from stream_status_manager.synchronize.orchestrator import StatusSyncOrchestrator
from stream_status_manager.synchronize.results import SyncEvent, SyncOutcome
from stream_status_manager.utils.logging import configure_logging

load_dotenv()

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False)

RepoUrlOption = Annotated[str | None, Option("--repo-url", envvar="SS_GH_REPO", help="URL of the repository holding the status document.")]
GitUsernameOption = Annotated[str | None, Option("--git-username", envvar="SS_USERNAME", help="Username for git over HTTPS.")]
GitTokenOption = Annotated[str | None, Option("--git-token", envvar="SS_TOKEN", help="Access token for git over HTTPS.")]
WorkspaceOption = Annotated[Path | None, Option("--workspace", envvar="SS_WORKSPACE", help="Directory the repository is cloned into.")]
DocumentOption = Annotated[str | None, Option("--document", envvar="SS_INDEX_FILE", help="Path of the status document inside the repository.")]
BranchOption = Annotated[str | None, Option("--branch", envvar="SS_BRANCH", help="Branch to pull before updating. Defaults to the remote HEAD.")]
AbsentEntityPolicyOption = Annotated[
    str | None,
    Option("--absent-entity-policy", envvar="SS_ABSENT_ENTITY_POLICY", help="What to do when an entity has no row: 'ignore' or 'error'."),
]
DebugOption = Annotated[bool, Option("--debug", envvar="DEBUG", help="Enable debug logging.")]


@typer_app.command(name="serve")
def serve_cli(
    repo_url: RepoUrlOption = None,
    git_username: GitUsernameOption = None,
    git_token: GitTokenOption = None,
    workspace: WorkspaceOption = None,
    document: DocumentOption = None,
    branch: BranchOption = None,
    absent_entity_policy: AbsentEntityPolicyOption = None,
    webhook_secret: Annotated[str | None, Option("--webhook-secret", envvar="SS_SECRETKEY", help="EventSub webhook shared secret.")] = None,
    port: Annotated[int | None, Option("--port", help="Port to listen on. Defaults to $PORT, then $SS_PORT, then 8080.")] = None,
    max_message_age: Annotated[
        int | None, Option("--max-message-age", envvar="SS_MAX_MESSAGE_AGE", help="Reject notifications older than this many seconds (0 disables).")
    ] = None,
    debug: DebugOption = False,
) -> None:
    """Listen for stream online/offline webhooks and keep the status document in sync."""
    try:
        config = get_serve_config(
            debug=debug,
            repo_url=repo_url,
            git_username=git_username,
            git_token=git_token,
            workspace=workspace,
            document_path=document,
            branch=branch,
            absent_entity_policy=absent_entity_policy,
            webhook_secret=webhook_secret,
            port=port,
            max_message_age=max_message_age,
        )
    except (RequiredConfigurationElementError, InvalidConfigurationElementError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    configure_logging(config.debug)
    logger.info("Server starting", port=config.port, repo_url=config.repo_url, document=config.document_path)
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port, log_level="debug" if config.debug else "info")


@typer_app.command(name="set-status")
def set_status_cli(
    entity: Annotated[str, Argument(help="Entity name as it appears in the status document.")],
    online: Annotated[bool, Option("--online/--offline", help="Status to set.")] = True,
    repo_url: RepoUrlOption = None,
    git_username: GitUsernameOption = None,
    git_token: GitTokenOption = None,
    workspace: WorkspaceOption = None,
    document: DocumentOption = None,
    branch: BranchOption = None,
    absent_entity_policy: AbsentEntityPolicyOption = None,
    debug: DebugOption = False,
) -> None:
    """Run one sync cycle for an entity without waiting for a webhook."""
    try:
        config = get_base_config(
            debug=debug,
            repo_url=repo_url,
            git_username=git_username,
            git_token=git_token,
            workspace=workspace,
            document_path=document,
            branch=branch,
            absent_entity_policy=absent_entity_policy,
        )
    except (RequiredConfigurationElementError, InvalidConfigurationElementError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    configure_logging(config.debug)
    repository = DocumentRepositoryManager(
        repo_url=config.repo_url,
        local_path=config.local_path,
        document_path=config.document_path,
        username=config.git_username,
        token=config.git_token,
        branch=config.branch,
    )
    # Manual runs are not signed webhooks, so the secret is never consulted.
    orchestrator = StatusSyncOrchestrator(repository=repository, webhook_secret="", absent_entity_policy=config.absent_entity_policy)
    result = asyncio.run(orchestrator.synchronize(SyncEvent(entity=entity, online=online)))

    typer.echo(f"{entity}: {result.outcome.value}")
    if result.commit:
        typer.echo(f"Commit: {result.commit}")
    if result.outcome == SyncOutcome.FAILED:
        typer.echo(f"Failed while {result.stage.value}: {result.reason}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    typer_app()
