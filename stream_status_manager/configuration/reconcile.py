"""Reconciles configuration between CLI arguments and environment variables."""

from pathlib import Path

import structlog

from stream_status_manager.configuration.env import settings
from stream_status_manager.configuration.exceptions import InvalidConfigurationElementError, RequiredConfigurationElementError
from stream_status_manager.configuration.models import AbsentEntityPolicy, BaseConfig, ServeConfig
from stream_status_manager.utils.constants import DEFAULT_PORT, DEFAULT_REPO_URL
from stream_status_manager.utils.helpers import repository_directory_from_url

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def reconcile_absent_entity_policy(value: str) -> AbsentEntityPolicy:
    """Parse the absent entity policy name.

    Raises:
        InvalidConfigurationElementError: If the value is not a known policy.
    """
    try:
        return AbsentEntityPolicy(value.strip().lower())
    except ValueError as e:
        choices = ", ".join(policy.value for policy in AbsentEntityPolicy)
        raise InvalidConfigurationElementError(f"Unknown absent entity policy '{value}', expected one of: {choices}") from e


async def reconcile_port(cli_port: int | None) -> int:
    """Pick the listen port from the CLI, then PORT, then SS_PORT."""
    if cli_port:
        return cli_port
    if settings.PORT:
        return settings.PORT
    if settings.SS_PORT:
        return settings.SS_PORT
    return DEFAULT_PORT


async def reconcile_base_configuration(
    cli_debug: bool,
    cli_repo_url: str | None,
    cli_git_username: str | None,
    cli_git_token: str | None,
    cli_workspace: Path | None,
    cli_document_path: str | None,
    cli_branch: str | None,
    cli_absent_entity_policy: str | None,
) -> BaseConfig:
    """Reconciles the configuration shared by all commands.

    Values provided on the command line take precedence over environment
    variables.

    Raises:
        RequiredConfigurationElementError: If the git username or token is missing.
    """
    debug = cli_debug or settings.DEBUG

    repo_url = cli_repo_url or settings.SS_GH_REPO
    if not repo_url:
        logger.warning("No repository URL configured, using the default", repo_url=DEFAULT_REPO_URL)
        repo_url = DEFAULT_REPO_URL

    git_username = cli_git_username or settings.SS_USERNAME
    if not git_username:
        raise RequiredConfigurationElementError(name="git username", cli_name="--git-username", env_name="SS_USERNAME")

    git_token = cli_git_token or settings.SS_TOKEN
    if not git_token:
        raise RequiredConfigurationElementError(name="git access token", cli_name="--git-token", env_name="SS_TOKEN")

    workspace = cli_workspace or Path(settings.SS_WORKSPACE or ".")
    try:
        local_path = workspace / repository_directory_from_url(repo_url)
    except ValueError as e:
        raise InvalidConfigurationElementError(str(e)) from e

    policy = await reconcile_absent_entity_policy(cli_absent_entity_policy or settings.SS_ABSENT_ENTITY_POLICY)

    return BaseConfig(
        debug=debug,
        repo_url=repo_url,
        git_username=git_username,
        git_token=git_token,
        local_path=local_path,
        document_path=cli_document_path or settings.SS_INDEX_FILE,
        branch=cli_branch or settings.SS_BRANCH,
        absent_entity_policy=policy,
    )


async def reconcile_serve_configuration(
    cli_debug: bool,
    cli_repo_url: str | None,
    cli_git_username: str | None,
    cli_git_token: str | None,
    cli_workspace: Path | None,
    cli_document_path: str | None,
    cli_branch: str | None,
    cli_absent_entity_policy: str | None,
    cli_webhook_secret: str | None,
    cli_port: int | None,
    cli_max_message_age: int | None,
) -> ServeConfig:
    """Reconciles the configuration for the serve command.

    Raises:
        RequiredConfigurationElementError: If a credential or the webhook secret is missing.
    """
    base_config = await reconcile_base_configuration(
        cli_debug=cli_debug,
        cli_repo_url=cli_repo_url,
        cli_git_username=cli_git_username,
        cli_git_token=cli_git_token,
        cli_workspace=cli_workspace,
        cli_document_path=cli_document_path,
        cli_branch=cli_branch,
        cli_absent_entity_policy=cli_absent_entity_policy,
    )

    webhook_secret = cli_webhook_secret or settings.SS_SECRETKEY
    if not webhook_secret:
        raise RequiredConfigurationElementError(name="webhook secret", cli_name="--webhook-secret", env_name="SS_SECRETKEY")

    max_message_age = cli_max_message_age if cli_max_message_age is not None else settings.SS_MAX_MESSAGE_AGE

    return ServeConfig(
        debug=base_config.debug,
        repo_url=base_config.repo_url,
        git_username=base_config.git_username,
        git_token=base_config.git_token,
        local_path=base_config.local_path,
        document_path=base_config.document_path,
        branch=base_config.branch,
        absent_entity_policy=base_config.absent_entity_policy,
        webhook_secret=webhook_secret,
        port=await reconcile_port(cli_port),
        max_message_age=max_message_age or None,
    )
