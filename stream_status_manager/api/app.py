"""FastAPI application that receives stream status webhooks."""

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from stream_status_manager.configuration.models import ServeConfig
from stream_status_manager.repository.manager import DocumentRepositoryManager
from stream_status_manager.synchronize.orchestrator import StatusSyncOrchestrator
from stream_status_manager.utils.constants import WEBHOOK_PATH


def build_orchestrator(config: ServeConfig) -> StatusSyncOrchestrator:
    """Create the repository handle and orchestrator described by the configuration."""
    repository = DocumentRepositoryManager(
        repo_url=config.repo_url,
        local_path=config.local_path,
        document_path=config.document_path,
        username=config.git_username,
        token=config.git_token,
        branch=config.branch,
    )
    return StatusSyncOrchestrator(
        repository=repository,
        webhook_secret=config.webhook_secret,
        absent_entity_policy=config.absent_entity_policy,
        max_message_age=config.max_message_age,
    )


def create_app(config: ServeConfig, orchestrator: StatusSyncOrchestrator | None = None) -> FastAPI:
    """Create the webhook application.

    Args:
        config: Resolved serve configuration.
        orchestrator: Orchestrator to use instead of one built from the configuration.
    """
    app = FastAPI(
        title="Stream Status Manager",
        description="Webhook receiver that mirrors stream online/offline status into a git repository",
        version="1.0.0",
    )
    app.state.config = config
    app.state.orchestrator = orchestrator or build_orchestrator(config)

    @app.post(WEBHOOK_PATH)
    async def eventsub_callback(request: Request, background_tasks: BackgroundTasks) -> Response:
        """Handle an EventSub webhook delivery.

        The reply is sent before any repository work starts; the sync cycle
        runs as a background task afterwards.
        """
        body = await request.body()
        reply = app.state.orchestrator.handle_notification(body, request.headers)
        if reply.sync_event is not None:
            background_tasks.add_task(app.state.orchestrator.synchronize, reply.sync_event)
        return PlainTextResponse(reply.body, status_code=reply.status_code)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "repository": config.repo_url}

    return app
