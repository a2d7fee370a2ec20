"""Dependencies and app state for FastAPI routes."""

from fastapi import Request

from ..orchestrator import PreviewOrchestrator


def get_orchestrator(request: Request) -> PreviewOrchestrator:
    """Return the orchestrator from app state, building it from env on first use."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is not None:
        return orchestrator
    from ..adapters.env_config import orchestrator_from_env

    orchestrator = orchestrator_from_env()
    request.app.state.orchestrator = orchestrator
    return orchestrator
