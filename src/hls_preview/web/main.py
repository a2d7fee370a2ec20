"""FastAPI app: accept preview jobs, acknowledge immediately, run them in the background."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from ..config import bootstrap_env, get_settings
from ..errors import ValidationError
from ..logging_config import configure_logging
from ..models import PreviewAccepted, PreviewJob, PreviewRequest, VideoInsertedWebhook
from .deps import get_orchestrator

# Load .env from HLS_PREVIEW_ENV_FILE if set. Unset in deployed environments.
bootstrap_env()
configure_logging(get_settings().log_level.upper())
logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    orchestrator = getattr(app.state, "orchestrator", None)
    if orchestrator is not None:
        if orchestrator.active_jobs:
            logger.info(
                "shutdown: waiting for %s preview job(s) to finish", orchestrator.active_jobs
            )
            await orchestrator.drain()
        await orchestrator.aclose()


app = FastAPI(title="HLS Preview", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=CORS_ALLOW_HEADERS,
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _read_json(request: Request) -> dict:
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _field_names(exc: PydanticValidationError) -> list[str]:
    names: list[str] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else "body"
        if name not in names:
            names.append(name)
    return names


def _accepted(job: PreviewJob) -> JSONResponse:
    body = PreviewAccepted(video_id=job.video_id, title=job.title)
    return JSONResponse(status_code=202, content=body.model_dump(by_alias=True))


@app.post("/previews")
async def create_preview(request: Request) -> JSONResponse:
    """Validate the intake payload, spawn the preview job, and return 202 without waiting."""
    data = await _read_json(request)
    try:
        job = PreviewRequest.model_validate(data).to_job()
    except PydanticValidationError as e:
        fields = ", ".join(_field_names(e))
        logger.info("intake: rejected payload (fields=%s)", fields)
        raise ValidationError(f"Missing or invalid required fields: {fields}")
    orchestrator = get_orchestrator(request)
    orchestrator.spawn(job)
    logger.info("intake: video_id=%s accepted title=%s", job.video_id, job.title)
    return _accepted(job)


@app.post("/webhooks/video-inserted")
async def video_inserted(request: Request) -> JSONResponse:
    """Database insert webhook: start a preview for new rows that carry an HLS URL."""
    data = await _read_json(request)
    try:
        job = VideoInsertedWebhook.model_validate(data).to_job()
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid webhook payload: {', '.join(_field_names(e))}")
    if job is None:
        return JSONResponse(
            status_code=200,
            content={"status": "skipped", "message": "No processing needed"},
        )
    get_orchestrator(request).spawn(job)
    logger.info("webhook: video_id=%s auto-processing", job.video_id)
    return _accepted(job)


def serve() -> None:
    """Console entrypoint: run the intake server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
