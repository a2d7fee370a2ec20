"""
Build adapter instances and the orchestrator from environment settings.

Storage (STORAGE_BACKEND):
- bunny (default): BUNNY_STORAGE_ZONE, BUNNY_STORAGE_API_KEY, optional BUNNY_STORAGE_HOST
- s3: S3_BUCKET_NAME, optional AWS_REGION, AWS_ENDPOINT_URL (e.g. for LocalStack)

Video store (VIDEO_STORE_BACKEND):
- postgrest (default): SUPABASE_URL, SUPABASE_SERVICE_KEY, optional VIDEOS_TABLE
- dynamodb: VIDEOS_TABLE_NAME, optional AWS_REGION, AWS_ENDPOINT_URL

CDN: CDN_DOMAIN (default b-cdn.net) or CDN_BASE_URL to override the zone-derived base.
"""

from __future__ import annotations

import httpx

from ..config import PreviewSettings, get_settings
from ..ffmpeg_encoder import FfmpegEncoder
from ..interfaces import ObjectStorage, VideoStore
from ..orchestrator import PreviewOrchestrator
from .bunny_storage import BunnyObjectStorage
from .dynamodb_store import DynamoDBVideoStore
from .postgrest_store import PostgrestVideoStore
from .s3_storage import S3ObjectStorage


def _require(value: str, env_name: str) -> str:
    if not value:
        raise KeyError(f"{env_name} must be set")
    return value


def object_storage_from_env(
    client: httpx.AsyncClient, settings: PreviewSettings | None = None
) -> ObjectStorage:
    """Build the configured ObjectStorage."""
    settings = settings or get_settings()
    if settings.use_s3_storage:
        return S3ObjectStorage(
            _require(settings.s3_bucket_name, "S3_BUCKET_NAME"),
            region_name=settings.aws_region or None,
            endpoint_url=settings.aws_endpoint_url or None,
        )
    _require(settings.bunny_storage_zone, "BUNNY_STORAGE_ZONE")
    return BunnyObjectStorage(
        client,
        settings.storage_base_url,
        _require(settings.bunny_storage_api_key, "BUNNY_STORAGE_API_KEY"),
    )


def video_store_from_env(
    client: httpx.AsyncClient, settings: PreviewSettings | None = None
) -> VideoStore:
    """Build the configured VideoStore."""
    settings = settings or get_settings()
    if settings.use_dynamodb_store:
        return DynamoDBVideoStore(
            _require(settings.videos_table_name, "VIDEOS_TABLE_NAME"),
            region_name=settings.aws_region or None,
            endpoint_url=settings.aws_endpoint_url or None,
        )
    return PostgrestVideoStore(
        client,
        _require(settings.supabase_url, "SUPABASE_URL"),
        _require(settings.supabase_service_key, "SUPABASE_SERVICE_KEY"),
        table=settings.videos_table,
    )


def orchestrator_from_env(settings: PreviewSettings | None = None) -> PreviewOrchestrator:
    """Build an orchestrator that owns its HTTP client (closed by aclose())."""
    settings = settings or get_settings()
    client = httpx.AsyncClient(follow_redirects=True)
    ffmpeg_path = settings.ffmpeg_path
    return PreviewOrchestrator(
        settings.to_preview_config(),
        client,
        object_storage_from_env(client, settings),
        video_store_from_env(client, settings),
        encoder_factory=lambda: FfmpegEncoder(ffmpeg_path),
        owns_client=True,
    )
