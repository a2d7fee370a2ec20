"""
App config from environment with defaults.
Uses pydantic-settings so all env vars are validated and documented in one model.
Settings are read once and turned into an immutable PreviewConfig that the
orchestrator receives at construction.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .keys import cdn_base_url

# Sampling bounds: at least two samples so a preview shows movement across the video.
MIN_SAMPLES = 2
DEFAULT_MAX_SAMPLES = 6


class PreviewConfig(BaseModel):
    """Encoding and addressing parameters for one orchestrator."""

    model_config = ConfigDict(frozen=True)

    cdn_base: str = Field(..., description="e.g. https://zone.b-cdn.net")
    duration_sec: float = Field(10.0, gt=0, description="Total preview duration T")
    sample_count: int = Field(6, ge=1, description="Desired number of sampled segments")
    max_samples: int = Field(DEFAULT_MAX_SAMPLES, ge=MIN_SAMPLES)
    width: int = Field(480, gt=0, description="Output width; height keeps aspect ratio")
    fps: int = Field(8, gt=0)
    quality: int = Field(75, ge=0, le=100)
    compression_level: int = Field(6, ge=0, le=6)


class PreviewSettings(BaseSettings):
    """
    All environment variables used by the preview service.
    Env vars are read from os.environ (UPPER_SNAKE_CASE by default).
    """

    model_config = SettingsConfigDict(
        env_file=None,  # .env is loaded by bootstrap_env() so the environment is ready
        extra="ignore",
    )

    # Object storage backend: bunny | s3
    storage_backend: str = "bunny"
    bunny_storage_zone: str = ""
    bunny_storage_api_key: str = ""
    bunny_storage_host: str = "storage.bunnycdn.com"
    cdn_domain: str = "b-cdn.net"
    # Overrides the zone-derived CDN base (e.g. custom hostname)
    cdn_base_url: str = ""

    # S3 (when storage_backend=s3)
    s3_bucket_name: str = ""
    aws_region: str = ""
    aws_endpoint_url: str = ""

    # Video record store backend: postgrest | dynamodb
    video_store_backend: str = "postgrest"
    supabase_url: str = ""
    supabase_service_key: str = ""
    videos_table: str = "videos"
    videos_table_name: str = ""

    # Preview encoding
    preview_duration_sec: float = 10.0
    preview_sample_count: int = 6
    preview_max_samples: int = DEFAULT_MAX_SAMPLES
    preview_width: int = 480
    preview_fps: int = 8
    preview_quality: int = 75
    preview_compression_level: int = 6
    ffmpeg_path: str = "ffmpeg"

    # HTTP intake server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @field_validator("preview_max_samples")
    @classmethod
    def clamp_max_samples(cls, v: int) -> int:
        return max(MIN_SAMPLES, v)

    @property
    def use_s3_storage(self) -> bool:
        return self.storage_backend.lower() == "s3"

    @property
    def use_dynamodb_store(self) -> bool:
        return self.video_store_backend.lower() == "dynamodb"

    @property
    def storage_base_url(self) -> str:
        return f"https://{self.bunny_storage_host}/{self.bunny_storage_zone}"

    def resolved_cdn_base(self) -> str:
        if self.cdn_base_url:
            return self.cdn_base_url.rstrip("/")
        return cdn_base_url(self.bunny_storage_zone, self.cdn_domain)

    def to_preview_config(self) -> PreviewConfig:
        return PreviewConfig(
            cdn_base=self.resolved_cdn_base(),
            duration_sec=self.preview_duration_sec,
            sample_count=self.preview_sample_count,
            max_samples=self.preview_max_samples,
            width=self.preview_width,
            fps=self.preview_fps,
            quality=self.preview_quality,
            compression_level=self.preview_compression_level,
        )


def get_settings() -> PreviewSettings:
    """Return validated settings from current environment."""
    return PreviewSettings()


def bootstrap_env() -> None:
    """
    Load .env from path in HLS_PREVIEW_ENV_FILE if set.
    Call once at app startup before using get_settings() so vars from the file are in os.environ.
    """
    import os

    import dotenv

    path = os.environ.get("HLS_PREVIEW_ENV_FILE")
    if path:
        dotenv.load_dotenv(Path(path).resolve())
