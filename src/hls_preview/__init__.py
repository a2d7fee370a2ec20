"""Animated preview generation for HLS videos."""

from .config import PreviewConfig, PreviewSettings, get_settings
from .errors import (
    CompositionError,
    EmptyManifestError,
    FetchError,
    PreviewError,
    RecordError,
    SegmentDownloadError,
    UploadError,
    ValidationError,
)
from .interfaces import MediaEncoder, ObjectStorage, VideoStore
from .keys import build_cdn_url, build_preview_key, parse_preview_key
from .logging_config import configure_logging
from .models import (
    JobRun,
    JobStage,
    PlaylistManifest,
    PreviewAsset,
    PreviewJob,
    Segment,
    VideoAsset,
)
from .orchestrator import PreviewOrchestrator

__version__ = "0.1.0"
__all__ = [
    "CompositionError",
    "EmptyManifestError",
    "FetchError",
    "JobRun",
    "JobStage",
    "MediaEncoder",
    "ObjectStorage",
    "PlaylistManifest",
    "PreviewAsset",
    "PreviewConfig",
    "PreviewError",
    "PreviewJob",
    "PreviewOrchestrator",
    "PreviewSettings",
    "RecordError",
    "Segment",
    "SegmentDownloadError",
    "UploadError",
    "ValidationError",
    "VideoAsset",
    "VideoStore",
    "build_cdn_url",
    "build_preview_key",
    "configure_logging",
    "get_settings",
    "parse_preview_key",
]
