"""Pydantic models for preview jobs, playlist data, produced assets, and API DTOs."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class JobStage(str, Enum):
    """Lifecycle stage of a preview job."""

    ACCEPTED = "accepted"
    FETCHING = "fetching"
    PARSING = "parsing"
    SAMPLING = "sampling"
    RETRIEVING = "retrieving"
    COMPOSITING = "compositing"
    PUBLISHING = "publishing"
    RECORDING = "recording"
    DONE = "done"
    FAILED = "failed"


class VideoAsset(BaseModel):
    """Video record owned by the relational store; only preview_url is written here."""

    video_id: str = Field(..., description="Unique video identifier")
    owner_id: str = Field(..., description="Owning user")
    title: str | None = Field(None, description="Display title")
    media_url: str | None = Field(None, description="Full-length media reference (opaque)")
    preview_url: str | None = Field(None, description="CDN address of the animated preview")


class PreviewJob(BaseModel):
    """Process-scoped unit of work; not persisted, not resumable."""

    model_config = ConfigDict(frozen=True)

    video_id: str = Field(..., min_length=1)
    hls_url: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    title: str | None = None


class PlaylistManifest(BaseModel):
    """Ordered absolute segment URLs parsed from a media playlist."""

    url: str
    segment_urls: list[str] = Field(default_factory=list)
    total_duration_sec: float = Field(0.0, description="Sum of #EXTINF durations (0 when absent)")
    init_url: str | None = Field(
        None, description="#EXT-X-MAP initialization segment of fragmented-MP4 playlists"
    )


class PlaylistVariant(BaseModel):
    """One #EXT-X-STREAM-INF entry of a master playlist."""

    url: str
    bandwidth: int = 0
    width: int | None = None
    height: int | None = None


class Segment(BaseModel):
    """A downloaded segment, buffered in memory and keyed by sample position."""

    index: int = Field(..., ge=0, description="Position within the sample")
    url: str
    data: bytes


class PreviewAsset(BaseModel):
    """Encoded animated image and the storage key it is published under."""

    key: str
    content_type: str = "image/webp"
    data: bytes


class JobRun(BaseModel):
    """In-process record of one job execution (for logs and tests)."""

    job: PreviewJob
    stage: JobStage = JobStage.ACCEPTED
    failed_stage: JobStage | None = None
    error: str | None = None
    preview_key: str | None = None
    preview_url: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.stage == JobStage.DONE


# --- API DTOs ---

class PreviewRequest(BaseModel):
    """Intake body for POST /previews."""

    video_id: str = Field(..., alias="videoId", min_length=1)
    hls_url: str = Field(..., alias="hlsUrl", min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)
    title: str | None = None

    def to_job(self) -> PreviewJob:
        return PreviewJob(
            video_id=self.video_id,
            hls_url=self.hls_url,
            user_id=self.user_id,
            title=self.title,
        )


class PreviewAccepted(BaseModel):
    """202 acknowledgement body."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "processing"
    video_id: str = Field(..., alias="videoId")
    title: str | None = None


class VideoInsertedRecord(BaseModel):
    """Row carried by the database insert webhook."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    video_url: str | None = None
    owner_id: str | None = None
    title: str | None = None


class VideoInsertedWebhook(BaseModel):
    """Body of POST /webhooks/video-inserted."""

    model_config = ConfigDict(extra="ignore")

    record: VideoInsertedRecord | None = None

    def to_job(self) -> PreviewJob | None:
        """Return a job when the record has everything a preview needs, else None."""
        rec = self.record
        if rec is None or not rec.id or not rec.video_url or not rec.owner_id:
            return None
        return PreviewJob(
            video_id=rec.id,
            hls_url=rec.video_url,
            user_id=rec.owner_id,
            title=rec.title or "Untitled",
        )
