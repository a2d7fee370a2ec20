"""
Error taxonomy for the preview pipeline.

ValidationError is raised synchronously at intake (HTTP 400). Everything else is
raised inside the background job, logged with stage context, and ends the job.
"""

from __future__ import annotations


class PreviewError(Exception):
    """Base class for all pipeline errors."""


class ValidationError(PreviewError):
    """Intake payload is malformed or missing a required field."""


class FetchError(PreviewError):
    """Playlist could not be fetched (transport failure or non-2xx)."""

    def __init__(self, url: str, status: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "request failed")
        super().__init__(f"fetch {url} failed: {detail}")


class EmptyManifestError(PreviewError):
    """Playlist parsed but contained no segment references."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"no segments found in playlist {url}")


class SegmentDownloadError(PreviewError):
    """A sampled segment failed to download; the whole job is aborted."""

    def __init__(
        self, index: int, url: str, status: int | None = None, reason: str = ""
    ) -> None:
        self.index = index
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "request failed")
        label = "init segment" if index < 0 else f"segment {index}"
        super().__init__(f"{label} ({url}) download failed: {detail}")


class CompositionError(PreviewError):
    """Encoder failed or produced no output."""

    def __init__(self, message: str, stderr: str = "") -> None:
        self.stderr = stderr
        super().__init__(message)


class UploadError(PreviewError):
    """Object storage rejected the preview upload."""

    def __init__(self, key: str, status: int | None, body: str = "") -> None:
        self.key = key
        self.status = status
        self.body = body
        super().__init__(f"upload of {key} failed: HTTP {status} {body}".rstrip())


class RecordError(PreviewError):
    """Video record could not be updated after a successful upload."""

    def __init__(self, video_id: str, status: int | None = None, body: str = "") -> None:
        self.video_id = video_id
        self.status = status
        self.body = body
        super().__init__(
            f"update of video {video_id} failed: HTTP {status} {body}".rstrip()
        )
