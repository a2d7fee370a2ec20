"""
Backend-agnostic interfaces for object storage, the video record store, and the
media encoder.

Implementations (Bunny/S3 storage, PostgREST/DynamoDB video stores, ffmpeg) live
in hls_preview.adapters and hls_preview.ffmpeg_encoder. Pipeline logic depends on
these interfaces and receives the implementation by config.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStorage(Protocol):
    """Durable object storage for produced previews."""

    async def put(self, key: str, body: bytes, *, content_type: str) -> None:
        """Store body under key, overwriting any previous object.
        Raises UploadError when the backend rejects the write."""
        ...


@runtime_checkable
class VideoStore(Protocol):
    """Key/value view of the video table: only the preview address is written."""

    async def set_preview(self, video_id: str, preview_url: str) -> None:
        """Overwrite the preview address of one video.
        Raises RecordError when the update fails."""
        ...


@runtime_checkable
class MediaEncoder(Protocol):
    """
    Encoding engine capability boundary.

    The compositor writes named inputs, runs one encoder invocation with an
    argument list that references those names, and reads the named output.
    """

    def load(self) -> None:
        """Prepare the engine (working area, binary lookup). Idempotent."""
        ...

    def write_input(self, name: str, data: bytes) -> None:
        """Make data available to the engine under name."""
        ...

    def run(self, args: list[str]) -> None:
        """Run one encode. Raises CompositionError on failure."""
        ...

    def read_output(self, name: str) -> bytes:
        """Return the bytes the last run wrote under name."""
        ...

    def close(self) -> None:
        """Release the working area."""
        ...
