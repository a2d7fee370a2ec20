"""Shared test helpers: in-memory storage, video store, encoder, and mocked HTTP transports."""

import httpx

from hls_preview.errors import CompositionError, RecordError, UploadError
from hls_preview.models import PreviewJob, VideoAsset

CDN_BASE = "https://zone.b-cdn.net"


def make_playlist(
    segment_lines: list[str], *, extinf: float = 4.0, init: str | None = None
) -> str:
    """Build a media playlist with one #EXTINF per segment; init adds an #EXT-X-MAP."""
    lines = ["#EXTM3U", "#EXT-X-VERSION:3", "#EXT-X-TARGETDURATION:4"]
    if init is not None:
        lines.append(f'#EXT-X-MAP:URI="{init}"')
    for ref in segment_lines:
        lines.append(f"#EXTINF:{extinf},")
        lines.append(ref)
    lines.append("#EXT-X-ENDLIST")
    return "\n".join(lines) + "\n"


def mock_http_client(routes: dict[str, httpx.Response], requests: list[httpx.Request]):
    """AsyncClient whose transport answers from routes (by full URL) and records every request."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        url = str(request.url)
        if url in routes:
            return routes[url]
        return httpx.Response(404, text="not found")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeObjectStorage:
    """ObjectStorage for tests: in-memory objects, optional failure status."""

    def __init__(self, fail_status: int | None = None) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_status = fail_status

    async def put(self, key: str, body: bytes, *, content_type: str) -> None:
        if self.fail_status is not None:
            raise UploadError(key, self.fail_status, "rejected")
        self.objects[key] = (body, content_type)


class FakeVideoStore:
    """VideoStore for tests: in-memory VideoAsset rows, optional failure."""

    def __init__(self, *, fail: bool = False) -> None:
        self.videos: dict[str, VideoAsset] = {}
        self.fail = fail

    async def set_preview(self, video_id: str, preview_url: str) -> None:
        if self.fail:
            raise RecordError(video_id, 500, "db unavailable")
        video = self.videos.get(video_id)
        if video is None:
            raise RecordError(video_id, 404, "no such video")
        self.videos[video_id] = video.model_copy(update={"preview_url": preview_url})


class FakeEncoder:
    """MediaEncoder for tests: records inputs and args, returns fixed output bytes."""

    instances: list["FakeEncoder"] = []

    def __init__(self, output: bytes = b"RIFF....WEBPVP8X", fail: bool = False) -> None:
        self.output = output
        self.fail = fail
        self.inputs: dict[str, bytes] = {}
        self.args: list[str] | None = None
        self.loaded = False
        self.closed = False
        FakeEncoder.instances.append(self)

    def load(self) -> None:
        self.loaded = True

    def write_input(self, name: str, data: bytes) -> None:
        self.inputs[name] = data

    def run(self, args: list[str]) -> None:
        self.args = args
        if self.fail:
            raise CompositionError("ffmpeg exited with status 1", stderr="bad input")

    def read_output(self, name: str) -> bytes:
        return self.output

    def close(self) -> None:
        self.closed = True


class FakeOrchestrator:
    """Orchestrator stand-in for route tests: records spawned jobs, runs nothing."""

    def __init__(self, in_flight: int = 0) -> None:
        self.spawned: list[PreviewJob] = []
        self.in_flight = in_flight
        self.calls: list[str] = []
        self.closed = False

    @property
    def active_jobs(self) -> int:
        return self.in_flight

    def spawn(self, job: PreviewJob) -> None:
        self.spawned.append(job)

    async def drain(self) -> list:
        self.calls.append("drain")
        self.in_flight = 0
        return []

    async def aclose(self) -> None:
        self.calls.append("aclose")
        self.closed = True
