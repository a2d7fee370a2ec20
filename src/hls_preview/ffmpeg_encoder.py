"""
ffmpeg-backed MediaEncoder.

Inputs and outputs are files in a private temporary directory; the encoder
arguments reference them by bare name and ffmpeg runs with that directory as cwd.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

from .errors import CompositionError

logger = logging.getLogger(__name__)

# Keep the tail of ffmpeg stderr in errors; full output can be very long.
STDERR_TAIL_CHARS = 2000


class FfmpegEncoder:
    """MediaEncoder implementation that shells out to the ffmpeg binary."""

    def __init__(self, ffmpeg_path: str = "ffmpeg") -> None:
        self._ffmpeg_path = ffmpeg_path
        self._binary: str | None = None
        self._tmp: tempfile.TemporaryDirectory | None = None

    @property
    def workdir(self) -> Path:
        if self._tmp is None:
            raise CompositionError("encoder not loaded")
        return Path(self._tmp.name)

    def load(self) -> None:
        if self._tmp is not None:
            return
        binary = shutil.which(self._ffmpeg_path)
        if binary is None:
            raise CompositionError(f"ffmpeg binary not found: {self._ffmpeg_path}")
        self._binary = binary
        self._tmp = tempfile.TemporaryDirectory(prefix="hls_preview_")

    def _path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise CompositionError(f"invalid encoder file name: {name!r}")
        return self.workdir / name

    def write_input(self, name: str, data: bytes) -> None:
        self._path(name).write_bytes(data)

    def run(self, args: list[str]) -> None:
        cmd = [self._binary or self._ffmpeg_path, "-y", "-hide_banner", "-loglevel", "error", *args]
        logger.debug("ffmpeg: %s", " ".join(cmd))
        try:
            subprocess.run(cmd, cwd=str(self.workdir), check=True, capture_output=True)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace")[-STDERR_TAIL_CHARS:]
            raise CompositionError(
                f"ffmpeg exited with status {e.returncode}", stderr=stderr
            ) from e
        except OSError as e:
            raise CompositionError(f"ffmpeg could not be started: {e}") from e

    def read_output(self, name: str) -> bytes:
        try:
            return self._path(name).read_bytes()
        except FileNotFoundError as e:
            raise CompositionError(f"encoder produced no output file {name}") from e

    def close(self) -> None:
        if self._tmp is not None:
            self._tmp.cleanup()
            self._tmp = None

    def __enter__(self) -> "FfmpegEncoder":
        self.load()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
