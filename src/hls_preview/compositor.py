"""
Preview composition: K ordered segments to one looping animated WebP of duration T.

Each segment is trimmed to T / K, scaled to a fixed width (lanczos, aspect kept),
resampled to a fixed frame rate, and the video-only streams are concatenated in
order. A single segment skips the concat graph and is trimmed to T directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import urlsplit

from .config import PreviewConfig
from .errors import CompositionError
from .interfaces import MediaEncoder
from .keys import PREVIEW_EXTENSION
from .models import Segment

logger = logging.getLogger(__name__)

OUTPUT_NAME = f"preview.{PREVIEW_EXTENSION}"
DEFAULT_INPUT_EXTENSION = ".ts"

EncoderFactory = Callable[[], MediaEncoder]


def trim_durations(k: int, total_sec: float) -> list[float]:
    """Per-segment trim durations; they always sum to total_sec."""
    if k <= 0:
        raise ValueError(f"segment count must be positive, got {k}")
    return [total_sec / k] * k


def _fmt_seconds(value: float) -> str:
    return f"{value:.6f}".rstrip("0").rstrip(".")


def _input_name(segment: Segment) -> str:
    path = urlsplit(segment.url).path.lower()
    ext = DEFAULT_INPUT_EXTENSION
    dot = path.rfind(".")
    if dot != -1 and "/" not in path[dot:]:
        ext = path[dot:]
    return f"seg_{segment.index:05d}{ext}"


def _stream_filters(config: PreviewConfig) -> str:
    return f"scale={config.width}:-2:flags=lanczos,fps={config.fps}"


def _output_options(config: PreviewConfig) -> list[str]:
    return [
        "-an",
        "-c:v", "libwebp",
        "-lossless", "0",
        "-compression_level", str(config.compression_level),
        "-q:v", str(config.quality),
        "-loop", "0",
    ]


def build_filter_graph(k: int, config: PreviewConfig) -> str:
    """filter_complex for k > 1 inputs: per-input trim/scale/fps, then concat."""
    durations = trim_durations(k, config.duration_sec)
    chains = [
        f"[{i}:v]trim=duration={_fmt_seconds(d)},setpts=PTS-STARTPTS,"
        f"{_stream_filters(config)},setsar=1[v{i}]"
        for i, d in enumerate(durations)
    ]
    labels = "".join(f"[v{i}]" for i in range(k))
    return ";".join(chains) + f";{labels}concat=n={k}:v=1:a=0[out]"


def build_encoder_args(
    input_names: list[str], config: PreviewConfig, output_name: str = OUTPUT_NAME
) -> list[str]:
    """Encoder argument list for the given inputs (order preserved)."""
    if not input_names:
        raise CompositionError("no segments to compose")
    if len(input_names) == 1:
        return [
            "-i", input_names[0],
            "-t", _fmt_seconds(config.duration_sec),
            "-vf", _stream_filters(config),
            *_output_options(config),
            output_name,
        ]
    args: list[str] = []
    for name in input_names:
        args += ["-i", name]
    args += [
        "-filter_complex", build_filter_graph(len(input_names), config),
        "-map", "[out]",
        *_output_options(config),
        output_name,
    ]
    return args


def compose_preview(
    segments: list[Segment], encoder: MediaEncoder, config: PreviewConfig
) -> bytes:
    """
    Encode the ordered segments into one animated image and return its bytes.

    Raises:
        CompositionError: encoder failure or empty output.
    """
    if not segments:
        raise CompositionError("no segments to compose")
    ordered = sorted(segments, key=lambda s: s.index)
    names = [_input_name(s) for s in ordered]
    args = build_encoder_args(names, config)
    try:
        encoder.load()
        for name, seg in zip(names, ordered):
            encoder.write_input(name, seg.data)
        encoder.run(args)
        data = encoder.read_output(OUTPUT_NAME)
    except CompositionError:
        raise
    except OSError as e:
        raise CompositionError(f"encoder I/O failed: {e}") from e
    finally:
        encoder.close()
    if not data:
        raise CompositionError("encoder produced an empty preview")
    logger.debug("compose: %s segments -> %s bytes", len(ordered), len(data))
    return data
