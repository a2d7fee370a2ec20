"""Tests for preview composition: trim math, encoder arguments, encoder failures."""

import pytest

from hls_preview.compositor import (
    OUTPUT_NAME,
    build_encoder_args,
    build_filter_graph,
    compose_preview,
    trim_durations,
)
from hls_preview.config import PreviewConfig
from hls_preview.errors import CompositionError
from hls_preview.models import Segment

from helpers import CDN_BASE, FakeEncoder


def _segments(n: int, ext: str = "ts") -> list[Segment]:
    return [
        Segment(index=i, url=f"https://cdn.example/v/s{i}.{ext}?t=1", data=f"seg{i}".encode())
        for i in range(n)
    ]


@pytest.mark.parametrize("k", range(1, 7))
@pytest.mark.parametrize("total", [10.0, 7.5, 3.0])
def test_trim_durations_sum_to_total(k: int, total: float) -> None:
    """Per-segment trims are equal and add up to the preview duration."""
    durations = trim_durations(k, total)
    assert len(durations) == k
    assert sum(durations) == pytest.approx(total)
    assert len(set(durations)) == 1


def test_trim_durations_rejects_zero() -> None:
    """A zero segment count is a programming error, not an empty preview."""
    with pytest.raises(ValueError):
        trim_durations(0, 10.0)


def test_filter_graph_concats_in_order(preview_config: PreviewConfig) -> None:
    """Each input gets its own trim chain and concat keeps input order."""
    graph = build_filter_graph(5, preview_config)
    assert graph.startswith("[0:v]trim=duration=2,setpts=PTS-STARTPTS,")
    assert "scale=480:-2:flags=lanczos,fps=8" in graph
    assert graph.endswith("[v0][v1][v2][v3][v4]concat=n=5:v=1:a=0[out]")
    assert graph.count("trim=duration=2,") == 5


def test_filter_graph_uneven_split() -> None:
    """Durations that do not divide evenly are still written with six decimals at most."""
    config = PreviewConfig(cdn_base=CDN_BASE, duration_sec=10.0)
    graph = build_filter_graph(3, config)
    assert "trim=duration=3.333333," in graph


def test_encoder_args_multiple_inputs(preview_config: PreviewConfig) -> None:
    """Multiple inputs use filter_complex, map [out] and the libwebp output options."""
    args = build_encoder_args(["a.ts", "b.ts", "c.ts"], preview_config)
    assert args[:6] == ["-i", "a.ts", "-i", "b.ts", "-i", "c.ts"]
    assert "-filter_complex" in args
    assert args[args.index("-map") + 1] == "[out]"
    assert args[args.index("-c:v") + 1] == "libwebp"
    assert args[args.index("-loop") + 1] == "0"
    assert args[args.index("-q:v") + 1] == "75"
    assert args[args.index("-lossless") + 1] == "0"
    assert "-an" in args
    assert args[-1] == OUTPUT_NAME


def test_encoder_args_single_input_has_no_concat(preview_config: PreviewConfig) -> None:
    """One input is trimmed to the full duration with a plain -vf chain."""
    args = build_encoder_args(["only.ts"], preview_config)
    assert "-filter_complex" not in args
    assert not any("concat" in a for a in args)
    assert args[args.index("-t") + 1] == "10"
    assert args[args.index("-vf") + 1] == "scale=480:-2:flags=lanczos,fps=8"
    assert args[-1] == OUTPUT_NAME


def test_compose_preview_writes_inputs_and_returns_output(preview_config: PreviewConfig) -> None:
    """Every segment is written to the encoder and its output bytes are returned."""
    encoder = FakeEncoder(output=b"webp-bytes")
    data = compose_preview(_segments(3), encoder, preview_config)
    assert data == b"webp-bytes"
    assert list(encoder.inputs) == ["seg_00000.ts", "seg_00001.ts", "seg_00002.ts"]
    assert encoder.inputs["seg_00001.ts"] == b"seg1"
    assert encoder.loaded and encoder.closed
    assert encoder.args is not None
    assert "concat=n=3:v=1:a=0[out]" in encoder.args[encoder.args.index("-filter_complex") + 1]


def test_compose_preview_keeps_fmp4_extension(preview_config: PreviewConfig) -> None:
    """Input names keep the segment's container extension so ffmpeg detects the container."""
    encoder = FakeEncoder()
    compose_preview(_segments(2, ext="m4s"), encoder, preview_config)
    assert list(encoder.inputs) == ["seg_00000.m4s", "seg_00001.m4s"]


def test_compose_preview_orders_by_index(preview_config: PreviewConfig) -> None:
    """Inputs follow sample index, not the order segments were passed in."""
    encoder = FakeEncoder()
    segments = list(reversed(_segments(3)))
    compose_preview(segments, encoder, preview_config)
    assert encoder.args[1] == "seg_00000.ts"
    assert encoder.args[5] == "seg_00002.ts"


def test_compose_preview_single_segment(preview_config: PreviewConfig) -> None:
    """A single segment is encoded without a concat graph."""
    encoder = FakeEncoder()
    compose_preview(_segments(1), encoder, preview_config)
    assert "-filter_complex" not in encoder.args
    assert encoder.args[encoder.args.index("-t") + 1] == "10"


def test_compose_preview_encoder_failure(preview_config: PreviewConfig) -> None:
    """Encoder failures propagate as CompositionError and the encoder is still closed."""
    encoder = FakeEncoder(fail=True)
    with pytest.raises(CompositionError):
        compose_preview(_segments(2), encoder, preview_config)
    assert encoder.closed


def test_compose_preview_empty_output(preview_config: PreviewConfig) -> None:
    """An empty output file counts as a composition failure."""
    with pytest.raises(CompositionError):
        compose_preview(_segments(2), FakeEncoder(output=b""), preview_config)


def test_compose_preview_no_segments(preview_config: PreviewConfig) -> None:
    """An empty segment list raises CompositionError."""
    with pytest.raises(CompositionError):
        compose_preview([], FakeEncoder(), preview_config)
