"""Tests for preview publishing and result recording."""

import asyncio

import pytest

from hls_preview.errors import RecordError, UploadError
from hls_preview.models import VideoAsset
from hls_preview.publisher import build_preview_asset, publish_preview
from hls_preview.recorder import record_preview

from helpers import CDN_BASE, FakeObjectStorage, FakeVideoStore


def test_build_preview_asset() -> None:
    """The asset carries the preview key, the WebP content type and the bytes."""
    asset = build_preview_asset("vid-1", b"webp")
    assert asset.key == "previews/vid-1/preview.webp"
    assert asset.content_type == "image/webp"
    assert asset.data == b"webp"


def test_publish_overwrites_same_key() -> None:
    """Publishing twice for one video overwrites the same object."""
    storage = FakeObjectStorage()
    asyncio.run(publish_preview(storage, build_preview_asset("vid-1", b"first")))
    key = asyncio.run(publish_preview(storage, build_preview_asset("vid-1", b"second")))
    assert key == "previews/vid-1/preview.webp"
    assert storage.objects == {key: (b"second", "image/webp")}


def test_publish_propagates_upload_error() -> None:
    """Storage failures propagate as UploadError."""
    storage = FakeObjectStorage(fail_status=403)
    with pytest.raises(UploadError):
        asyncio.run(publish_preview(storage, build_preview_asset("vid-1", b"x")))


def test_record_preview_writes_cdn_url() -> None:
    """The CDN URL of the key is written to the video record and returned."""
    store = FakeVideoStore()
    store.videos["vid-1"] = VideoAsset(
        video_id="vid-1", owner_id="u", title="t", media_url="https://v/index.m3u8"
    )
    url = asyncio.run(record_preview(store, "vid-1", CDN_BASE, "previews/vid-1/preview.webp"))
    assert url == f"{CDN_BASE}/previews/vid-1/preview.webp"
    assert store.videos["vid-1"].preview_url == url


def test_record_preview_unknown_video() -> None:
    """Recording for an unknown video raises RecordError."""
    with pytest.raises(RecordError):
        asyncio.run(
            record_preview(FakeVideoStore(), "missing", CDN_BASE, "previews/missing/preview.webp")
        )
