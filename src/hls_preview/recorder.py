"""Result recording: point the video record at the CDN address of its preview."""

from __future__ import annotations

import logging

from .interfaces import VideoStore
from .keys import build_cdn_url

logger = logging.getLogger(__name__)


async def record_preview(
    store: VideoStore, video_id: str, cdn_base: str, key: str
) -> str:
    """
    Overwrite VideoAsset.preview_url with the CDN address for key.

    Returns the address written. RecordError propagates; the uploaded object is
    left in place.
    """
    url = build_cdn_url(cdn_base, key)
    await store.set_preview(video_id, url)
    logger.info("record: video_id=%s preview_url=%s", video_id, url)
    return url
