"""Asset publishing: upload the composed preview under its deterministic key."""

from __future__ import annotations

import logging

from .interfaces import ObjectStorage
from .keys import PREVIEW_CONTENT_TYPE, build_preview_key
from .models import PreviewAsset

logger = logging.getLogger(__name__)


def build_preview_asset(video_id: str, data: bytes) -> PreviewAsset:
    return PreviewAsset(
        key=build_preview_key(video_id),
        content_type=PREVIEW_CONTENT_TYPE,
        data=data,
    )


async def publish_preview(storage: ObjectStorage, asset: PreviewAsset) -> str:
    """
    Upload the asset, overwriting any earlier preview for the same video.

    Returns the storage key. UploadError from the backend propagates; no retry.
    """
    await storage.put(asset.key, asset.data, content_type=asset.content_type)
    logger.info("publish: uploaded %s (%s bytes)", asset.key, len(asset.data))
    return asset.key
