"""Segment retrieval: download sampled segments into memory, in sample order."""

from __future__ import annotations

import logging

import httpx

from .errors import SegmentDownloadError
from .models import Segment

logger = logging.getLogger(__name__)

# SegmentDownloadError index reported for the #EXT-X-MAP initialization segment
INIT_SEGMENT_INDEX = -1


async def _download(client: httpx.AsyncClient, index: int, url: str) -> bytes:
    try:
        resp = await client.get(url)
    except httpx.HTTPError as e:
        raise SegmentDownloadError(index, url, reason=str(e)) from e
    if not resp.is_success:
        raise SegmentDownloadError(index, url, status=resp.status_code)
    return resp.content


async def fetch_segment(client: httpx.AsyncClient, index: int, url: str) -> Segment:
    """
    GET one segment and buffer its full body.

    Raises:
        SegmentDownloadError: transport failure or non-2xx status.
    """
    data = await _download(client, index, url)
    logger.debug("retrieve: segment %s %s (%s bytes)", index, url, len(data))
    return Segment(index=index, url=url, data=data)


async def retrieve_segments(
    client: httpx.AsyncClient, urls: list[str], *, init_url: str | None = None
) -> list[Segment]:
    """
    Download every sampled URL in order.

    When init_url is given it is fetched once, before any segment, and its bytes
    are prepended to every segment so each buffer decodes on its own. The first
    failure aborts retrieval; no partial result is returned.
    """
    init = b""
    if init_url:
        init = await _download(client, INIT_SEGMENT_INDEX, init_url)
        logger.debug("retrieve: init segment %s (%s bytes)", init_url, len(init))
    segments: list[Segment] = []
    for index, url in enumerate(urls):
        segment = await fetch_segment(client, index, url)
        if init:
            segment = segment.model_copy(update={"data": init + segment.data})
        segments.append(segment)
    return segments
