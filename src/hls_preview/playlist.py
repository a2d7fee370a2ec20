"""
Playlist fetch and parse: HLS manifest text to ordered absolute segment URLs.

A media playlist lists segments; a master playlist lists variant playlists
(#EXT-X-STREAM-INF). load_manifest follows one level of variant indirection so
callers can pass either.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

import httpx

from .errors import EmptyManifestError, FetchError
from .models import PlaylistManifest, PlaylistVariant

logger = logging.getLogger(__name__)

SEGMENT_EXTENSIONS = (".ts", ".m4s", ".mp4", ".m4v")

_EXTINF_PREFIX = "#EXTINF:"
_STREAM_INF_PREFIX = "#EXT-X-STREAM-INF:"
_MAP_PREFIX = "#EXT-X-MAP:"
_URI_RE = re.compile(r'(?:^|,)URI="([^"]+)"')
_BANDWIDTH_RE = re.compile(r"(?:^|,)BANDWIDTH=(\d+)")
_RESOLUTION_RE = re.compile(r"(?:^|,)RESOLUTION=(\d+)x(\d+)")


def manifest_base(url: str) -> str:
    """Scheme + host + path up to and including the last '/'."""
    parts = urlsplit(url)
    path = parts.path
    directory = path[: path.rfind("/") + 1] if "/" in path else "/"
    return f"{parts.scheme}://{parts.netloc}{directory}"


def is_absolute_url(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


def resolve_segment_url(base: str, ref: str) -> str:
    """
    Resolve a playlist reference against the manifest base.

    Absolute URLs are returned unchanged; root-relative references ("/a/b.ts")
    keep only the base's scheme and host.
    """
    if is_absolute_url(ref):
        return ref
    if ref.startswith("/"):
        parts = urlsplit(base)
        return f"{parts.scheme}://{parts.netloc}{ref}"
    return base + ref


def is_segment_reference(line: str) -> bool:
    """True if the line names a transport-stream or fragmented-MP4 segment."""
    path = line.split("?", 1)[0].split("#", 1)[0].lower()
    return path.endswith(SEGMENT_EXTENSIONS)


def _map_uri(line: str) -> str | None:
    match = _URI_RE.search(line[len(_MAP_PREFIX) :])
    return match.group(1) if match else None


def _extinf_duration(line: str) -> float:
    value = line[len(_EXTINF_PREFIX) :].split(",", 1)[0].strip()
    try:
        return float(value)
    except ValueError:
        return 0.0


def parse_manifest(text: str, manifest_url: str) -> PlaylistManifest:
    """
    Parse a media playlist into ordered absolute segment URLs.

    Fragmented-MP4 playlists name an initialization segment with #EXT-X-MAP;
    the first one is resolved like a segment reference and kept as init_url.

    Raises:
        EmptyManifestError: no segment references were found.
    """
    base = manifest_base(manifest_url)
    segment_urls: list[str] = []
    total_duration = 0.0
    init_url: str | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("#"):
            if line.startswith(_EXTINF_PREFIX):
                total_duration += _extinf_duration(line)
            elif line.startswith(_MAP_PREFIX) and init_url is None:
                uri = _map_uri(line)
                if uri:
                    init_url = resolve_segment_url(base, uri)
            continue
        if is_segment_reference(line):
            segment_urls.append(resolve_segment_url(base, line))
    if not segment_urls:
        raise EmptyManifestError(manifest_url)
    return PlaylistManifest(
        url=manifest_url,
        segment_urls=segment_urls,
        total_duration_sec=total_duration,
        init_url=init_url,
    )


def parse_variants(text: str, manifest_url: str) -> list[PlaylistVariant]:
    """Return the variant playlists of a master playlist (empty for media playlists)."""
    base = manifest_base(manifest_url)
    variants: list[PlaylistVariant] = []
    pending: dict | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith(_STREAM_INF_PREFIX):
            attrs = line[len(_STREAM_INF_PREFIX) :]
            bw = _BANDWIDTH_RE.search(attrs)
            res = _RESOLUTION_RE.search(attrs)
            pending = {
                "bandwidth": int(bw.group(1)) if bw else 0,
                "width": int(res.group(1)) if res else None,
                "height": int(res.group(2)) if res else None,
            }
            continue
        if line.startswith("#"):
            continue
        if pending is not None:
            variants.append(
                PlaylistVariant(url=resolve_segment_url(base, line), **pending)
            )
            pending = None
    return variants


def select_variant(variants: list[PlaylistVariant], min_width: int) -> PlaylistVariant:
    """
    Pick the cheapest variant that is still at least min_width wide.

    Variants without a RESOLUTION are only chosen when no variant reports one.
    Falls back to the widest variant when none is wide enough.
    """
    if not variants:
        raise ValueError("no variants to choose from")
    sized = [v for v in variants if v.width is not None]
    if not sized:
        return min(variants, key=lambda v: v.bandwidth)
    wide_enough = [v for v in sized if v.width >= min_width]
    if wide_enough:
        return min(wide_enough, key=lambda v: v.bandwidth)
    return max(sized, key=lambda v: (v.width, v.bandwidth))


async def fetch_manifest(client: httpx.AsyncClient, url: str) -> str:
    """
    GET the playlist text.

    Raises:
        FetchError: transport failure or non-2xx status.
    """
    try:
        resp = await client.get(url)
    except httpx.HTTPError as e:
        raise FetchError(url, reason=str(e)) from e
    if not resp.is_success:
        raise FetchError(url, status=resp.status_code)
    return resp.text


async def fetch_media_playlist(
    client: httpx.AsyncClient, url: str, *, min_width: int
) -> tuple[str, str]:
    """
    Fetch url; when it is a master playlist, fetch the selected variant instead.

    Returns:
        (media playlist text, media playlist URL) for parse_manifest.
    """
    text = await fetch_manifest(client, url)
    variants = parse_variants(text, url)
    if not variants:
        return text, url
    chosen = select_variant(variants, min_width)
    logger.info(
        "playlist: master playlist with %s variants, using %s (bandwidth=%s width=%s)",
        len(variants),
        chosen.url,
        chosen.bandwidth,
        chosen.width,
    )
    return await fetch_manifest(client, chosen.url), chosen.url


async def load_manifest(
    client: httpx.AsyncClient, url: str, *, min_width: int = 0
) -> PlaylistManifest:
    """Fetch and parse in one call."""
    text, media_url = await fetch_media_playlist(client, url, min_width=min_width)
    return parse_manifest(text, media_url)
