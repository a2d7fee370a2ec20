"""
Preview storage key format and CDN address convention.

Preview key format: previews/{video_id}/preview.{ext}
CDN address:        https://{storage_zone}.{cdn_domain}/{key}

The key depends only on video_id, so a new run for the same video overwrites the
previous preview. Parser behaviour: invalid keys return None.
"""

import re

PREVIEW_EXTENSION = "webp"
PREVIEW_CONTENT_TYPE = "image/webp"

_PREVIEW_KEY_PREFIX = "previews/"
_PREVIEW_FILENAME_RE = re.compile(r"^preview\.([a-z0-9]+)$")


def build_preview_key(video_id: str, ext: str = PREVIEW_EXTENSION) -> str:
    """Build the canonical storage key for a video's preview."""
    if not video_id or "/" in video_id:
        raise ValueError(f"invalid video_id for preview key: {video_id!r}")
    return f"{_PREVIEW_KEY_PREFIX}{video_id}/preview.{ext}"


def parse_preview_key(key: str) -> str | None:
    """
    Parse a preview key back into its video_id.

    Returns:
        video_id if the key is valid, otherwise None.
    """
    if not key.startswith(_PREVIEW_KEY_PREFIX):
        return None
    rest = key[len(_PREVIEW_KEY_PREFIX) :]
    if rest.count("/") != 1:
        return None
    video_id, filename = rest.split("/", 1)
    if not video_id or not _PREVIEW_FILENAME_RE.match(filename):
        return None
    return video_id


def cdn_base_url(storage_zone: str, cdn_domain: str) -> str:
    """Public base address served by the CDN for a storage zone."""
    return f"https://{storage_zone}.{cdn_domain}"


def build_cdn_url(cdn_base: str, key: str) -> str:
    """Join the CDN base and a storage key into the public preview address."""
    return f"{cdn_base.rstrip('/')}/{key.lstrip('/')}"
