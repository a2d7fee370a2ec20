"""
Segment sampling: pick a bounded number of segments spread across the playlist.

Indices follow index(i) = round(i * (n - 1) / (k - 1)) for i in [0, k - 1], with
half-up rounding. A rounding collision is backfilled with the next unused index
and the result is returned in ascending order.
"""

from __future__ import annotations

import math

from .config import MIN_SAMPLES


def choose_sample_count(desired: int, max_samples: int) -> int:
    """Clamp the desired sample count to [MIN_SAMPLES, max_samples]."""
    return max(MIN_SAMPLES, min(desired, max_samples))


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _next_unused(candidate: int, used: set[int], n: int) -> int:
    """Next index >= candidate not in used; searches downward once the top is reached."""
    for idx in range(candidate, n):
        if idx not in used:
            return idx
    for idx in range(candidate - 1, -1, -1):
        if idx not in used:
            return idx
    raise ValueError("no unused index left")


def sample_indices(n: int, k: int) -> list[int]:
    """
    Return ascending unique segment indices.

    When n <= k every index is returned; otherwise exactly k indices, the first
    and last always included.
    """
    if n <= 0:
        return []
    if k <= 0:
        raise ValueError(f"sample count must be positive, got {k}")
    if n <= k:
        return list(range(n))
    if k == 1:
        return [0]
    step = (n - 1) / (k - 1)
    used: set[int] = set()
    for i in range(k):
        idx = _round_half_up(i * step)
        if idx in used:
            idx = _next_unused(idx, used, n)
        used.add(idx)
    return sorted(used)


def sample_segments(segment_urls: list[str], k: int) -> list[str]:
    """Map sample_indices onto the playlist's segment URLs, preserving order."""
    return [segment_urls[i] for i in sample_indices(len(segment_urls), k)]
