from __future__ import annotations

import datetime as dt
from typing import List, Optional

import numpy as np

from slideshow.models import Asset, AssetGroup
from slideshow.utils import ensure_aware, get_logger, local_date, shuffled

logger = get_logger(__name__)


def sort_by_creation_date(assets: List[Asset], tz: Optional[dt.tzinfo] = None) -> List[Asset]:
    # missing dates sort first; sorted() is stable for equal keys
    return sorted(assets, key=lambda a: ensure_aware(a.creation_date, tz))


def within_time_frame(a: Asset, b: Asset, *, minutes: float = 2, tz: Optional[dt.tzinfo] = None) -> bool:
    if a.creation_date is None or b.creation_date is None:
        return False
    delta = ensure_aware(a.creation_date, tz) - ensure_aware(b.creation_date, tz)
    return abs(delta.total_seconds()) <= minutes * 60


def same_local_day(a: Asset, b: Asset, tz: Optional[dt.tzinfo] = None) -> bool:
    if a.creation_date is None or b.creation_date is None:
        return False
    day_a = local_date(a.creation_date, tz)
    day_b = local_date(b.creation_date, tz)
    return day_a is not None and day_a == day_b


def pair_portraits(
    assets: List[Asset],
    *,
    rng: np.random.Generator,
    window_minutes: float = 2,
    tz: Optional[dt.tzinfo] = None,
) -> List[AssetGroup]:
    """Group portrait assets into side-by-side pairs.

    First pass walks the date-sorted assets and pairs neighbours shot within
    ``window_minutes`` of each other or on the same local day. Whatever is left
    is shuffled and paired in order; a final odd asset is dropped.
    """
    ordered = sort_by_creation_date(assets, tz)
    pairs: List[AssetGroup] = []
    remaining: List[Asset] = []

    i = 0
    while i < len(ordered):
        if i + 1 < len(ordered):
            cur, nxt = ordered[i], ordered[i + 1]
            if within_time_frame(cur, nxt, minutes=window_minutes, tz=tz) or same_local_day(cur, nxt, tz):
                pairs.append([cur, nxt])
                i += 2
                continue
        remaining.append(ordered[i])
        i += 1

    n_temporal = len(pairs)
    remaining = shuffled(remaining, rng)
    for j in range(0, len(remaining) - 1, 2):
        pairs.append([remaining[j], remaining[j + 1]])

    logger.info(
        "pairing.portraits: pairs=%d temporal=%d leftover=%d from=%d",
        len(pairs),
        n_temporal,
        len(remaining) % 2,
        len(assets),
    )
    return pairs
