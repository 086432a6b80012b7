from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

from slideshow.models import Asset
from slideshow.utils import ensure_aware, get_logger

logger = get_logger(__name__)


def dedup_by_creation_date(
    assets: Iterable[Asset],
    *,
    tolerance_seconds: float = 0.0,
    tz: Optional[dt.tzinfo] = None,
) -> List[Asset]:
    """Keep the first asset seen for each capture timestamp, preserving input order.

    Timestamps are compared as instants; naive values are read in ``tz`` (or
    the system local zone), matching how pairing interprets them. Assets
    without a ``creation_date`` share a single "missing" key, so only the
    first of them survives. With ``tolerance_seconds > 0`` an asset is dropped
    when its timestamp lies within the window of any already kept asset.
    """
    seen_dates = set()
    kept_dates: List[dt.datetime] = []
    missing_seen = False
    out: List[Asset] = []
    total = 0

    for asset in assets:
        total += 1
        if asset.creation_date is None:
            if missing_seen:
                continue
            missing_seen = True
            out.append(asset)
            continue

        ts = ensure_aware(asset.creation_date, tz)
        if tolerance_seconds > 0:
            if any(abs((ts - k).total_seconds()) <= tolerance_seconds for k in kept_dates):
                continue
            kept_dates.append(ts)
        else:
            if ts in seen_dates:
                continue
            seen_dates.add(ts)
        out.append(asset)

    logger.info("dedup.by_creation_date: kept=%d from=%d (tol=%.1fs)", len(out), total, tolerance_seconds)
    return out
