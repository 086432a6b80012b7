from __future__ import annotations

import datetime as dt
from functools import cmp_to_key
from typing import List, Optional

import numpy as np

from slideshow.models import Asset, AssetGroup
from slideshow.store import SeenTimeStore
from slideshow.utils import ensure_aware, get_logger, now_utc, shuffled

logger = get_logger(__name__)


def _representative(group: AssetGroup) -> Optional[Asset]:
    return group[0] if group else None


def _lookup(store: Optional[SeenTimeStore], group: AssetGroup) -> Optional[dt.datetime]:
    rep = _representative(group)
    if store is None or rep is None:
        return None
    try:
        return store.get(rep.id)
    except Exception as e:
        logger.warning("bias.lookup failed id=%s: %s", rep.id, e, extra={"asset_id": rep.id})
        return None


def _is_older(a: Optional[dt.datetime], b: Optional[dt.datetime]) -> bool:
    # an absent seen-time counts as never shown, i.e. older than any real one
    if a is None:
        return b is not None
    if b is None:
        return False
    return ensure_aware(a) < ensure_aware(b)


def in_season(asset: Optional[Asset], now: dt.datetime, tz: Optional[dt.tzinfo] = None) -> bool:
    """True when the asset was captured in the current month of an earlier year."""
    if asset is None or asset.creation_date is None:
        return False
    try:
        captured = ensure_aware(asset.creation_date, tz).astimezone(tz)
        current = ensure_aware(now, tz).astimezone(tz)
    except OverflowError:
        return False
    return captured.month == current.month and captured.year < current.year


def order_by_bias(
    groups: List[AssetGroup],
    store: Optional[SeenTimeStore],
    *,
    rng: np.random.Generator,
    now: Optional[dt.datetime] = None,
    recency_bias: float = 0.8,
    season_bias: float = 0.5,
    jitter: float = 0.0,
    tz: Optional[dt.tzinfo] = None,
) -> List[AssetGroup]:
    """Order groups so unseen content comes first and stale or seasonal content leads the rest.

    Groups whose representative (first asset) has no seen-time are shuffled
    and placed ahead of all others. Seen groups are shuffled, then sorted by
    descending ``recency + season (+ jitter)`` computed pairwise: a group
    earns ``recency_bias`` against any group it was last shown before.
    Equal scores keep their shuffled order.
    """
    if now is None:
        now = now_utc()

    never_seen: List[AssetGroup] = []
    seen: List[AssetGroup] = []
    for group in groups:
        if _lookup(store, group) is None:
            never_seen.append(group)
        else:
            seen.append(group)

    never_seen = shuffled(never_seen, rng)
    seen = shuffled(seen, rng)

    def score(group: AssetGroup, own: Optional[dt.datetime], other: Optional[dt.datetime]) -> float:
        s = recency_bias if _is_older(own, other) else 0.0
        if in_season(_representative(group), now, tz):
            s += season_bias
        if jitter > 0:
            s += float(rng.random()) * jitter
        return s

    def compare(g1: AssetGroup, g2: AssetGroup) -> int:
        t1 = _lookup(store, g1)
        t2 = _lookup(store, g2)
        s1 = score(g1, t1, t2)
        s2 = score(g2, t2, t1)
        if s1 > s2:
            return -1
        if s1 < s2:
            return 1
        return 0

    seen.sort(key=cmp_to_key(compare))

    logger.info("bias.order: never_seen=%d seen=%d", len(never_seen), len(seen))
    return never_seen + seen
