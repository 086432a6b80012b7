from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

import numpy as np

from slideshow.models import Asset
from slideshow.stages.bias import order_by_bias
from slideshow.stages.dedup import dedup_by_creation_date
from slideshow.stages.interleave import interleave
from slideshow.stages.orientation import split_by_orientation
from slideshow.stages.pairing import pair_portraits
from slideshow.store import SeenTimeStore
from slideshow.utils import get_logger, make_rng, resolve_tz

logger = get_logger(__name__)


def process_assets(
    assets: List[Asset],
    store: Optional[SeenTimeStore],
    *,
    rng: np.random.Generator,
    now: Optional[dt.datetime] = None,
    window_minutes: float = 2,
    recency_bias: float = 0.8,
    season_bias: float = 0.5,
    jitter: float = 0.0,
    dedup_tolerance_seconds: float = 0.0,
    tz: Optional[dt.tzinfo] = None,
) -> List[Asset]:
    """Turn a raw asset list into the final display order."""
    if not assets:
        logger.info("pipeline: empty input")
        return []

    filtered = dedup_by_creation_date(assets, tolerance_seconds=dedup_tolerance_seconds, tz=tz)
    landscape, portrait = split_by_orientation(filtered)
    pairs = pair_portraits(portrait, rng=rng, window_minutes=window_minutes, tz=tz)

    bias_kwargs = dict(rng=rng, now=now, recency_bias=recency_bias, season_bias=season_bias, jitter=jitter, tz=tz)
    ordered_pairs = order_by_bias(pairs, store, **bias_kwargs)
    ordered_landscape = [g[0] for g in order_by_bias([[a] for a in landscape], store, **bias_kwargs)]

    return interleave(ordered_pairs, ordered_landscape)


def run_processing_pipeline(
    assets: List[Asset],
    store: Optional[SeenTimeStore],
    cfg: Dict[str, Any],
    *,
    rng: Optional[np.random.Generator] = None,
    now: Optional[dt.datetime] = None,
) -> List[Asset]:
    """Config-driven wrapper over :func:`process_assets` (reads ``processing.*``)."""
    if rng is None:
        rng = make_rng(cfg.get("seed"))
    return process_assets(
        assets,
        store,
        rng=rng,
        now=now,
        window_minutes=float(cfg.get("pair_window_minutes", 2)),
        recency_bias=float(cfg.get("recency_bias", 0.8)),
        season_bias=float(cfg.get("season_bias", 0.5)),
        jitter=float(cfg.get("jitter", 0.0)),
        dedup_tolerance_seconds=float(cfg.get("dedup_tolerance_seconds", 0)),
        tz=resolve_tz(cfg.get("timezone")) if cfg.get("timezone") else None,
    )
