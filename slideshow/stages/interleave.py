from __future__ import annotations

from typing import List

from slideshow.models import Asset, AssetGroup
from slideshow.utils import get_logger

logger = get_logger(__name__)


def interleave(portrait_pairs: List[AssetGroup], landscapes: List[Asset]) -> List[Asset]:
    """Alternate one portrait pair then one landscape until both run out.

    Portrait groups that are not exactly two assets are skipped whole.
    """
    out: List[Asset] = []
    skipped = 0
    pi = li = 0
    while pi < len(portrait_pairs) or li < len(landscapes):
        if pi < len(portrait_pairs):
            pair = portrait_pairs[pi]
            if len(pair) == 2:
                out.extend(pair)
            else:
                skipped += 1
            pi += 1
        if li < len(landscapes):
            out.append(landscapes[li])
            li += 1

    if skipped:
        logger.warning("interleave: skipped malformed portrait groups=%d", skipped)
    logger.info("interleave: assets=%d pairs=%d landscapes=%d", len(out), len(portrait_pairs) - skipped, len(landscapes))
    return out
