from __future__ import annotations

from typing import Iterable, List, Tuple

from slideshow.models import Asset, is_landscape
from slideshow.utils import get_logger

logger = get_logger(__name__)


def split_by_orientation(assets: Iterable[Asset]) -> Tuple[List[Asset], List[Asset]]:
    """Partition into ``(landscape, portrait)``; square images count as portrait."""
    landscape: List[Asset] = []
    portrait: List[Asset] = []
    for asset in assets:
        if is_landscape(asset):
            landscape.append(asset)
        else:
            portrait.append(asset)
    logger.info("orientation.split: landscape=%d portrait=%d", len(landscape), len(portrait))
    return landscape, portrait
