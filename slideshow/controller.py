from __future__ import annotations

import datetime as dt
from typing import Callable, List, Optional

from slideshow.models import Asset, is_landscape, is_portrait
from slideshow.store import SeenTimeStore
from slideshow.utils import get_logger, now_utc

logger = get_logger(__name__)


class SlideshowController:
    """Walks the curated sequence slide by slide and records what was shown.

    Slide layout is derived from orientation only: a portrait asset with a
    successor is shown together with it, anything else is shown alone.
    """

    def __init__(
        self,
        assets: List[Asset],
        store: SeenTimeStore,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        self.assets = list(assets)
        self.store = store
        self.clock = clock or now_utc
        self.index = 0

    def _slide_at(self, i: int) -> List[Asset]:
        asset = self.assets[i]
        if is_portrait(asset) and i + 1 < len(self.assets):
            return [asset, self.assets[i + 1]]
        return [asset]

    def current_slide(self) -> List[Asset]:
        if not self.assets:
            return []
        return self._slide_at(self.index)

    def mark_displayed(self) -> None:
        when = self.clock()
        for asset in self.current_slide():
            self.store.set(asset.id, when)

    def advance(self) -> int:
        if not self.assets:
            return self.index
        step = 1 if is_landscape(self.assets[self.index]) else 2
        prev = self.index
        self.index = (self.index + step) % len(self.assets)
        logger.debug("controller.advance: %d -> %d", prev, self.index)
        return self.index

    def refresh(self, new_assets: List[Asset]) -> bool:
        """Swap in a freshly curated sequence when its size changed."""
        if len(new_assets) == len(self.assets):
            return False
        logger.info("controller.refresh: %+d assets", len(new_assets) - len(self.assets))
        self.assets = list(new_assets)
        self.index = 0
        return True

    def slides(self) -> List[List[Asset]]:
        """All slides in order, one pass from the start of the sequence."""
        out: List[List[Asset]] = []
        i = 0
        while i < len(self.assets):
            slide = self._slide_at(i)
            out.append(slide)
            i += len(slide)
        return out
