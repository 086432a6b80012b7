"""Seen-time stores: asset id -> last instant the asset was on screen."""

from __future__ import annotations

import datetime as dt
import json
import os
import tempfile
from typing import Dict, Optional, Protocol

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from slideshow.utils import ensure_aware, get_logger, parse_datetime_safe

logger = get_logger(__name__)


class SeenTimeStore(Protocol):
    def get(self, asset_id: str) -> Optional[dt.datetime]: ...

    def set(self, asset_id: str, when: dt.datetime) -> None: ...


class InMemorySeenTimeStore:
    def __init__(self, initial: Optional[Dict[str, dt.datetime]] = None):
        self._data: Dict[str, dt.datetime] = dict(initial or {})

    def get(self, asset_id: str) -> Optional[dt.datetime]:
        return self._data.get(asset_id)

    def set(self, asset_id: str, when: dt.datetime) -> None:
        self._data[asset_id] = when

    def __len__(self) -> int:
        return len(self._data)


class JsonFileSeenTimeStore:
    """File-backed store; every ``set`` rewrites the file atomically.

    The file holds a flat JSON object ``{asset_id: iso8601}``. Unreadable files
    load as empty so the slideshow keeps running on a fresh history.
    """

    def __init__(self, path: str):
        self.path = path
        self._data: Dict[str, dt.datetime] = self._load()

    def _load(self) -> Dict[str, dt.datetime]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("store.load failed path=%s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("store.load ignored non-object payload path=%s", self.path)
            return {}
        out: Dict[str, dt.datetime] = {}
        for k, v in raw.items():
            ts = parse_datetime_safe(v) if isinstance(v, str) else None
            if ts is not None:
                out[str(k)] = ts
        logger.info("store.load: entries=%d path=%s", len(out), self.path)
        return out

    def get(self, asset_id: str) -> Optional[dt.datetime]:
        return self._data.get(asset_id)

    def set(self, asset_id: str, when: dt.datetime) -> None:
        updated = dict(self._data)
        updated[asset_id] = ensure_aware(when).astimezone(dt.timezone.utc)
        # memory only follows a successful write
        self._flush(updated)
        self._data = updated

    def __len__(self) -> int:
        return len(self._data)

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
           retry=retry_if_exception_type(OSError), reraise=True)
    def _flush(self, data: Dict[str, dt.datetime]) -> None:
        payload = {k: v.isoformat().replace("+00:00", "Z") for k, v in data.items()}
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".seen-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
