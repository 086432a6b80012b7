import os
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from zoneinfo import ZoneInfo
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError
from typing import Optional, List, Sequence

import numpy as np

# ---------- Time helpers ----------

# Sentinel for a missing capture/modification date: earliest representable instant.
DISTANT_PAST = dt.datetime.min.replace(tzinfo=dt.timezone.utc)


def now_utc():
    return dt.datetime.now(dt.timezone.utc)


def resolve_tz(name: Optional[str] = None) -> dt.tzinfo:
    """Return the zone used for calendar rules (system local zone when ``name`` is empty)."""
    if name:
        return ZoneInfo(name)
    return dt.datetime.now().astimezone().tzinfo


def ensure_aware(ts: Optional[dt.datetime], tz: Optional[dt.tzinfo] = None) -> dt.datetime:
    """Normalize a timestamp for ordering.

    ``None`` maps to ``DISTANT_PAST``; naive values are interpreted in ``tz``
    (or the system local zone).
    """
    if ts is None:
        return DISTANT_PAST
    if ts.tzinfo is None:
        if tz is not None:
            return ts.replace(tzinfo=tz)
        try:
            return ts.astimezone()
        except (OverflowError, OSError):
            # too close to the calendar edges to localize
            return DISTANT_PAST
    return ts


def local_date(ts: dt.datetime, tz: Optional[dt.tzinfo] = None) -> Optional[dt.date]:
    """Calendar date of ``ts`` in ``tz``; ``None`` when the instant cannot be shifted into that zone."""
    try:
        return ensure_aware(ts, tz).astimezone(tz).date()
    except OverflowError:
        return None


def parse_datetime_safe(raw: str) -> Optional[dt.datetime]:
    """Best-effort ISO 8601 parsing for persisted timestamps.

    Returns a timezone-aware UTC datetime on success, otherwise ``None``.
    """

    if not raw:
        return None

    raw = raw.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"

    try:
        dt_obj = dt.datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=dt.timezone.utc)
    return dt_obj.astimezone(dt.timezone.utc)

# ---------- Randomness ----------

def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def shuffled(items: Sequence, rng: np.random.Generator) -> list:
    """Return a new list with ``items`` in random order."""
    if len(items) < 2:
        return list(items)
    order = rng.permutation(len(items))
    return [items[int(i)] for i in order]

# ---------- Config validation ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def validate_config(cfg: dict):
    here = os.path.dirname(os.path.abspath(__file__))
    schema_path = os.path.join(here, "schemas", "config.schema.json")
    schema = json.loads(load_file(schema_path))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ValueError(f"Config validation error: {e.message} at {list(e.path)}") from e

# ---------- Output writer ----------

def write_output(order: List[str], slides: List[List[str]], out_cfg: dict, frame_id: str) -> List[str]:
    out_dir = out_cfg["dir"]
    formats = out_cfg.get("formats", ["json"])
    os.makedirs(out_dir, exist_ok=True)
    now_local = dt.datetime.now().astimezone()
    ts = now_local.strftime("%Y%m%dT%H%M%S%z")
    base = os.path.join(out_dir, f"slideshow_{ts}")

    generated_files = []

    if "json" in formats:
        json_path = base + ".json"
        payload = {
            "frame_id": frame_id,
            "generated_at": now_local.isoformat(),
            "count": len(order),
            "assets": order,
            "slides": slides,
        }
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        generated_files.append(json_path)

    if "txt" in formats:
        txt_path = base + ".txt"
        with open(txt_path, "w", encoding="utf-8") as f:
            for slide in slides:
                f.write(" | ".join(slide) + "\n")
        generated_files.append(txt_path)

    return generated_files

# ---------- Logging ----------

# Extra record attributes promoted into JSON log lines when present.
_CONTEXT_FIELDS = ("run_id", "frame_id", "asset_id")

_LOGGER_INITIALIZED = False


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with run/frame context when the caller passed it via ``extra``."""

    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _log_handlers(json_mode: bool) -> List[logging.Handler]:
    """Console always; a daily-rotated file unless ``LOG_DIR`` is set empty (read-only frames)."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_dir = os.getenv("LOG_DIR", "logs")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.getenv("LOG_FILE", "slideshow.log")
        handlers.append(
            TimedRotatingFileHandler(os.path.join(log_dir, log_file), when="midnight", backupCount=7, encoding="utf-8")
        )
    fmt = JsonFormatter() if json_mode else logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    for h in handlers:
        h.setFormatter(fmt)
    return handlers


def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
    for h in _log_handlers(os.getenv("LOG_JSON", "false").lower() == "true"):
        h.setLevel(root.level)
        root.addHandler(h)

    _LOGGER_INITIALIZED = True


def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)
