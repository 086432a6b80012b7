import json
import time
import uuid
import datetime as dt
from dataclasses import replace
from typing import Dict, Any, List, Optional

import yaml

from slideshow.controller import SlideshowController
from slideshow.models import Asset, parse_manifest
from slideshow.pipeline import run_processing_pipeline
from slideshow.store import InMemorySeenTimeStore, JsonFileSeenTimeStore, SeenTimeStore
from slideshow.utils import get_logger, load_file, make_rng, resolve_tz, validate_config, write_output

logger = get_logger(__name__)


def _load_assets(source_cfg: Dict[str, Any], tz: Optional[dt.tzinfo] = None) -> List[Asset]:
    """Read the asset manifest and pin naive timestamps to the frame's zone."""
    raw = json.loads(load_file(source_cfg["manifest"]))
    assets = parse_manifest(raw)
    if tz is None:
        return assets
    out = []
    for a in assets:
        changes = {}
        if a.creation_date is not None and a.creation_date.tzinfo is None:
            changes["creation_date"] = a.creation_date.replace(tzinfo=tz)
        if a.modification_date is not None and a.modification_date.tzinfo is None:
            changes["modification_date"] = a.modification_date.replace(tzinfo=tz)
        out.append(replace(a, **changes) if changes else a)
    return out


def _open_store(store_cfg: Optional[Dict[str, Any]]) -> SeenTimeStore:
    path = (store_cfg or {}).get("path")
    if path:
        return JsonFileSeenTimeStore(path)
    return InMemorySeenTimeStore()


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    processing = cfg.setdefault("processing", {})
    for key in ("seed", "pair_window_minutes", "recency_bias", "season_bias", "jitter", "dedup_tolerance_seconds", "timezone"):
        if overrides.get(key) is not None:
            processing[key] = overrides[key]

    if overrides.get("manifest") is not None:
        cfg.setdefault("source", {})["manifest"] = overrides["manifest"]
    if overrides.get("store_path") is not None:
        cfg.setdefault("store", {})["path"] = overrides["store_path"]
    if overrides.get("output_dir") is not None:
        cfg.setdefault("output", {})["dir"] = overrides["output_dir"]
    if overrides.get("simulate_slides") is not None:
        cfg.setdefault("simulate", {})["slides"] = int(overrides["simulate_slides"])  # type: ignore[arg-type]


def _simulate(controller: SlideshowController, n: int) -> None:
    """Show ``n`` slides back to back, recording each as seen."""
    for _ in range(n):
        if not controller.assets:
            return
        controller.mark_displayed()
        controller.advance()
    logger.info("simulate: slides=%d index=%d", n, controller.index)


def _execute_pipeline(cfg: Dict[str, Any], run_id: str, overrides: Optional[Dict[str, Any]] = None) -> List[str]:
    """Execute the curation pipeline with given configuration."""
    _apply_overrides(cfg, overrides)
    validate_config(cfg)

    frame_id = cfg["frame_id"]
    processing = cfg.get("processing", {})
    tz = resolve_tz(processing["timezone"]) if processing.get("timezone") else None
    logger.info("config loaded run=%s frame_id=%s manifest=%s", run_id, frame_id, cfg["source"]["manifest"],
                extra={"run_id": run_id, "frame_id": frame_id})

    t0 = time.monotonic()
    assets = _load_assets(cfg["source"], tz)
    logger.info("loaded assets=%d took_ms=%d", len(assets), int((time.monotonic()-t0)*1000))

    store = _open_store(cfg.get("store"))

    t1 = time.monotonic()
    ordered = run_processing_pipeline(assets, store, processing, rng=make_rng(processing.get("seed")))
    logger.info("curated assets=%d took_ms=%d", len(ordered), int((time.monotonic()-t1)*1000))

    controller = SlideshowController(ordered, store)
    slides = [[a.id for a in s] for s in controller.slides()]

    n_sim = int((cfg.get("simulate") or {}).get("slides", 0))
    if n_sim > 0:
        _simulate(controller, n_sim)

    if not ordered:
        logger.info("empty slideshow -> skip output")
        return []

    generated_files = write_output([a.id for a in ordered], slides, cfg["output"], frame_id)
    logger.info("output written dir=%s files=%d", cfg["output"]["dir"], len(generated_files))
    return generated_files


def run_once(config_path: str, *, overrides: Optional[Dict[str, Any]] = None) -> List[str]:
    """Execute pipeline once with given config file path."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id, extra={"run_id": run_id})

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
        return _execute_pipeline(cfg, run_id, overrides)

    except Exception as e:
        logger.error("Pipeline execution failed: %s", e, extra={"run_id": run_id})
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id, extra={"run_id": run_id})
