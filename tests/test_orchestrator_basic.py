import json

import pytest
import yaml

from slideshow.orchestrator import run_once


def _manifest():
    items = []
    for i in range(4):
        items.append({
            "id": f"L{i}",
            "pixel_width": 4000,
            "pixel_height": 3000,
            "creation_date": f"2023-0{i + 1}-10T12:00:00Z",
        })
    items.append({"id": "P0", "pixel_width": 3000, "pixel_height": 4000, "creation_date": "2023-07-01T12:00:00Z"})
    items.append({"id": "P1", "pixel_width": 3000, "pixel_height": 4000, "creation_date": "2023-07-01T12:00:40Z"})
    return items


def _write_config(tmp_path, **extra):
    manifest = tmp_path / "album.json"
    manifest.write_text(json.dumps(_manifest()), encoding="utf-8")
    cfg = {
        "frame_id": "test-frame",
        "source": {"manifest": str(manifest)},
        "store": {"path": str(tmp_path / "seen.json")},
        "processing": {"seed": 1},
        "output": {"dir": str(tmp_path / "out"), "formats": ["json", "txt"]},
    }
    cfg.update(extra)
    path = tmp_path / "frame.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


def test_run_once_writes_outputs(tmp_path):
    files = run_once(str(_write_config(tmp_path)))
    assert len(files) == 2
    js = json.loads(open([f for f in files if f.endswith(".json")][0], encoding="utf-8").read())
    assert js["frame_id"] == "test-frame"
    assert js["count"] == 6
    assert sorted(js["assets"]) == ["L0", "L1", "L2", "L3", "P0", "P1"]
    assert ["P0", "P1"] in js["slides"] or ["P1", "P0"] in js["slides"]
    assert len(js["slides"]) == 5


def test_simulate_records_seen_times(tmp_path):
    run_once(str(_write_config(tmp_path)), overrides={"simulate_slides": 2})
    seen = json.loads((tmp_path / "seen.json").read_text(encoding="utf-8"))
    assert 1 <= len(seen) <= 3


def test_invalid_config_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({"frame_id": "x"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Config validation error"):
        run_once(str(path))


def test_invalid_manifest_raises(tmp_path):
    cfg_path = _write_config(tmp_path)
    (tmp_path / "album.json").write_text(json.dumps([{"id": "x", "pixel_width": -1, "pixel_height": 2}]), encoding="utf-8")
    with pytest.raises(ValueError, match="Manifest validation error"):
        run_once(str(cfg_path))
