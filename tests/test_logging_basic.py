import json
import logging
from logging.handlers import TimedRotatingFileHandler

from slideshow.utils import JsonFormatter, _log_handlers


def test_json_formatter_includes_context():
    record = logging.LogRecord("slideshow.x", logging.INFO, __file__, 1, "curated assets=%d", (3,), None)
    record.run_id = "abc123"
    record.frame_id = "hall"
    out = json.loads(JsonFormatter().format(record))
    assert out["msg"] == "curated assets=3"
    assert out["run_id"] == "abc123" and out["frame_id"] == "hall"
    assert "asset_id" not in out
    assert out["ts"].endswith("Z")


def test_empty_log_dir_disables_file_handler(monkeypatch):
    monkeypatch.setenv("LOG_DIR", "")
    handlers = _log_handlers(json_mode=True)
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, JsonFormatter)


def test_log_file_lands_in_log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_FILE", "frame.log")
    handlers = _log_handlers(json_mode=False)
    files = [h for h in handlers if isinstance(h, TimedRotatingFileHandler)]
    try:
        assert len(files) == 1
        assert files[0].baseFilename == str(tmp_path / "logs" / "frame.log")
    finally:
        for h in handlers:
            h.close()
