from loguru import logger

import importlib
from utils.logger import setup_logging

# utils re-exports loguru's `logger`, shadowing the submodule attribute
logger_module = importlib.import_module("utils.logger")


def test_setup_logging_writes_daily_file_once(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module, "_configured", False)

    setup_logging(log_dir=tmp_path, log_level="WARNING", app_name="scheduler")
    setup_logging(log_dir=tmp_path / "other", app_name="api")
    logger.info("Promotion report 1 ended")
    logger.remove()

    files = list(tmp_path.glob("scheduler_*.log"))
    assert len(files) == 1
    assert "Promotion report 1 ended" in files[0].read_text(encoding="utf-8")
    assert not (tmp_path / "other").exists()
