"""
Logging for the ranking API and the promotion scheduler.

Each process logs through loguru's shared logger to a coloured stderr sink
and to its own daily file under LOG_DIR (api_YYYY-MM-DD.log,
scheduler_YYYY-MM-DD.log).

Usage:
    from utils.logger import logger, init_logging

    init_logging("api")
    logger.info("Featured listing built")
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

_configured = False


def setup_logging(log_dir: Optional[Path] = None, log_level: str = "INFO", app_name: str = "app"):
    """
    Install the sinks once per process.

    Args:
        log_dir: Directory for the daily file; None logs to stderr only
        log_level: Minimum level on stderr; the file always keeps INFO and up
        app_name: Log file prefix ("api" or "scheduler")
    """
    global _configured

    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / f"{app_name}_{{time:YYYY-MM-DD}}.log",
            level="INFO",
            format=FILE_FORMAT,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            encoding="utf-8"
        )
        logger.info(f"Logging configured. Log directory: {log_dir}")

    _configured = True


def init_logging(app_name: str = "app", log_level: Optional[str] = None):
    """Configure logging from settings; log_level overrides LOG_LEVEL (e.g. --verbose)."""
    from config import settings, ensure_directories
    ensure_directories()
    setup_logging(
        log_dir=settings.LOG_DIR,
        log_level=log_level or settings.LOG_LEVEL,
        app_name=app_name
    )
