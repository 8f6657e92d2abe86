"""File logging setup.

The terminal is in raw mode while the UI runs, so loguru's default stderr
sink is replaced with a rotating file sink.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .config import LOG_DIR

LOG_FILENAME = "algoscales.log"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def configure_logging(level: str = "INFO", log_dir: Path | None = None) -> Path:
    """Route all log output to ``<log_dir>/algoscales.log`` and return that path."""
    target_dir = LOG_DIR if log_dir is None else log_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / LOG_FILENAME
    logger.remove()
    logger.add(
        log_path,
        level=level.upper(),
        format=LOG_FORMAT,
        rotation="1 MB",
        retention=3,
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )
    return log_path
