# utils/logger.py
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

from imagebuilder_ops.core.constants import LOG_BACKUP_COUNT, LOG_ROTATION_MAX_BYTES

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(
    log_path: Path, enable_rotation: bool, max_bytes: int, backup_count: int
) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if not enable_rotation:
        return logging.FileHandler(log_path, encoding="utf-8")
    return logging.handlers.RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: Optional[str] = None,
    enable_rotation: bool = True,
    max_bytes: int = LOG_ROTATION_MAX_BYTES,
    backup_count: int = LOG_BACKUP_COUNT,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """Return a logger writing INFO+ to stdout and everything to logs/<log_file>.

    LOG_LEVEL overrides the default level; the log directory is ``log_dir``,
    then LOG_PATH, then ./logs.
    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.setLevel(logging.INFO)
    logger.addHandler(console)

    if log_file:
        log_path = Path(log_dir or os.environ.get("LOG_PATH", "logs")) / log_file
        try:
            handler = _file_handler(log_path, enable_rotation, max_bytes, backup_count)
        except OSError as e:
            logger.warning(f"Cannot write log file {log_path}: {e}. Logging to console only.")
        else:
            handler.setFormatter(formatter)
            handler.setLevel(logging.DEBUG)
            logger.addHandler(handler)

    # Root handlers would print every message twice
    logger.propagate = False
    return logger
