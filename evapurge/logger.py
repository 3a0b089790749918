# evapurge/logger.py
"""
File logging for eva-purge.

Every named logger writes to one shared rotating file,
``~/.eva-purge/logs/eva_purge.log`` unless ``EVA_PURGE_LOG_DIR`` points
elsewhere.  Nothing is printed; the console belongs to ``evapurge.ui``.
"""

from __future__ import annotations

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

from evapurge import env

_LOG_NAME = "eva_purge.log"
_MAX_BYTES = 1_000_000
_BACKUP_COUNT = 5
_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_lock = threading.RLock()
_loggers: Dict[str, logging.Logger] = {}
_log_file: Path | None = None


def _current_path() -> Path:
    global _log_file
    if _log_file is None:
        _log_file = env.get_logs_dir() / _LOG_NAME
    return _log_file


def _file_handler() -> RotatingFileHandler:
    handler = RotatingFileHandler(
        _current_path(),
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _detach_file_handlers(lg: logging.Logger) -> list[RotatingFileHandler]:
    detached = [h for h in lg.handlers if isinstance(h, RotatingFileHandler)]
    for h in detached:
        lg.removeHandler(h)
        h.close()
    return detached


def get_logger(name: str = "evapurge") -> logging.Logger:
    """Return the cached logger for ``name``, wiring the file handler once."""
    with _lock:
        lg = _loggers.get(name)
        if lg is None:
            lg = logging.getLogger(name)
            lg.setLevel(logging.DEBUG)
            lg.propagate = False
            if not lg.handlers:
                lg.addHandler(_file_handler())
            _loggers[name] = lg
        return lg


def get_current_log_file() -> Path:
    return _current_path()


def reset_log_path() -> None:
    """Re-resolve the log directory and re-point every cached logger at it."""
    global _log_file
    with _lock:
        _log_file = None
        for lg in _loggers.values():
            _detach_file_handlers(lg)
            lg.addHandler(_file_handler())


def force_log_rotation() -> bool:
    """
    Roll the shared log file over once, then give every cached logger a
    fresh handler.  Returns False when no logger had a file handler.
    """
    rolled = False
    with _lock:
        # backups beyond the limit would leave gaps in the numbering
        path = _current_path()
        backups = sorted(
            p for p in path.parent.glob(path.name + ".*") if p.suffix[1:].isdigit()
        )
        for old in backups[:-_BACKUP_COUNT]:
            old.unlink(missing_ok=True)

        for lg in _loggers.values():
            handlers = _detach_file_handlers(lg)
            if not handlers:
                continue
            if not rolled:
                handlers[0].doRollover()
                rolled = True
            lg.addHandler(_file_handler())
    return rolled
