# evapurge/env.py
"""
evapurge.env
============

Single source‑of‑truth for:

• Project‑root discovery (the directory content globs are resolved against)
• User‑level root (~/.eva-purge)
• Log directory, overridable through ``EVA_PURGE_LOG_DIR``
"""

from __future__ import annotations

import os
from pathlib import Path
from threading import Lock

# ──────────────────────────────────────────────────────────────
# internal state
# ──────────────────────────────────────────────────────────────
_LOCK = Lock()
_PROJECT_ROOT: Path = Path.cwd().resolve()

LOG_DIR_ENV = "EVA_PURGE_LOG_DIR"


# ──────────────────────────────────────────────────────────────
# project root helpers
# ──────────────────────────────────────────────────────────────
def set_project_root(path: Path) -> None:
    """Change the canonical project root (content patterns resolve here)."""
    global _PROJECT_ROOT
    with _LOCK:
        _PROJECT_ROOT = Path(path).resolve()


def get_project_root() -> Path:  # hot‑path – keep ultra‑cheap
    return _PROJECT_ROOT


def resolve_path(path: str | Path) -> Path:
    """Absolute paths pass through; relative ones hang off the project root."""
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()


# ──────────────────────────────────────────────────────────────
# user‑level (~/.eva-purge) helpers
# ──────────────────────────────────────────────────────────────
def get_user_root() -> Path:
    """Return ~/.eva-purge (caller decides whether to create)."""
    return Path("~/.eva-purge").expanduser()


def _ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def get_logs_dir() -> Path:
    """
    ``$EVA_PURGE_LOG_DIR`` when set, else ``~/.eva-purge/logs``.
    Created lazily on first call.
    """
    custom = os.getenv(LOG_DIR_ENV)
    base = Path(custom).expanduser() if custom else get_user_root() / "logs"
    return _ensure_dir(base)
