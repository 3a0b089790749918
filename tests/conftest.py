# eva-purge/tests/conftest.py
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

FIXED_NOW = datetime(2025, 1, 31, 12, 0, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Point the log directory at a scratch dir before any evapurge import."""
    os.environ.setdefault("EVA_PURGE_LOG_DIR", tempfile.mkdtemp(prefix="eva-purge-logs-"))


# ───────────────────────────────────────────────────────────────
#  Per-test project root
# ───────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def project_root(tmp_path, monkeypatch):
    """
    Every test runs inside its own empty project: cwd and the evapurge
    project root both point at ``tmp_path``.
    """
    from evapurge import env

    old_root = env.get_project_root()
    monkeypatch.chdir(tmp_path)
    env.set_project_root(tmp_path)
    yield tmp_path
    env.set_project_root(old_root)


@pytest.fixture
def write_file(project_root):
    """``write_file("src/app.js", "...")`` → absolute Path, parents created."""

    def _write(rel: str, text: str) -> Path:
        path = project_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def usage():
    """Build a ``UsageSet`` from keyword lists."""
    from evapurge.models import UsageSet

    def _usage(classes=(), ids=(), custom_properties=()):
        return UsageSet.build(classes, ids, custom_properties)

    return _usage


@pytest.fixture
def fixed_now():
    return FIXED_NOW
