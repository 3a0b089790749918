import logging

import pytest
from rich.errors import LiveError

from evapurge import env, logger as log_mod
from evapurge.errors import ConfigError, CSSNotFoundError, PurgeError
from evapurge.models import PurgeStats
from evapurge.ui import console, print_stats_table, spinner
from evapurge.ui.spinner import _NoOp, safe_status


# ---------------------------------------------------------------------------
# logging
# ---------------------------------------------------------------------------
@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    target = tmp_path / "logs"
    monkeypatch.setenv(env.LOG_DIR_ENV, str(target))
    log_mod.reset_log_path()
    yield target
    monkeypatch.undo()
    log_mod.reset_log_path()


def test_get_logger_is_idempotent():
    assert log_mod.get_logger("evapurge.test") is log_mod.get_logger("evapurge.test")


def test_log_lines_land_in_log_dir(log_dir):
    lg = log_mod.get_logger("evapurge.test.file")
    lg.info("hello log")
    for h in lg.handlers:
        h.flush()

    assert log_mod.get_current_log_file() == log_dir / "eva_purge.log"
    text = (log_dir / "eva_purge.log").read_text(encoding="utf-8")
    assert "| INFO     | evapurge.test.file | hello log" in text


def test_force_log_rotation(log_dir):
    lg = log_mod.get_logger("evapurge.test.rotate")
    lg.warning("before rotation")
    assert log_mod.force_log_rotation()
    assert (log_dir / "eva_purge.log.1").exists()
    assert isinstance(lg.handlers[0], logging.Handler)


# ---------------------------------------------------------------------------
# errors
# ---------------------------------------------------------------------------
def test_error_hierarchy():
    err = CSSNotFoundError("x.css")
    assert isinstance(err, PurgeError) and isinstance(err, FileNotFoundError)
    assert str(err) == "CSS file not found: x.css"

    cfg = ConfigError("Invalid:", ["purge.css: bad", "purge.output: bad"])
    assert cfg.errors == ["purge.css: bad", "purge.output: bad"]
    assert str(cfg).splitlines() == ["Invalid:", "  ❌ purge.css: bad", "  ❌ purge.output: bad"]


# ---------------------------------------------------------------------------
# ui
# ---------------------------------------------------------------------------
def test_stats_table_rows():
    stats = PurgeStats(original_bytes=2048, compressed_bytes=512, rules_processed=4, rules_kept=1)
    rows = dict(stats.rows())
    assert rows["Original size"] == "2.00 KB"
    assert rows["Compressed size"] == "0.50 KB"
    assert rows["Space saved"] == "75.00%"
    assert stats.rules_discarded == 3

    with console.capture() as cap:
        print_stats_table("Purge Statistics", stats.rows())
    out = cap.get()
    assert "Purge Statistics" in out
    assert "75.00%" in out


def test_status_degrades_to_noop_when_live_is_busy(monkeypatch):
    class _BusyConsole:
        def status(self, *_a, **_kw):
            raise LiveError("Only one live display may be active at once")

    monkeypatch.setattr(spinner, "console", _BusyConsole())
    with safe_status(message="inner") as st:
        assert isinstance(st, _NoOp)
        st.update("still fine")


def test_status_wraps_rich_status():
    with safe_status("Purging") as st:
        st.update("Compressing")


def test_status_message_given_twice():
    with pytest.raises(TypeError):
        with safe_status("a", message="b"):
            pass


def test_status_spinner_name_reaches_rich(monkeypatch):
    seen = {}

    class _RecordingConsole:
        def status(self, message, spinner):
            seen.update(message=message, spinner=spinner)
            return _NoOp()

    monkeypatch.setattr(spinner, "console", _RecordingConsole())
    with safe_status("Scanning"):
        pass
    assert seen == {"message": "Scanning", "spinner": "dots"}

    with safe_status("Scanning", spinner="line"):
        pass
    assert seen["spinner"] == "line"
