"""
End-to-end runs of ``CSSPurger`` over a throwaway project.
"""

import pytest

from evapurge import CSSNotFoundError, CSSPurger, PurgeConfig, purge
from evapurge import purger as purger_mod

STYLES = """\
:root {
  --16: 1rem;
  --999: 9px;
}

.fs-16 {
  font-size: var(--16);
}

.w-64 { width: 16rem; }

.unused {
  color: red;
}

.a.b { color: red; }

button:hover { outline: none; }

@media (min-width: 600px) {
  .unused {
    display: none;
  }
}

.all-grads .g { background: linear-gradient(red, blue); }

.theme-dark .card { color: #fff; }
"""


def _body(path):
    header, body = path.read_text(encoding="utf-8").split("\n", 1)
    assert header.startswith("/* EVA CSS Purged - Generated on ")
    return body


@pytest.fixture
def project(write_file):
    write_file("eva.css", STYLES)
    write_file("index.html", '<div class="fs-16 w-64 a"></div>')
    return write_file


def test_scenario_output(project, project_root, fixed_now):
    stats = purge(PurgeConfig(css="eva.css", content=["*.html"]), now=fixed_now)
    body = _body(project_root / "eva-purged.css")

    assert body.startswith(":root{--16:1rem;--999:9px}.fs-16{font-size:var(--16)}")
    assert ".w-64{width:16rem}" in body
    assert ".unused{color:red}" not in body
    assert ".a.b" not in body
    assert "button:hover{outline:none}" in body
    assert "@media (min-width:600px){.unused{display:none}}" in body
    assert ".all-grads .g{" in body
    assert ".theme-dark" not in body

    assert stats.rules_processed == 9
    assert stats.rules_kept == 6
    assert stats.rules_discarded == 3
    assert stats.media_queries_kept == 1
    assert stats.files_scanned == 1
    assert stats.classes == 3
    assert stats.original_bytes == len(STYLES)
    assert 0 < stats.compressed_bytes < stats.original_bytes
    assert stats.percent_saved > 0


def test_safelist_and_explicit_output(project, project_root):
    cfg = PurgeConfig(
        css="eva.css", content=["*.html"], output="out/min.css", safelist=["theme-"]
    )
    purge(cfg)
    assert ".theme-dark .card{color:#fff}" in _body(project_root / "out" / "min.css")


def test_repurge_is_idempotent(project, project_root, fixed_now):
    purge(PurgeConfig(css="eva.css", content=["*.html"], output="p1.css"), now=fixed_now)
    first = (project_root / "p1.css").read_text(encoding="utf-8")

    purge(PurgeConfig(css="p1.css", content=["*.html"], output="p2.css"), now=fixed_now)
    second = (project_root / "p2.css").read_text(encoding="utf-8")

    assert second == first


def test_more_content_never_discards_more(project, project_root):
    project("extra.js", "el.classList.add('unused'); el.className = 'b';")

    narrow = purge(PurgeConfig(css="eva.css", content=["index.html"], output="n.css"))
    wide = purge(PurgeConfig(css="eva.css", content=["index.html", "*.js"], output="w.css"))

    assert wide.rules_discarded <= narrow.rules_discarded
    assert wide.rules_discarded < narrow.rules_discarded
    assert ".a.b{color:red}" in _body(project_root / "w.css")


def test_input_and_output_are_not_content(project, project_root):
    stats = purge(PurgeConfig(css="eva.css", content=["*"]))
    assert stats.files_scanned == 1
    assert (project_root / "eva-purged.css").exists()


def test_missing_css_fails_before_scanning(project_root, monkeypatch):
    def _boom(*_a, **_kw):
        raise AssertionError("content scanned before the input check")

    monkeypatch.setattr(purger_mod, "discover_content_files", _boom)

    with pytest.raises(CSSNotFoundError) as exc:
        CSSPurger(PurgeConfig(css="missing.css")).purge()
    assert exc.value.path.name == "missing.css"
    assert not (project_root / "missing-purged.css").exists()


def test_unset_css_is_reported_as_missing():
    with pytest.raises(CSSNotFoundError):
        CSSPurger(PurgeConfig(), verbose=False).purge()


def test_write_failure_propagates(project, monkeypatch):
    def _deny(*_a, **_kw):
        raise PermissionError("read-only")

    monkeypatch.setattr(purger_mod, "write_output", _deny)
    with pytest.raises(PermissionError):
        purge(PurgeConfig(css="eva.css", content=["*.html"]))


def test_each_run_owns_its_usage(project, project_root):
    project("other.html", '<p class="unused"></p>')
    first = CSSPurger(PurgeConfig(css="eva.css", content=["index.html"]), verbose=False)
    second = CSSPurger(PurgeConfig(css="eva.css", content=["other.html"]), verbose=False)
    first.purge()
    second.purge()
    assert "unused" not in first.usage.classes
    assert second.usage.classes == {"unused"}


def test_verbose_run_reports_progress(project, capsys):
    purger = CSSPurger(PurgeConfig(css="eva.css", content=["*.html"]))
    purger.purge()
    out = capsys.readouterr().out
    assert "Starting CSS purge process" in out
    assert "Found 3 unique classes" in out
    assert purger.output_path is not None and purger.output_path.name == "eva-purged.css"
    assert purger.stats.rules_kept == 6
