from datetime import datetime, timedelta, timezone

from evapurge.compressor import (
    compress_css,
    generated_header,
    remove_empty_rules,
    render_output,
    write_output,
)


def test_compress_collapses_whitespace_and_punctuation():
    assert compress_css(".a {\n  color : red ;\n}") == ".a{color:red}"


def test_compress_strips_comments():
    css = "/* banner */\n.a { /* inline */ margin: 0; }\n/* multi\n line */"
    assert compress_css(css) == ".a{margin:0}"


def test_compress_tightens_selector_lists():
    assert compress_css(".a ,\n.b , #c { color: red }") == ".a,.b,#c{color:red}"
    assert compress_css("a , b { x: y }") == "a,b{x:y}"


def test_compress_keeps_nested_blocks():
    css = "@media (min-width: 600px) {\n  .a {\n    display: none;\n  }\n}"
    assert compress_css(css) == "@media (min-width:600px){.a{display:none}}"


def test_empty_rules_removed_including_emptied_wrappers():
    assert compress_css(".a {}\n.b { color: red; }") == ".b{color:red}"
    assert compress_css("@media print { .a { } }") == ""
    assert remove_empty_rules("@import url(x);.a{}") == "@import url(x);"


def test_compress_is_stable():
    once = compress_css(".a {\n  color: red;\n}\n\n.b,\n.c { margin : 0 }")
    assert compress_css(once) == once


def test_generated_header_is_utc_iso():
    now = datetime(2025, 1, 31, 12, 0, 0, 123000, tzinfo=timezone.utc)
    assert generated_header(now) == (
        "/* EVA CSS Purged - Generated on 2025-01-31T12:00:00.123Z */\n"
    )
    plus_two = now.astimezone(timezone(timedelta(hours=2)))
    assert generated_header(plus_two) == generated_header(now)


def test_render_output_prefixes_header(fixed_now):
    text = render_output(".a{color:red}", fixed_now)
    header, body = text.split("\n", 1)
    assert header.startswith("/* EVA CSS Purged - Generated on 2025-01-31T12:00:00.000Z")
    assert body == ".a{color:red}"


def test_write_output_creates_parents(project_root):
    target = project_root / "dist" / "nested" / "out.css"
    assert write_output(target, "x") == target
    assert target.read_text(encoding="utf-8") == "x"
    write_output(target, "y")
    assert target.read_text(encoding="utf-8") == "y"
