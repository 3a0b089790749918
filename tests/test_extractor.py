from evapurge.extractor import (
    RuleScanner,
    ScanState,
    classify,
    extract_used_rules,
    iter_rules,
    looks_like_selector,
)
from evapurge.matcher import SelectorMatcher
from evapurge.models import RetentionReason, RuleKind


def _rules(css):
    return list(iter_rules(css))


def _extract(css, usage, safelist=()):
    return extract_used_rules(css, SelectorMatcher(usage, safelist))


# ---------------------------------------------------------------------------
# scanning
# ---------------------------------------------------------------------------
def test_multiline_rule_is_kept_verbatim():
    css = ".card {\n  padding: 1rem;\n  color: red;\n}\n"
    (rule,) = _rules(css)
    assert rule.selector_text == ".card"
    assert rule.raw_lines == (".card {", "  padding: 1rem;", "  color: red;", "}")
    assert rule.body_text.split() == ["padding:", "1rem;", "color:", "red;"]
    assert (rule.start_line, rule.end_line) == (1, 4)


def test_multiline_selector_list_is_joined():
    css = ".a,\n.b,\n.c {\n  color: red;\n}"
    (rule,) = _rules(css)
    assert rule.selector_text == ".a, .b, .c"
    assert rule.raw_lines[0] == ".a,"
    assert rule.start_line == 1


def test_one_line_rules_split_on_depth_zero():
    rules = _rules(".a{color:red}.b{color:blue} .c { margin: 0 }")
    assert [r.selector_text for r in rules] == [".a", ".b", ".c"]
    assert rules[1].raw_lines == (".b{color:blue}",)


def test_nested_media_query_is_one_rule():
    css = "@media (min-width: 600px) {\n  .unused {\n    display: none;\n  }\n}"
    (rule,) = _rules(css)
    assert rule.kind is RuleKind.MEDIA_QUERY
    assert len(rule.raw_lines) == 5


def test_root_comments_are_skipped():
    css = "/* header\n * .fake {\n */\n/* one-liner */\n.a { color: red; }"
    rules = _rules(css)
    assert [r.selector_text for r in rules] == [".a"]


def test_braces_inside_strings_and_comments_do_not_count():
    css = '.a::before { content: "}"; /* { */ }\n.b { color: red; }'
    rules = _rules(css)
    assert [r.selector_text for r in rules] == [".a::before", ".b"]


def test_statement_at_rules():
    css = '@charset "utf-8";\n@import url("x.css");.a{color:red}'
    rules = _rules(css)
    assert [r.kind for r in rules] == [
        RuleKind.ROOT_OR_GLOBAL,
        RuleKind.ROOT_OR_GLOBAL,
        RuleKind.STANDARD,
    ]
    assert rules[1].raw_lines == ('@import url("x.css");',)


def test_unterminated_rule_is_dropped():
    assert _rules(".a {\n  color: red;\n") == []


def test_blank_lines_are_skipped():
    rules = _rules("\n\n.a {\n\n  color: red;\n\n}\n\n")
    assert rules[0].raw_lines == (".a {", "  color: red;", "}")


def test_scanner_states():
    s = RuleScanner()
    assert s.state is ScanState.IDLE
    s.feed(".a,", 1)
    assert s.state is ScanState.ACCUMULATING_SELECTOR
    s.feed(".b {", 2)
    assert s.state is ScanState.IN_RULE and s.depth == 1
    (rule,) = s.feed("}", 3)
    assert s.state is ScanState.IDLE and s.depth == 0
    assert rule.selector_text == ".a, .b"


def test_progress_callback():
    calls = []
    css = "\n".join(f".r{i} {{ color: red; }}" for i in range(2500))
    list(iter_rules(css, on_progress=lambda line, total: calls.append((line, total))))
    assert calls == [(0, 2500), (1000, 2500), (2000, 2500)]


def test_classify_and_selector_heuristics():
    assert classify("@media print") is RuleKind.MEDIA_QUERY
    assert classify(":root") is RuleKind.ROOT_OR_GLOBAL
    assert classify(".all-grads") is RuleKind.ROOT_OR_GLOBAL
    assert classify(".x") is RuleKind.STANDARD
    assert looks_like_selector(".a,")
    assert looks_like_selector("@supports (display: grid)")
    assert not looks_like_selector("1rem;")


# ---------------------------------------------------------------------------
# retention
# ---------------------------------------------------------------------------
def test_root_block_kept_whole(usage):
    css = ":root{--16:1rem;--999:9px;}\n.fs-16{font-size:var(--16);}\n.unused{color:red;}"
    result = _extract(css, usage(classes=["fs-16", "w-64"], custom_properties=["--16"]))
    assert result.buffer == ":root{--16:1rem;--999:9px;}\n.fs-16{font-size:var(--16);}"
    assert [d.reason for d in result.decisions] == [
        RetentionReason.UNCONDITIONAL_ROOT,
        RetentionReason.SELECTOR_MATCHED,
        RetentionReason.DISCARDED,
    ]
    assert result.rules_processed == 3
    assert result.rules_kept == 2
    assert result.rules_discarded == 1


def test_media_queries_kept_unconditionally(usage):
    css = "@media (min-width:600px){.unused{display:none;}}"
    result = _extract(css, usage())
    assert result.buffer == css
    assert result.media_queries_kept == 1


def test_gradient_utility_kept(usage):
    result = _extract(".all-grads .x { background: red; }", usage())
    assert result.rules_kept == 1


def test_current_variable_reference_keeps_rule(usage):
    css = ".panel {\n  background: var(--current-bg);\n}\n.other { color: var(--x); }"
    result = _extract(css, usage())
    assert result.decisions[0].reason is RetentionReason.CURRENT_REFERENCE_MATCHED
    assert not result.decisions[1].kept
    assert result.buffer == ".panel {\n  background: var(--current-bg);\n}"


def test_compound_and_element_rules(usage):
    css = ".a.b{color:red}\n.a{color:red}\nbutton:hover{outline:none}"
    result = _extract(css, usage(classes=["a"]))
    assert result.buffer == ".a{color:red}\nbutton:hover{outline:none}"


def test_font_face_goes_through_the_matcher(usage):
    css = "@font-face {\n  font-family: X;\n}\n.a { color: red; }"
    result = _extract(css, usage(classes=["a"]))
    assert result.buffer == ".a { color: red; }"


def test_safelisted_rule_is_kept(usage):
    result = _extract(".theme-dark { color: #fff; }", usage(), safelist=["theme-"])
    assert result.decisions[0].reason is RetentionReason.SELECTOR_MATCHED
