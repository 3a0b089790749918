# evapurge/collector/builtin.py
"""
Built-in literal extractors, registered in scan order.

Markup attributes first, then the script idioms that reach selectors at
runtime.  Every pattern only accepts string literals; anything computed
is invisible by construction.
"""

from __future__ import annotations

import re
from typing import Iterable

from evapurge.collector import (
    CLASSES,
    CUSTOM_PROPERTIES,
    IDS,
    RegexExtractor,
    UsageAccumulator,
    register_literal_extractor,
    single,
    split_whitespace,
)

# a quoted literal: '…', "…" or `…`
_QUOTED = r"""(['"`])((?:(?!\1).)*)\1"""
_QUOTED_RE = re.compile(_QUOTED, re.S)

_SEL_CLASS_RE = re.compile(r"\.([A-Za-z_-][\w-]*)")
_SEL_ID_RE = re.compile(r"#([A-Za-z_-][\w-]*)")


def quoted_literals(args: str) -> Iterable[str]:
    """Every string literal inside a call's argument list."""
    for m in _QUOTED_RE.finditer(args):
        yield from m.group(2).split()


class SelectorLiteralExtractor:
    """
    ``querySelector('.card #main')`` style calls: the literal is a CSS
    selector, so both ``.class`` and ``#id`` tokens are harvested.
    """

    def __init__(self, name: str, pattern: str):
        self.name = name
        self.pattern = re.compile(pattern, re.S)

    def extract(self, text: str, acc: UsageAccumulator) -> None:
        for m in self.pattern.finditer(text):
            selector = m.group(2)
            for cls in _SEL_CLASS_RE.findall(selector):
                acc.add(CLASSES, cls)
            for id_ in _SEL_ID_RE.findall(selector):
                acc.add(IDS, id_)


# ── markup ───────────────────────────────────────────────────────────────
register_literal_extractor(
    RegexExtractor(
        "markup-class",
        re.compile(r"""(?<![\w:.-])class\s*=\s*(["'])(.*?)\1""", re.S),
        CLASSES,
        group=2,
        split=split_whitespace,
    )
)
register_literal_extractor(
    RegexExtractor(
        "markup-id",
        re.compile(r"""(?<![\w:.-])id\s*=\s*(["'])(.*?)\1""", re.S),
        IDS,
        group=2,
    )
)
register_literal_extractor(
    RegexExtractor("var-reference", r"var\(\s*(--[\w-]+)", CUSTOM_PROPERTIES)
)

# ── scripts ──────────────────────────────────────────────────────────────
register_literal_extractor(
    RegexExtractor(
        "classlist-call",
        r"classList\.(?:add|remove|toggle|contains)\s*\(([^)]*)\)",
        CLASSES,
        split=quoted_literals,
    )
)
register_literal_extractor(
    RegexExtractor(
        "classname-assignment",
        r"\.className\s*\+?=\s*" + _QUOTED,
        CLASSES,
        group=2,
        split=split_whitespace,
    )
)
register_literal_extractor(
    SelectorLiteralExtractor(
        "query-selector",
        r"querySelector(?:All)?\s*\(\s*" + _QUOTED + r"\s*\)",
    )
)
register_literal_extractor(
    RegexExtractor(
        "get-element-by-id",
        r"getElementById\s*\(\s*" + _QUOTED + r"\s*\)",
        IDS,
        group=2,
        split=single,
    )
)
register_literal_extractor(
    RegexExtractor(
        "style-property-call",
        r"""(?:setProperty|getPropertyValue)\s*\(\s*(['"`])(--[^'"`]+)\1""",
        CUSTOM_PROPERTIES,
        group=2,
    )
)
register_literal_extractor(
    RegexExtractor(
        "custom-property-literal",
        r"""(['"`])(--[A-Za-z][\w-]*)\1""",
        CUSTOM_PROPERTIES,
        group=2,
    )
)
