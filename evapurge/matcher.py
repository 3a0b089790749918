# evapurge/matcher.py
"""
Selector usage matching.

``SelectorMatcher.is_used_selector`` answers one question for a (possibly
comma-separated, possibly compound) selector: could anything the collector
saw render with it?  Precedence, first match wins:

1. element / reset selectors are always used
2. comma members are OR-ed
3. pseudo suffixes are stripped and the base re-tested
4. ``#id`` / ``.class`` tokens, names limited to word chars, ``-`` and ``_``
5. compound members need *every* class and id token present
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from evapurge.models import UsageSet

HTML_ELEMENTS = frozenset(
    {
        # document
        "html", "body", "head", "title", "meta", "link", "script", "style",
        # text blocks
        "h1", "h2", "h3", "h4", "h5", "h6", "p", "br", "hr",
        # media / embeds
        "a", "img", "figure", "figcaption", "picture", "source",
        "video", "audio", "canvas", "svg", "iframe", "embed", "object", "param",
        # lists
        "ul", "ol", "li", "dl", "dt", "dd",
        # tables
        "table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption",
        # forms
        "form", "input", "button", "textarea", "select", "option", "label",
        "fieldset", "legend",
        # sectioning
        "div", "span", "section", "article", "aside", "header", "footer", "nav",
        "main",
        # inline text-level
        "blockquote", "cite", "q", "pre", "code", "kbd", "samp", "var",
        "em", "strong", "b", "i", "u", "s", "small", "mark", "del", "ins",
        "sub", "sup",
    }
)

_RESET_MARKERS = ("*", "::before", "::after", ":target")
_BODY_HTML_RE = re.compile(r"^(?:body|html)(?:[,\s]|$)")
_PSEUDO_STRIP_RE = re.compile(r"::[^,\s]+|:[^,\s(]+(?:\([^)]*\))?")
_BASE_PSEUDO_RE = re.compile(r"(?<!\\)::?[\w-]+(?:\([^)]*\))?")
_LEADING_TAG_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)")
_CLASS_TOKEN_RE = re.compile(r"\.((?:\\.|[a-zA-Z_-])(?:\\.|[\w-])*)")
_ID_TOKEN_RE = re.compile(r"#((?:\\.|[a-zA-Z_-])(?:\\.|[\w-])*)")
_UNESCAPE_RE = re.compile(r"\\(.)")
_ATTRIBUTE_RE = re.compile(r"\[[^\]]*\]")


def split_selector_group(selector: str) -> List[str]:
    """Split on commas outside ``()`` and ``[]``; empty members dropped."""
    members, depth, buf = [], 0, []
    for ch in selector:
        if ch in "([":
            depth += 1
        elif ch in ")]" and depth:
            depth -= 1
        if ch == "," and depth == 0:
            members.append("".join(buf).strip())
            buf = []
            continue
        buf.append(ch)
    members.append("".join(buf).strip())
    return [m for m in members if m]


def _clean(selector: str) -> str:
    return selector.split("{", 1)[0].strip()


def _unescape(token: str) -> str:
    r"""``md\:flex`` → ``md:flex`` (CSS escapes as written in markup)."""
    return _UNESCAPE_RE.sub(r"\1", token)


class Safelist:
    """
    Always-keep identifiers.  Plain entries are prefixes (``theme-``);
    entries wrapped in slashes (``/^brand-/``) are regular expressions.
    """

    def __init__(self, entries: Iterable[str] = ()):
        self.prefixes: list[str] = []
        self.patterns: list[re.Pattern] = []
        for raw in entries:
            entry = str(raw).strip()
            if not entry:
                continue
            if len(entry) > 2 and entry.startswith("/") and entry.endswith("/"):
                self.patterns.append(re.compile(entry[1:-1]))
            else:
                self.prefixes.append(entry.lstrip(".#"))

    def __bool__(self) -> bool:
        return bool(self.prefixes or self.patterns)

    def matches(self, name: str) -> bool:
        if any(name.startswith(p) for p in self.prefixes):
            return True
        return any(rx.search(name) for rx in self.patterns)


class SelectorMatcher:
    """
    Pure function of a ``UsageSet`` (and an optional safelist).
    Never mutates either; every selector resolves to used or unused.
    """

    def __init__(self, usage: UsageSet, safelist: Sequence[str] | Safelist = ()):
        self.usage = usage
        self.safelist = safelist if isinstance(safelist, Safelist) else Safelist(safelist)

    # ── element / reset ──────────────────────────────────────────────────
    def is_element_or_reset_selector(self, selector: str) -> bool:
        sel = _clean(selector)

        if any(marker in sel for marker in _RESET_MARKERS) or _BODY_HTML_RE.match(sel):
            return True

        for member in split_selector_group(sel):
            base = _PSEUDO_STRIP_RE.sub("", member).strip()
            if base in HTML_ELEMENTS:
                return True
            # input:focus, a[href], ul[role=list], a:not([class]) …
            m = _LEADING_TAG_RE.match(member)
            if m and m.group(1) in HTML_ELEMENTS:
                return True
        return False

    # ── public API ───────────────────────────────────────────────────────
    def is_used_selector(self, selector: str) -> bool:
        sel = _clean(selector)
        if not sel:
            return False

        if self.is_element_or_reset_selector(sel):
            return True

        return any(self._is_used_member(m) for m in split_selector_group(sel))

    # ── per comma-member ─────────────────────────────────────────────────
    def _is_used_member(self, member: str) -> bool:
        if ":" in member:
            base = _BASE_PSEUDO_RE.sub("", member).strip()
            if base != member:
                # .btn:hover is as used as .btn
                return bool(base) and self.is_used_selector(base)

        plain = _ATTRIBUTE_RE.sub("", member)
        classes = [_unescape(c) for c in _CLASS_TOKEN_RE.findall(plain)]
        ids = [_unescape(i) for i in _ID_TOKEN_RE.findall(plain)]
        if not classes and not ids:
            return False

        if self.safelist and any(self.safelist.matches(t) for t in (*classes, *ids)):
            return True

        # every class and id token must be present (a lone token trivially)
        return all(self.usage.has_class(c) for c in classes) and all(
            self.usage.has_id(i) for i in ids
        )
