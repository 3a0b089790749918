# evapurge/extractor.py
"""
Rule extraction.

A single forward scan over the stylesheet drives ``RuleScanner``, a small
state machine::

    IDLE ──selector text──▶ ACCUMULATING_SELECTOR ──'{'──▶ IN_RULE
      ▲                                                    │
      └──────────────── depth back to 0 on '}' ◀───────────┘

Braces are counted per character (comments and quoted strings excluded) so
one-line and minified rules open and close where they should.  Closed rules
are handed to ``decide`` and either kept whole or dropped whole.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Iterator, List, Optional

from evapurge.logger import get_logger
from evapurge.matcher import SelectorMatcher
from evapurge.models import (
    ExtractionResult,
    RetentionDecision,
    RetentionReason,
    RuleKind,
    StyleSheetRule,
)

logger = get_logger(__name__)

GRADIENT_UTILITY_CLASS = "all-grads"
PROGRESS_EVERY = 1000

_SELECTOR_START_RE = re.compile(r"^[a-zA-Z*#.\[]")
_CURRENT_VAR_RE = re.compile(r"var\(\s*--current-")
_ROOT_VAR_DECL_RE = re.compile(r"--[a-zA-Z0-9_-]+\s*:")
_COMMENT_RE = re.compile(r"/\*.*?(?:\*/|$)", re.S)

ProgressCallback = Callable[[int, int], None]


class ScanState(str, Enum):
    IDLE = "idle"
    ACCUMULATING_SELECTOR = "accumulating_selector"
    IN_RULE = "in_rule"


def classify(selector: str) -> RuleKind:
    if "@media" in selector:
        return RuleKind.MEDIA_QUERY
    if ":root" in selector or f".{GRADIENT_UTILITY_CLASS}" in selector:
        return RuleKind.ROOT_OR_GLOBAL
    return RuleKind.STANDARD


def looks_like_selector(text: str) -> bool:
    """A brace-less root line that may be (part of) a selector list or at-rule prelude."""
    return (
        text.startswith("@")
        or "," in text
        or bool(_SELECTOR_START_RE.match(text))
        or ":" in text
    )


def _is_statement(text: str) -> bool:
    """``@import url(x);`` / ``@charset "utf-8";`` – brace-less at-rules."""
    return text.startswith("@") and text.rstrip().endswith(";")


def _strip_comments(text: str) -> str:
    return _COMMENT_RE.sub("", text)


class RuleScanner:
    """
    Feed lines in order; collect the rules each line closes.

    Idle / accumulating lines that hold nothing but whitespace or a root
    comment are skipped.  Inside a rule every line is kept verbatim.
    """

    def __init__(self) -> None:
        self.state = ScanState.IDLE
        self.depth = 0
        self._in_comment = False  # an open /* spanning lines
        self._reset_rule()

    # ── state helpers ────────────────────────────────────────────────────
    def _reset_rule(self) -> None:
        self._selector_parts: List[str] = []
        self._raw: List[str] = []
        self._body: List[str] = []
        self._selector = ""
        self._kind = RuleKind.STANDARD
        self._start = 0

    def _open(self, selector_tail: str, lineno: int) -> None:
        parts = [*self._selector_parts, _strip_comments(selector_tail).strip()]
        self._selector = " ".join(p for p in parts if p)
        self._kind = classify(self._selector)
        self._start = self._start or lineno
        self.state = ScanState.IN_RULE

    def _close(self, lineno: int) -> StyleSheetRule:
        rule = StyleSheetRule(
            selector_text=self._selector,
            body_text="".join(self._body).strip(),
            raw_lines=tuple(self._raw),
            kind=self._kind,
            start_line=self._start,
            end_line=lineno,
        )
        self.state = ScanState.IDLE
        self._reset_rule()
        return rule

    # ── root-level text between rules ────────────────────────────────────
    def _statement(self, text: str, lineno: int) -> Optional[StyleSheetRule]:
        """Close a ``;``-terminated at-rule, if the pending root text is one."""
        visible = _strip_comments(text).strip()
        prelude = " ".join([*self._selector_parts, visible]).strip()
        if not _is_statement(prelude):
            return None
        rule = StyleSheetRule(
            selector_text=prelude,
            raw_lines=(*self._raw, text),
            kind=RuleKind.ROOT_OR_GLOBAL,
            start_line=self._start or lineno,
            end_line=lineno,
        )
        self.state = ScanState.IDLE
        self._reset_rule()
        return rule

    def _root_text(self, text: str, lineno: int) -> None:
        visible = _strip_comments(text).strip()
        if not visible:
            return

        if looks_like_selector(visible) or self.state is ScanState.ACCUMULATING_SELECTOR:
            if self.state is ScanState.IDLE:
                self._start = lineno
            self._selector_parts.append(visible)
            self._raw.append(text)
            self.state = ScanState.ACCUMULATING_SELECTOR
            return

        logger.debug(f"line {lineno}: ignoring stray root text {visible[:60]!r}")

    # ── public API ───────────────────────────────────────────────────────
    def feed(self, line: str, lineno: int) -> List[StyleSheetRule]:
        closed: List[StyleSheetRule] = []

        if self.state is not ScanState.IN_RULE:
            stripped = line.strip()
            if not stripped:
                return closed
            if stripped.startswith("/*") and "*/" not in stripped:
                self._in_comment = True
                return closed
            if self._in_comment:
                end = line.find("*/")
                if end == -1:
                    return closed
                self._in_comment = False
                line = line[end + 2 :]
                if not line.strip():
                    return closed
        elif not line.strip():
            return closed

        seg_start = 0  # start of the slice not yet assigned to a rule
        body_start = 0 if self.state is ScanState.IN_RULE else None
        quote: Optional[str] = None
        i, n = 0, len(line)

        while i < n:
            ch = line[i]

            if self._in_comment:
                end = line.find("*/", i)
                if end == -1:
                    break
                self._in_comment = False
                i = end + 2
                continue
            if quote:
                if ch == "\\":
                    i += 2
                    continue
                if ch == quote:
                    quote = None
                i += 1
                continue
            if line.startswith("/*", i):
                self._in_comment = True
                i += 2
                continue
            if ch in "\"'" and self.state is ScanState.IN_RULE:
                quote = ch
            elif ch == "{":
                self.depth += 1
                if self.depth == 1 and self.state is not ScanState.IN_RULE:
                    self._open(line[seg_start:i], lineno)
                    body_start = i + 1
            elif ch == "}":
                if self.depth:
                    self.depth -= 1
                if self.depth == 0 and self.state is ScanState.IN_RULE:
                    self._raw.append(line[seg_start : i + 1])
                    self._body.append(line[body_start:i])
                    closed.append(self._close(lineno))
                    seg_start, body_start = i + 1, None
            elif ch == ";" and self.depth == 0 and self.state is not ScanState.IN_RULE:
                stmt = self._statement(line[seg_start : i + 1], lineno)
                if stmt is not None:
                    closed.append(stmt)
                    seg_start = i + 1
            i += 1

        rest = line[seg_start:]
        if self.state is ScanState.IN_RULE:
            self._raw.append(rest)
            self._body.append(" " + line[body_start:] if body_start is not None else "")
        elif rest.strip():
            self._root_text(rest, lineno)

        return closed

    def finish(self) -> None:
        """End of input: an unterminated rule or dangling selector is dropped."""
        if self.state is ScanState.IN_RULE:
            logger.warning(
                f"Unterminated rule {self._selector[:60]!r} starting at line "
                f"{self._start} dropped at end of input"
            )
        elif self.state is ScanState.ACCUMULATING_SELECTOR:
            logger.debug("Dangling selector text at end of input dropped")
        self.state = ScanState.IDLE
        self.depth = 0
        self._reset_rule()


def iter_rules(
    css_text: str, on_progress: ProgressCallback | None = None
) -> Iterator[StyleSheetRule]:
    """Yield every top-level rule of ``css_text`` in source order."""
    lines = css_text.split("\n")
    total = len(lines)
    scanner = RuleScanner()
    for idx, line in enumerate(lines):
        if on_progress and idx % PROGRESS_EVERY == 0:
            on_progress(idx, total)
        yield from scanner.feed(line, idx + 1)
    scanner.finish()


def references_current_state(body: str) -> bool:
    return bool(_CURRENT_VAR_RE.search(body))


def decide(rule: StyleSheetRule, matcher: SelectorMatcher) -> RetentionDecision:
    """Keep/discard verdict for one closed rule, with the reason."""
    if rule.kind is RuleKind.MEDIA_QUERY:
        reason = RetentionReason.UNCONDITIONAL_MEDIA
    elif rule.kind is RuleKind.ROOT_OR_GLOBAL:
        reason = RetentionReason.UNCONDITIONAL_ROOT
    elif matcher.is_used_selector(rule.selector_text):
        reason = RetentionReason.SELECTOR_MATCHED
    elif references_current_state(rule.body_text):
        reason = RetentionReason.CURRENT_REFERENCE_MATCHED
    else:
        reason = RetentionReason.DISCARDED

    return RetentionDecision(
        selector=rule.selector_text,
        kept=reason is not RetentionReason.DISCARDED,
        reason=reason,
    )


def extract_used_rules(
    css_text: str,
    matcher: SelectorMatcher,
    on_progress: ProgressCallback | None = None,
) -> ExtractionResult:
    """
    Return the retained rules' original lines, in source order, joined by
    newlines, plus one ``RetentionDecision`` per rule.
    """
    kept_lines: List[str] = []
    decisions: List[RetentionDecision] = []
    media_kept = 0

    for rule in iter_rules(css_text, on_progress):
        decision = decide(rule, matcher)
        decisions.append(decision)
        if not decision.kept:
            logger.debug(f"discarded {rule.selector_text[:80]!r}")
            continue

        kept_lines.extend(rule.raw_lines)
        if decision.reason is RetentionReason.UNCONDITIONAL_MEDIA:
            media_kept += 1
            logger.info(f"Kept media query {rule.selector_text!r}")
        elif decision.reason is RetentionReason.UNCONDITIONAL_ROOT and rule.body_text:
            n_vars = len(_ROOT_VAR_DECL_RE.findall(rule.body_text))
            logger.info(f"Kept {n_vars} CSS variables from {rule.selector_text!r}")

    result = ExtractionResult(
        buffer="\n".join(kept_lines),
        decisions=decisions,
        rules_processed=len(decisions),
        media_queries_kept=media_kept,
    )
    logger.info(
        f"Processed {result.rules_processed} rules: kept {result.rules_kept}, "
        f"discarded {result.rules_discarded}, media queries {media_kept}"
    )
    return result
