# evapurge/compressor.py
"""
Whole-buffer compression of the retained rules, and the output writer.

Compression is a fixed sequence of regex passes; it runs once over the
entire retained text, never per rule.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

from evapurge.logger import get_logger

logger = get_logger(__name__)

HEADER_TEMPLATE = "/* EVA CSS Purged - Generated on {timestamp} */\n"

COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
WHITESPACE_RE = re.compile(r"\s+")
OPEN_BRACE_RE = re.compile(r"\s*{\s*")
CLOSE_BRACE_RE = re.compile(r"\s*}\s*")
SEMICOLON_RE = re.compile(r"\s*;\s*")
COLON_RE = re.compile(r"\s*:\s*")
# only between word / closing-bracket and word / selector-start tokens
COMMA_RE = re.compile(r"(\w|[)\]])\s*,\s*(\w|[.#*:])")
EMPTY_RULE_RE = re.compile(r"[^{};]+\{\}")


def remove_empty_rules(css: str) -> str:
    """Drop ``selector{}`` blocks; repeat so emptied wrappers go too."""
    while True:
        pruned = EMPTY_RULE_RE.sub("", css)
        if pruned == css:
            return pruned
        css = pruned


def compress_css(css: str) -> str:
    """Perform a lightweight CSS minification of the retained buffer."""
    out = COMMENT_RE.sub("", css)
    out = WHITESPACE_RE.sub(" ", out)
    out = OPEN_BRACE_RE.sub("{", out)
    out = CLOSE_BRACE_RE.sub("}", out)
    out = SEMICOLON_RE.sub(";", out)
    out = COLON_RE.sub(":", out)
    out = COMMA_RE.sub(r"\1,\2", out)
    out = out.replace(";}", "}")
    out = remove_empty_rules(out)
    return out.strip()


def generated_header(now: datetime | None = None) -> str:
    """``/* EVA CSS Purged - Generated on 2025-01-31T12:00:00.000Z */``"""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return HEADER_TEMPLATE.format(timestamp=stamp)


def render_output(body: str, now: datetime | None = None) -> str:
    return generated_header(now) + body


def write_output(path: Path, text: str) -> Path:
    """Create parent directories as needed; overwrite any existing file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {len(text)} bytes to {path}")
    return path
