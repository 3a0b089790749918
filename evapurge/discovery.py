# evapurge/discovery.py
"""
Content-file discovery.

Resolves the configured ``content`` glob patterns against the project root.
Patterns support ``**`` (any depth, including none), ``*``, ``?``, ``[...]``
and ``{a,b}`` alternatives.  Only dependency/VCS directories are pruned;
build output directories such as ``dist/`` are scanned like anything else.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Sequence

from evapurge.env import get_project_root
from evapurge.logger import get_logger

logger = get_logger(__name__)

IGNORED_DIRS = frozenset(
    {"node_modules", ".git", "bower_components", "vendor", ".venv", "__pycache__"}
)

_WILDCARDS = set("*?[{")


def expand_braces(pattern: str) -> List[str]:
    """
    ``"src/**/*.{html,js}"`` → ``["src/**/*.html", "src/**/*.js"]``.
    Nested groups expand left to right; unbalanced braces are literal.
    """
    depth = 0
    start = None
    for i, ch in enumerate(pattern):
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth:
            depth -= 1
            if depth == 0 and start is not None:
                options = _split_top_level(pattern[start + 1 : i])
                if len(options) < 2:
                    # "{x}" carries no alternatives; keep it literal
                    return [
                        pattern[: i + 1] + rest
                        for rest in expand_braces(pattern[i + 1 :])
                    ]
                head, tail = pattern[:start], pattern[i + 1 :]
                out: List[str] = []
                for opt in options:
                    out.extend(expand_braces(head + opt + tail))
                return out
    return [pattern]


def _split_top_level(body: str) -> List[str]:
    parts, depth, buf = [], 0, []
    for ch in body:
        if ch == "," and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        buf.append(ch)
    parts.append("".join(buf))
    return parts


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern:
    """Translate one brace-free glob into an anchored regex over posix paths."""
    i, n = 0, len(pattern)
    out: list[str] = []
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    i += 1
                    out.append("(?:.*/)?")
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            j = pattern.find("]", i + 1)
            if j == -1:
                out.append(re.escape(ch))
            else:
                body = pattern[i + 1 : j]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = j
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out) + r"\Z")


def _static_base(pattern: str) -> str:
    """Longest leading directory of ``pattern`` that holds no wildcard."""
    parts = pattern.split("/")
    base: list[str] = []
    for part in parts[:-1]:
        if _WILDCARDS & set(part):
            break
        base.append(part)
    return "/".join(base)


def _walk_files(base: Path) -> Iterable[Path]:
    if base.is_file():
        yield base
        return
    for dirpath, dirnames, filenames in os.walk(base, followlinks=False):
        # prune in-place so ignored trees are never entered
        dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRS]
        for fname in filenames:
            yield Path(dirpath) / fname


def discover_content_files(
    patterns: Sequence[str],
    root: Path | None = None,
    exclude: Iterable[Path] = (),
) -> List[Path]:
    """
    Expand ``patterns`` into a sorted, de-duplicated list of files.

    Relative patterns resolve against ``root`` (default: project root);
    absolute patterns are honoured as-is.  Anything in ``exclude`` (the
    input stylesheet, the output file) is dropped.
    """
    root = (root or get_project_root()).resolve()
    excluded = {Path(p).resolve() for p in exclude}
    found: set[Path] = set()

    for raw in patterns:
        for pattern in expand_braces(raw.replace("\\", "/")):
            absolute = Path(pattern).is_absolute()
            anchor = Path(pattern).anchor if absolute else ""
            rel_pattern = pattern[len(anchor):] if absolute else pattern
            if rel_pattern.startswith("./"):
                rel_pattern = rel_pattern[2:]
            walk_root = Path(anchor) if absolute else root

            rx = glob_to_regex(rel_pattern)
            base = walk_root / _static_base(rel_pattern)
            if not base.exists():
                logger.debug(f"Pattern base does not exist: {base}")
                continue

            for fpath in _walk_files(base):
                rel = fpath.relative_to(walk_root).as_posix()
                if any(part in IGNORED_DIRS for part in Path(rel).parts):
                    continue
                if not rx.match(rel):
                    continue
                if not fpath.is_file():
                    continue
                resolved = fpath.resolve()
                if resolved in excluded:
                    continue
                found.add(resolved)

    logger.info(f"Discovered {len(found)} content file(s) from {len(patterns)} pattern(s).")
    return sorted(found)
