"""
evapurge.collector
──────────────────
Usage collection: read content files, run every registered literal
extractor over each, merge the hits into one frozen ``UsageSet``.

    •  BaseLiteralExtractor – contract:   extract(text, acc) -> None
    •  LITERAL_EXTRACTORS   – ordered list of extractor singletons
    •  collect_usage(paths) – concurrent read, commutative merge
"""

from __future__ import annotations

import os
import pkgutil
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from importlib import import_module
from pathlib import Path
from typing import Callable, Iterable, List, Protocol, Sequence

from pydantic import BaseModel, Field

from evapurge.logger import get_logger
from evapurge.models import SourceFile, UsageSet

logger = get_logger(__name__)

CLASSES = "classes"
IDS = "ids"
CUSTOM_PROPERTIES = "custom_properties"
_TARGETS = (CLASSES, IDS, CUSTOM_PROPERTIES)

# tokens carrying template syntax are computed, not literal
_DYNAMIC_RE = re.compile(r"[${}]")


# ────────────────────────────────────────────────────────────────────────
#  Per-file accumulator
# ────────────────────────────────────────────────────────────────────────
class UsageAccumulator:
    """Mutable sets filled while scanning; frozen into a ``UsageSet``."""

    def __init__(self) -> None:
        self.classes: set[str] = set()
        self.ids: set[str] = set()
        self.custom_properties: set[str] = set()

    def add(self, target: str, token: str) -> bool:
        token = token.strip()
        if not token or _DYNAMIC_RE.search(token):
            return False
        if target not in _TARGETS:
            raise ValueError(f"Unknown usage target: {target!r}")
        getattr(self, target).add(token)
        return True

    def update(self, other: "UsageAccumulator") -> None:
        self.classes |= other.classes
        self.ids |= other.ids
        self.custom_properties |= other.custom_properties

    def freeze(self) -> UsageSet:
        return UsageSet.build(self.classes, self.ids, self.custom_properties)


# ────────────────────────────────────────────────────────────────────────
#  Extractor contract + registry
# ────────────────────────────────────────────────────────────────────────
class BaseLiteralExtractor(Protocol):
    """
    One dynamic-access idiom (or markup attribute) per extractor.

    ``extract`` must only record *literal* identifiers into ``acc``.
    """

    name: str

    def extract(self, text: str, acc: UsageAccumulator) -> None: ...


Splitter = Callable[[str], Iterable[str]]


def split_whitespace(value: str) -> Iterable[str]:
    return value.split()


def single(value: str) -> Iterable[str]:
    return (value,)


class RegexExtractor:
    """
    Pattern → target set.  ``group`` names the capture holding the value,
    ``split`` turns that value into tokens.
    """

    def __init__(
        self,
        name: str,
        pattern: str | re.Pattern,
        target: str,
        *,
        group: int | str = 1,
        split: Splitter = single,
    ):
        self.name = name
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.target = target
        self.group = group
        self.split = split

    def extract(self, text: str, acc: UsageAccumulator) -> None:
        for m in self.pattern.finditer(text):
            for token in self.split(m.group(self.group)):
                acc.add(self.target, token)

    def __repr__(self) -> str:  # pragma: no cover
        return f"RegexExtractor({self.name!r} → {self.target})"


LITERAL_EXTRACTORS: List[BaseLiteralExtractor] = []


def register_literal_extractor(extractor: BaseLiteralExtractor) -> BaseLiteralExtractor:
    """
    Append an extractor to the ordered registry.

    Example
    -------
        register_literal_extractor(
            RegexExtractor("dataset-class", r'data-class="([^"]+)"', CLASSES)
        )
    """
    if any(e.name == extractor.name for e in LITERAL_EXTRACTORS):  # pragma: no cover
        raise RuntimeError(f"Literal extractor already registered: {extractor.name}")
    LITERAL_EXTRACTORS.append(extractor)
    return extractor


def extract_usage(
    text: str, extractors: Sequence[BaseLiteralExtractor] | None = None
) -> UsageAccumulator:
    """Run every extractor over one file's text."""
    acc = UsageAccumulator()
    for ex in LITERAL_EXTRACTORS if extractors is None else extractors:
        ex.extract(text, acc)
    return acc


# ────────────────────────────────────────────────────────────────────────
#  Collection
# ────────────────────────────────────────────────────────────────────────
class CollectionResult(BaseModel):
    usage: UsageSet = Field(default_factory=UsageSet)
    files_scanned: int = 0
    skipped: List[str] = Field(default_factory=list)


def read_source(path: Path) -> SourceFile:
    return SourceFile(path=path, text=path.read_text(encoding="utf-8", errors="replace"))


def collect_usage(
    paths: Sequence[Path],
    extractors: Sequence[BaseLiteralExtractor] | None = None,
    max_workers: int | None = None,
) -> CollectionResult:
    """
    Read ``paths`` concurrently and merge their literal identifiers.

    An unreadable file is logged and skipped; it never aborts the run.
    Nothing is returned until every read has finished.
    """

    def process(p: Path) -> UsageAccumulator | None:
        try:
            src = read_source(p)
        except OSError as e:
            logger.warning(f"Skipping unreadable content file {p}: {e}")
            return None
        return extract_usage(src.text, extractors)

    merged = UsageAccumulator()
    skipped: list[str] = []
    scanned = 0

    workers = max_workers or min(32, os.cpu_count() or 4)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(process, p): p for p in paths}
        for fut in as_completed(futures):
            acc = fut.result()
            if acc is None:
                skipped.append(str(futures[fut]))
                continue
            merged.update(acc)
            scanned += 1

    usage = merged.freeze()
    logger.info(f"Collected usage from {scanned} file(s): {usage.summary()}")
    if skipped:
        logger.warning(f"Skipped {len(skipped)} unreadable file(s).")

    return CollectionResult(usage=usage, files_scanned=scanned, skipped=sorted(skipped))


# ----------------------------------------------------------------------
#  Auto-register built-in extractor plug-ins
# ----------------------------------------------------------------------
for mod in pkgutil.iter_modules(__path__):
    name = mod.name
    if name.startswith("_"):
        continue
    _str_mod = f"{__name__}.{name}"
    import_module(_str_mod)
    logger.debug(f"imported {_str_mod}")
