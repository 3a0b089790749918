# evapurge/models.py
"""
Data models for a single purge run.

• All models are Pydantic v2 (`model_config = ConfigDict(...)`).
• Everything a run derives is frozen once built: the usage sets after the
  collector merge, each rule once its closing brace is seen, the stats once
  computed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Usage sets
# ---------------------------------------------------------------------------


class UsageSet(BaseModel):
    """Identifiers observed as referenced by the project's content files."""

    model_config = ConfigDict(frozen=True)

    classes: FrozenSet[str] = frozenset()
    ids: FrozenSet[str] = frozenset()
    custom_properties: FrozenSet[str] = frozenset()

    @classmethod
    def build(
        cls,
        classes: Iterable[str] = (),
        ids: Iterable[str] = (),
        custom_properties: Iterable[str] = (),
    ) -> "UsageSet":
        """Trim every token and drop empties before freezing."""

        def _clean(values: Iterable[str]) -> FrozenSet[str]:
            return frozenset(v.strip() for v in values if v and v.strip())

        return cls(
            classes=_clean(classes),
            ids=_clean(ids),
            custom_properties=_clean(custom_properties),
        )

    def has_class(self, name: str) -> bool:
        return name.strip() in self.classes

    def has_id(self, name: str) -> bool:
        return name.strip() in self.ids

    def summary(self) -> str:
        return (
            f"{len(self.classes)} classes | {len(self.ids)} ids | "
            f"{len(self.custom_properties)} custom properties"
        )


class SourceFile(BaseModel):
    """A content file read once for usage extraction, then discarded."""

    path: Path
    text: str


# ---------------------------------------------------------------------------
# Stylesheet rules
# ---------------------------------------------------------------------------


class RuleKind(str, Enum):
    """Retention class of a top-level rule."""

    STANDARD = "standard"
    MEDIA_QUERY = "media_query"
    ROOT_OR_GLOBAL = "root_or_global"


class StyleSheetRule(BaseModel):
    """
    One logical rule bounded by balanced braces at depth 1.

    ``raw_lines`` are the original lines, verbatim, so a kept rule is
    emitted byte-for-byte.
    """

    model_config = ConfigDict(frozen=True)

    selector_text: str
    body_text: str = ""
    raw_lines: Tuple[str, ...] = ()
    kind: RuleKind = RuleKind.STANDARD
    start_line: int = 0  # 1-based, inclusive
    end_line: int = 0


class RetentionReason(str, Enum):
    UNCONDITIONAL_MEDIA = "unconditional-media"
    UNCONDITIONAL_ROOT = "unconditional-root"
    SELECTOR_MATCHED = "selector-matched"
    CURRENT_REFERENCE_MATCHED = "current-reference-matched"
    DISCARDED = "discarded"


class RetentionDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    selector: str
    kept: bool
    reason: RetentionReason


class ExtractionResult(BaseModel):
    """Output of the rule extractor: retained text plus per-rule verdicts."""

    buffer: str = ""
    decisions: List[RetentionDecision] = Field(default_factory=list)
    rules_processed: int = 0
    media_queries_kept: int = 0

    @property
    def rules_kept(self) -> int:
        return sum(1 for d in self.decisions if d.kept)

    @property
    def rules_discarded(self) -> int:
        return self.rules_processed - self.rules_kept


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


class PurgeStats(BaseModel):
    """Derived once at the end of a run."""

    model_config = ConfigDict(frozen=True)

    rules_processed: int = 0
    rules_kept: int = 0
    media_queries_kept: int = 0
    original_bytes: int = 0
    extracted_bytes: int = 0
    compressed_bytes: int = 0
    classes: int = 0
    ids: int = 0
    custom_properties: int = 0
    files_scanned: int = 0
    files_skipped: int = 0

    @property
    def rules_discarded(self) -> int:
        return self.rules_processed - self.rules_kept

    @property
    def percent_saved(self) -> float:
        if not self.original_bytes:
            return 0.0
        return (self.original_bytes - self.compressed_bytes) / self.original_bytes * 100

    def rows(self) -> list[tuple[str, str]]:
        """Label/value pairs for the summary table."""
        return [
            ("Original size", f"{self.original_bytes / 1024:.2f} KB"),
            ("Compressed size", f"{self.compressed_bytes / 1024:.2f} KB"),
            ("Space saved", f"{self.percent_saved:.2f}%"),
            ("Rules processed", str(self.rules_processed)),
            ("Rules kept", str(self.rules_kept)),
            ("Media queries kept", str(self.media_queries_kept)),
            ("Used classes", str(self.classes)),
            ("Used variables", str(self.custom_properties)),
            ("Used IDs", str(self.ids)),
            ("Files scanned", str(self.files_scanned)),
            ("Files skipped", str(self.files_skipped)),
        ]
