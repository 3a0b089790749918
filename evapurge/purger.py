# evapurge/purger.py
"""
evapurge.purger
===============

``CSSPurger`` runs one purge, strictly in order::

    check input → discover content → collect usage → read stylesheet
      → extract rules → compress → write → stats

Each phase finishes before the next starts; the usage set is owned by the
purger instance, so independent runs never share state.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Sequence

from evapurge import env
from evapurge.collector import CollectionResult, collect_usage
from evapurge.compressor import compress_css, render_output, write_output
from evapurge.config.models import PurgeConfig
from evapurge.discovery import discover_content_files
from evapurge.errors import CSSNotFoundError
from evapurge.extractor import extract_used_rules
from evapurge.logger import get_logger
from evapurge.matcher import SelectorMatcher
from evapurge.models import ExtractionResult, PurgeStats, UsageSet
from evapurge.ui import print_info, print_primary, print_success, print_warning

logger = get_logger(__name__)


class CSSPurger:
    """One purge run over a resolved ``PurgeConfig``."""

    def __init__(self, config: PurgeConfig, verbose: bool = True):
        self.config = config
        self.verbose = verbose

        self.usage: UsageSet = UsageSet()
        self.collection: CollectionResult | None = None
        self.extraction: ExtractionResult | None = None
        self.css_content: str = ""
        self.compressed_css: str = ""
        self.output_path: Path | None = None
        self.stats: PurgeStats | None = None

    # ── output helpers ───────────────────────────────────────────────────
    def _say(self, message: str) -> None:
        if self.verbose:
            print_info(message)

    def _on_progress(self, line: int, total: int) -> None:
        if self.verbose and total:
            pct = round(line / total * 100)
            print_info(f"📊 Processing line {line}/{total} ({pct}%)")

    # ── paths ────────────────────────────────────────────────────────────
    @property
    def css_path(self) -> Path:
        if not self.config.css:
            raise CSSNotFoundError("<unset>")
        return env.resolve_path(self.config.css)

    @property
    def resolved_output_path(self) -> Path:
        return env.resolve_path(self.config.resolved_output())

    # ── phases ───────────────────────────────────────────────────────────
    def check_input(self) -> Path:
        """Fatal precondition: the stylesheet must exist before any scanning."""
        path = self.css_path
        if not path.is_file():
            logger.error(f"CSS file not found: {path}")
            raise CSSNotFoundError(path)
        return path

    def discover(self) -> List[Path]:
        return discover_content_files(
            self.config.content,
            exclude=(self.css_path, self.resolved_output_path),
        )

    def collect(self, paths: Sequence[Path]) -> UsageSet:
        self._say(f"📄 Analyzing {len(paths)} content file(s)...")
        self.collection = collect_usage(paths)
        self.usage = self.collection.usage

        for skipped in self.collection.skipped:
            print_warning(f"⚠️  Skipped unreadable file: {skipped}")

        self._say(f"📊 Found {len(self.usage.classes)} unique classes")
        self._say(f"📊 Found {len(self.usage.ids)} unique IDs")
        self._say(f"📊 Found {len(self.usage.custom_properties)} CSS variables")
        return self.usage

    def read_stylesheet(self) -> str:
        self._say("📖 Reading compiled CSS...")
        self.css_content = self.css_path.read_text(encoding="utf-8")
        self._say(f"📊 Original CSS size: {len(self.css_content) / 1024:.2f} KB")
        return self.css_content

    def extract(self) -> ExtractionResult:
        self._say("🔍 Extracting used styles...")
        matcher = SelectorMatcher(self.usage, self.config.safelist)
        self.extraction = extract_used_rules(
            self.css_content, matcher, on_progress=self._on_progress
        )
        self._say(f"📊 Processed {self.extraction.rules_processed} CSS rules")
        self._say(f"📱 Kept {self.extraction.media_queries_kept} media queries")
        self._say(f"📊 Extracted CSS size: {len(self.extraction.buffer) / 1024:.2f} KB")
        return self.extraction

    def compress(self) -> str:
        self._say("🗜️  Compressing CSS...")
        self.compressed_css = compress_css(self.extraction.buffer if self.extraction else "")
        self._say(f"📊 Compressed CSS size: {len(self.compressed_css) / 1024:.2f} KB")
        return self.compressed_css

    def write(self, now: datetime | None = None) -> Path:
        self._say("💾 Writing compressed CSS...")
        self.output_path = write_output(
            self.resolved_output_path, render_output(self.compressed_css, now)
        )
        self._say(f"📁 Compressed CSS saved to: {self.output_path}")
        return self.output_path

    def compute_stats(self) -> PurgeStats:
        ext = self.extraction or ExtractionResult()
        col = self.collection or CollectionResult()
        self.stats = PurgeStats(
            rules_processed=ext.rules_processed,
            rules_kept=ext.rules_kept,
            media_queries_kept=ext.media_queries_kept,
            original_bytes=len(self.css_content),
            extracted_bytes=len(ext.buffer),
            compressed_bytes=len(self.compressed_css),
            classes=len(self.usage.classes),
            ids=len(self.usage.ids),
            custom_properties=len(self.usage.custom_properties),
            files_scanned=col.files_scanned,
            files_skipped=len(col.skipped),
        )
        return self.stats

    # ── pipeline ─────────────────────────────────────────────────────────
    def purge(self, now: datetime | None = None) -> PurgeStats:
        """
        Run every phase in order and return the stats.

        Raises ``CSSNotFoundError`` before any scanning when the stylesheet
        is missing; any other failure propagates unchanged.
        """
        if self.verbose:
            print_primary("🚀 Starting CSS purge process...")
        logger.info(f"Purge started: css={self.config.css} content={self.config.content}")

        self.check_input()
        self.collect(self.discover())
        self.read_stylesheet()
        self.extract()
        self.compress()
        self.write(now)
        stats = self.compute_stats()

        if self.verbose:
            print_success("✅ CSS purge completed successfully!")
        logger.info(
            f"Purge finished: {stats.original_bytes} → {stats.compressed_bytes} bytes "
            f"({stats.percent_saved:.2f}% saved), {self.usage.summary()}"
        )
        return stats


def purge(config: PurgeConfig, verbose: bool = False, now: datetime | None = None) -> PurgeStats:
    """Convenience wrapper: build a ``CSSPurger`` and run it."""
    return CSSPurger(config, verbose=verbose).purge(now)
