"""Question/answer extraction from detail pages.

The answer tables on the source site are rendered with and without a
score column, and with unbalanced markup in both cases. DOM traversal of
those tables is unreliable, so the extractor locates the table through the
DOM and then pattern-matches its raw inner markup with an ordered chain of
strategies. The first strategy producing any variant wins.
"""

from __future__ import annotations

import re
from html import unescape
from typing import Iterable, Protocol

import structlog

from ..config import SelectorConfig
from .parser import Document
from .records import QuestionRecord, VariantRecord

_PAIR_PATTERN = re.compile(r"<td>([^<]+)</td>\s*<td>(\d+)</td>")
_ROW_PATTERN = re.compile(r"<tr>\s*<td>([^<]+)")
_CELL_PATTERN = re.compile(r"<td>([^<]+)</?td>")
_HEADER_ARTIFACT = re.compile(r"^(answer|points)$", re.IGNORECASE)


class ExtractionStrategy(Protocol):
    """Turn raw table markup into ordered variants."""

    name: str

    def extract(self, markup: str, url: str) -> list[VariantRecord]:
        """Return variants in table order, or an empty list when nothing matches."""


class PairedPointsStrategy:
    """Match ``<td>text</td><td>number</td>`` pairs; duplicates keyed on (text, points)."""

    name = "paired_points"

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self.logger = logger or structlog.get_logger("feud_crawler.extractor")

    def extract(self, markup: str, url: str) -> list[VariantRecord]:
        variants: list[VariantRecord] = []
        seen: set[tuple[str, int]] = set()
        for match in _PAIR_PATTERN.finditer(markup):
            variant = unescape(match.group(1)).strip()
            points_text = match.group(2).strip()
            if not variant or not points_text:
                self.logger.debug("variant_skipped_empty", url=url, variant=variant, points=points_text)
                continue
            try:
                points = int(points_text)
            except ValueError:
                self.logger.debug("variant_skipped_points", url=url, points=points_text)
                continue
            key = (variant, points)
            if key in seen:
                self.logger.debug("variant_skipped_duplicate", url=url, variant=variant, points=points)
                continue
            seen.add(key)
            variants.append(VariantRecord(variant=variant, points=points))
        return variants


class RankedRowsStrategy:
    """Recover variant text without a score column and rank it by position.

    Row-opening cells are tried first; when none match, every cell is taken
    except the ``Answer``/``Points`` header labels. The first variant scores
    the number of matches, the last scores 1. Duplicates keep their first
    occurrence.

    Position is the only ranking signal available here; a table listed in
    non-ranked order produces wrong scores.
    """

    name = "ranked_rows"

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self.logger = logger or structlog.get_logger("feud_crawler.extractor")

    def extract(self, markup: str, url: str) -> list[VariantRecord]:
        texts = self._collect(_ROW_PATTERN, markup) or self._collect(_CELL_PATTERN, markup)
        total = len(texts)
        variants: list[VariantRecord] = []
        seen: set[str] = set()
        for index, text in enumerate(texts):
            if text in seen:
                self.logger.debug("variant_skipped_duplicate", url=url, variant=text)
                continue
            seen.add(text)
            variants.append(VariantRecord(variant=text, points=total - index))
        return variants

    @staticmethod
    def _collect(pattern: re.Pattern[str], markup: str) -> list[str]:
        texts: list[str] = []
        for match in pattern.finditer(markup):
            text = unescape(match.group(1)).strip()
            if text and not _HEADER_ARTIFACT.match(text):
                texts.append(text)
        return texts


class StrategyChain:
    """Run strategies in order until one yields variants."""

    def __init__(
        self,
        strategies: Iterable[ExtractionStrategy] | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.logger = logger or structlog.get_logger("feud_crawler.extractor")
        self.strategies: list[ExtractionStrategy] = list(
            strategies
            if strategies is not None
            else (PairedPointsStrategy(self.logger), RankedRowsStrategy(self.logger))
        )

    def run(self, markup: str, url: str) -> list[VariantRecord]:
        for strategy in self.strategies:
            variants = strategy.extract(markup, url)
            self.logger.debug("strategy_result", url=url, strategy=strategy.name, count=len(variants))
            if variants:
                return variants
        return []


class QuestionExtractor:
    """Recover a QuestionRecord from a detail page, or ``None`` when nothing is extractable."""

    def __init__(
        self,
        selectors: SelectorConfig | None = None,
        chain: StrategyChain | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.selectors = selectors or SelectorConfig()
        self.logger = logger or structlog.get_logger("feud_crawler.extractor")
        self.chain = chain or StrategyChain(logger=self.logger)

    def extract(self, document: Document) -> QuestionRecord | None:
        url = document.url
        question = document.text(self.selectors.question_title)
        if question is None:
            self.logger.info("question_missing", url=url)
            return None
        markup = document.inner_html(self.selectors.answer_table)
        if markup is None:
            self.logger.info("answer_table_missing", url=url)
            return None
        variants = self.chain.run(markup, url)
        if not variants:
            self.logger.info("variants_missing", url=url)
            return None
        self.logger.debug("question_extracted", url=url, variants=len(variants))
        return QuestionRecord(url=url, question_en=question, variants_en=tuple(variants))


__all__ = [
    "ExtractionStrategy",
    "PairedPointsStrategy",
    "QuestionExtractor",
    "RankedRowsStrategy",
    "StrategyChain",
]
