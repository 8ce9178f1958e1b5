from __future__ import annotations

from conftest import paired_rows, render_question

from feud_crawler.engine import Document, QuestionExtractor, StrategyChain, VariantRecord
from feud_crawler.engine.extractor import PairedPointsStrategy, RankedRowsStrategy


def _as_pairs(variants: list[VariantRecord]) -> list[tuple[str, int]]:
    return [(item.variant, item.points) for item in variants]


def test_extractor_reads_question_and_scored_rows() -> None:
    html = render_question("Name a pet", paired_rows([("Dog", 40), ("Cat", 25)]))
    record = QuestionExtractor().extract(Document(html, "https://example.com/q/pets"))

    assert record is not None
    assert record.url == "https://example.com/q/pets"
    assert record.question_en == "Name a pet"
    assert _as_pairs(list(record.variants_en)) == [("Dog", 40), ("Cat", 25)]


def test_question_title_with_inline_markup_keeps_original_spacing() -> None:
    html = render_question("  Name a <em>pet</em>'s <b>favourite</b> toy ", paired_rows([("Ball", 30)]))
    record = QuestionExtractor().extract(Document(html, "https://example.com/q/toys"))

    assert record is not None
    assert record.question_en == "Name a pet's favourite toy"


def test_paired_points_skips_exact_duplicates_only() -> None:
    markup = (
        "<tr><td>Dog</td><td>40</td></tr>"
        "<tr><td>Dog</td><td>40</td></tr>"
        "<tr><td>Dog</td><td>30</td></tr>"
    )
    assert _as_pairs(StrategyChain().run(markup, "u")) == [("Dog", 40), ("Dog", 30)]


def test_paired_points_ignores_blank_and_non_numeric_pairs() -> None:
    markup = (
        "<td>Dog</td><td>40</td>"
        "<td>Cat</td><td>lots</td>"
        "<td>   </td><td>5</td>"
        "<td>Bird</td><td>10</td>"
    )
    assert _as_pairs(PairedPointsStrategy().extract(markup, "u")) == [("Dog", 40), ("Bird", 10)]


def test_paired_points_unescapes_entities() -> None:
    markup = "<td>Tom &amp; Jerry</td><td>12</td>"
    assert _as_pairs(StrategyChain().run(markup, "u")) == [("Tom & Jerry", 12)]


def test_ranked_rows_scores_unbalanced_rows_by_position() -> None:
    markup = "<tr><td>Dog<tr><td>Cat<tr><td>Bird"
    assert _as_pairs(StrategyChain().run(markup, "u")) == [("Dog", 3), ("Cat", 2), ("Bird", 1)]


def test_ranked_rows_through_document_without_points_column() -> None:
    body = "<tr><td>Answer</td></tr><tr><td>Dog</td></tr><tr><td>Cat</td></tr>"
    html = render_question("Name a pet", body)
    record = QuestionExtractor().extract(Document(html, "https://example.com/q/pets"))

    assert record is not None
    assert _as_pairs(list(record.variants_en)) == [("Dog", 2), ("Cat", 1)]


def test_ranked_rows_keeps_first_duplicate_and_counts_all_matches() -> None:
    markup = "<tr><td>Dog<tr><td>Cat<tr><td>Dog"
    assert _as_pairs(RankedRowsStrategy().extract(markup, "u")) == [("Dog", 3), ("Cat", 2)]


def test_cell_fallback_drops_header_labels() -> None:
    markup = "<td>Answer</td><td>Points</td><td>Dog</td><td>Cat</td>"
    assert _as_pairs(StrategyChain().run(markup, "u")) == [("Dog", 2), ("Cat", 1)]


def test_extractor_returns_none_without_title() -> None:
    html = render_question(None, paired_rows([("Dog", 40)]))
    assert QuestionExtractor().extract(Document(html, "https://example.com/q/1")) is None


def test_extractor_returns_none_without_table() -> None:
    html = render_question("Name a pet", None)
    assert QuestionExtractor().extract(Document(html, "https://example.com/q/1")) is None


def test_extractor_returns_none_when_table_has_no_variants() -> None:
    html = render_question("Name a pet", "")
    assert QuestionExtractor().extract(Document(html, "https://example.com/q/1")) is None


def test_strategy_chain_stops_at_first_productive_strategy() -> None:
    class Recording:
        def __init__(self, name: str, result: list[VariantRecord]) -> None:
            self.name = name
            self.result = result
            self.calls = 0

        def extract(self, markup: str, url: str) -> list[VariantRecord]:
            self.calls += 1
            return self.result

    empty = Recording("empty", [])
    productive = Recording("productive", [VariantRecord("Dog", 1)])
    unused = Recording("unused", [VariantRecord("Cat", 1)])

    chain = StrategyChain([empty, productive, unused])

    assert _as_pairs(chain.run("<td>x</td>", "u")) == [("Dog", 1)]
    assert (empty.calls, productive.calls, unused.calls) == (1, 1, 0)
