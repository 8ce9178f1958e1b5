"""Shared fixtures: settings rooted in tmp_path, page builders and fake collaborators."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from feud_crawler.config import CrawlerSettings, TranslationSettings
from feud_crawler.engine import Document


BASE_URL = "https://answers.example.com/answers/"


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeFetcher:
    """Serve canned pages by URL; unknown URLs behave like failed fetches."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    async def fetch_document(self, url: str) -> Document | None:
        self.requested.append(url)
        html = self.pages.get(url)
        if html is None:
            return None
        return Document(html, url)

    async def close(self) -> None:
        return


class DictTranslator:
    """Translate through a lookup table, prefixing unknown strings."""

    def __init__(self, table: dict[str, str] | None = None) -> None:
        self.table = table or {}
        self.calls: list[tuple[str, str, str]] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        return self.table.get(text, f"{target_lang}:{text}")


def render_listing(hrefs: Iterable[str], outside: Iterable[str] = ()) -> str:
    items = "".join(f'<li><a href="{href}">{href}</a></li>' for href in hrefs)
    stray = "".join(f'<a href="{href}">{href}</a>' for href in outside)
    return (
        "<html><body>"
        f"<nav>{stray}</nav>"
        f'<div class="blog-post"><ul>{items}</ul></div>'
        "</body></html>"
    )


def render_question(title: str | None, table_body: str | None) -> str:
    heading = f'<h1 class="blog-post-title">{title}</h1>' if title is not None else ""
    table = (
        f'<table class="table table-striped">{table_body}</table>'
        if table_body is not None
        else ""
    )
    return f"<html><body>{heading}{table}</body></html>"


def paired_rows(pairs: Iterable[tuple[str, int]]) -> str:
    rows = "".join(f"<tr><td>{text}</td><td>{points}</td></tr>" for text, points in pairs)
    return f"<tr><td>Answer</td><td>Points</td></tr>{rows}"


def question_payload(url: str, question: str, variants: Iterable[tuple[str, int]]) -> dict[str, Any]:
    return {
        "url": url,
        "question_en": question,
        "variants_en": [{"variant": text, "points": points} for text, points in variants],
    }


def write_json(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FEUD_CRAWLER_HOME", raising=False)
    monkeypatch.delenv("DEEPL_AUTH_KEY", raising=False)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def crawler_settings(tmp_path: Path) -> Callable[..., CrawlerSettings]:
    def _factory(**overrides: Any) -> CrawlerSettings:
        payload: dict[str, Any] = {
            "base_url": BASE_URL,
            "output_file": tmp_path / "data.json",
        }
        payload.update(overrides)
        return CrawlerSettings(**payload)

    return _factory


@pytest.fixture
def translation_settings(tmp_path: Path) -> Callable[..., TranslationSettings]:
    def _factory(**overrides: Any) -> TranslationSettings:
        payload: dict[str, Any] = {
            "auth_key": "test-key",
            "input_file": tmp_path / "data.json",
            "output_file": tmp_path / "dataRu.json",
        }
        payload.update(overrides)
        return TranslationSettings(**payload)

    return _factory
