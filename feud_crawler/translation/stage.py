"""Incremental translation of stored questions into the target language."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable

import structlog

from ..config import TranslationSettings
from ..engine.records import QuestionRecord, TranslatedRecord, VariantRecord, normalise_question
from ..infra.storage import CorruptSnapshotError, SnapshotWriter, read_json_array
from ..ui import ProgressReporter
from .client import DeepLTranslator, RetryingTranslator, TextTranslator

Sleep = Callable[[float], Awaitable[None]]


class InputFileError(RuntimeError):
    """The question file the translation run depends on is missing, corrupt or empty."""


@dataclass(slots=True)
class TranslationSummary:
    total: int = 0
    translated: int = 0
    skipped_known: int = 0
    skipped_duplicate: int = 0
    failed: int = 0
    total_stored: int = 0
    output_file: str = ""

    def as_dict(self) -> dict[str, int | str]:
        return asdict(self)


def load_source_records(settings: TranslationSettings) -> list[Any]:
    path = settings.input_file
    try:
        payload = read_json_array(path)
    except (CorruptSnapshotError, OSError) as exc:
        raise InputFileError(f"Cannot read {path}: {exc}") from exc
    if payload is None:
        raise InputFileError(f"Input file not found: {path}")
    if not payload:
        raise InputFileError(f"Input file holds no records: {path}")
    return payload


class TranslationStage:
    """Translate each untranslated record and snapshot the output after every success.

    Output is keyed by URL: a URL translated by an earlier run is carried
    forward unchanged. A newly translated question whose normalised text was
    already produced from another URL is skipped.
    """

    def __init__(
        self,
        settings: TranslationSettings,
        translator: TextTranslator,
        writer: SnapshotWriter | None = None,
        progress: ProgressReporter | None = None,
        sleep: Sleep = asyncio.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or structlog.get_logger("feud_crawler.translation")
        self.translator = RetryingTranslator(
            translator,
            max_attempts=settings.max_attempts,
            backoff_base=settings.backoff_base,
            backoff_cap=settings.backoff_cap,
            sleep=sleep,
            logger=self.logger,
        )
        self.writer = writer or SnapshotWriter(settings.output_file, logger=self.logger)
        self.progress = progress or ProgressReporter(enabled=False, label="translate")
        self._sleep = sleep

    def load_prior(self) -> list[dict[str, Any]]:
        path = self.settings.output_file
        try:
            payload = read_json_array(path)
        except (CorruptSnapshotError, OSError) as exc:
            self.logger.warning("prior_translations_unreadable", path=str(path), error=str(exc))
            return []
        entries = [item for item in payload or [] if isinstance(item, dict)]
        self.logger.info("prior_translations_loaded", path=str(path), records=len(entries))
        return entries

    async def run(self) -> TranslationSummary:
        items = load_source_records(self.settings)
        prior = self.load_prior()
        prior_by_url = {str(item["url"]): item for item in prior if item.get("url")}
        seen_questions = {
            normalise_question(item["question"])
            for item in prior
            if isinstance(item.get("question"), str)
        }

        summary = TranslationSummary(total=len(items), output_file=str(self.settings.output_file))
        results: list[dict[str, Any]] = []
        self.progress.start(len(items))
        try:
            for index, item in enumerate(items, start=1):
                url = str(item["url"]) if isinstance(item, dict) and item.get("url") else None
                if url in prior_by_url:
                    self.logger.info("translation_skipped_known", position=index, url=url)
                    results.append(prior_by_url[url])
                    summary.skipped_known += 1
                    self.progress.advance(skipped=True, current_url=url)
                    continue
                try:
                    record = QuestionRecord.from_dict(item)
                    translated = await self._translate(record, seen_questions, index)
                except Exception as exc:  # noqa: BLE001
                    self.logger.error("translation_failed", position=index, url=url, error=str(exc))
                    summary.failed += 1
                    self.progress.advance(failed=True, current_url=url)
                    continue
                if translated is None:
                    summary.skipped_duplicate += 1
                    self.progress.advance(skipped=True, current_url=url)
                    continue
                results.append(translated.to_dict())
                seen_questions.add(translated.question_key)
                summary.translated += 1
                try:
                    await self.writer.submit(results)
                except OSError as exc:
                    # The next successful snapshot still carries this record
                    self.logger.error("translation_snapshot_failed", url=record.url, error=str(exc))
                self.logger.info(
                    "record_translated",
                    position=index,
                    url=record.url,
                    question=translated.question,
                    total=len(results),
                )
                self.progress.advance(success=True, current_url=record.url)
                await self._sleep(self.settings.record_delay)
        finally:
            self.progress.close()

        summary.total_stored = len(results)
        self.logger.info("translation_finished", **summary.as_dict())
        return summary

    async def _translate(
        self, record: QuestionRecord, seen_questions: set[str], position: int
    ) -> TranslatedRecord | None:
        question = await self._call(record.question_en)
        if normalise_question(question) in seen_questions:
            self.logger.info(
                "translation_skipped_duplicate", position=position, url=record.url, question=question
            )
            return None
        variants: list[VariantRecord] = []
        for variant in record.variants_en:
            translated = await self._call(variant.variant)
            variants.append(VariantRecord(variant=translated, points=variant.points))
            self.logger.debug(
                "variant_translated",
                url=record.url,
                source=variant.variant,
                target=translated,
                points=variant.points,
            )
            await self._sleep(self.settings.variant_delay)
        return TranslatedRecord(
            url=record.url,
            question_en=record.question_en,
            question=question,
            variants=tuple(variants),
        )

    async def _call(self, text: str) -> str:
        return await self.translator.translate(
            text, self.settings.source_lang, self.settings.target_lang
        )

    async def close(self) -> None:
        await self.writer.close()


async def run_translation(
    settings: TranslationSettings,
    progress: ProgressReporter | None = None,
    translator: TextTranslator | None = None,
    sleep: Sleep = asyncio.sleep,
) -> TranslationSummary:
    """Build the translation stage from settings, run it once and release resources."""

    translator = translator or DeepLTranslator(settings.auth_key)
    stage = TranslationStage(settings, translator, progress=progress, sleep=sleep)
    try:
        return await stage.run()
    finally:
        await stage.close()


__all__ = [
    "InputFileError",
    "TranslationStage",
    "TranslationSummary",
    "load_source_records",
    "run_translation",
]
