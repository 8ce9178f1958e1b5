"""Crawl orchestrator wiring together fetching, link discovery, extraction and storage."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable, Iterator, Sequence

import structlog

from .config import CrawlerSettings
from .engine import Fetcher, Parser, QuestionExtractor, QuestionStore
from .ui import ProgressReporter

Sleep = Callable[[float], Awaitable[None]]


@dataclass(slots=True)
class ProcessingResult:
    status: str
    url: str
    reason: str | None = None


@dataclass(slots=True)
class CrawlSummary:
    """Counts reported at the end of an extraction run."""

    discovered: int = 0
    already_known: int = 0
    candidates: int = 0
    processed: int = 0
    failed: int = 0
    total_stored: int = 0
    output_file: str = ""

    def as_dict(self) -> dict[str, int | str]:
        return asdict(self)


def batched(items: Sequence[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class Orchestrator:
    """Drive listing → detail pages → store in paced, bounded batches."""

    def __init__(
        self,
        settings: CrawlerSettings,
        fetcher: Fetcher,
        store: QuestionStore,
        parser: Parser | None = None,
        extractor: QuestionExtractor | None = None,
        progress: ProgressReporter | None = None,
        sleep: Sleep = asyncio.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.fetcher = fetcher
        self.store = store
        self.logger = logger or structlog.get_logger("feud_crawler.orchestrator")
        self.parser = parser or Parser(settings.selectors, logger=self.logger)
        self.extractor = extractor or QuestionExtractor(settings.selectors, logger=self.logger)
        self.progress = progress or ProgressReporter(enabled=False)
        self._sleep = sleep

    async def discover_links(self) -> list[str]:
        base_url = self.settings.base_url
        self.logger.info("listing_fetch", url=base_url)
        document = await self.fetcher.fetch_document(base_url)
        if document is None:
            return []
        links = self.parser.parse_links(document, base_url)
        self.logger.info("links_discovered", url=base_url, count=len(links))
        return links

    async def run(self) -> CrawlSummary:
        summary = CrawlSummary(output_file=str(self.store.path))
        links = await self.discover_links()
        summary.discovered = len(links)
        if not links:
            self.logger.warning("no_links", url=self.settings.base_url)
            return summary

        self.store.load()
        to_process = [link for link in links if not self.store.contains(link)]
        summary.already_known = len(links) - len(to_process)
        summary.candidates = len(to_process)
        self.logger.info(
            "crawl_plan",
            discovered=summary.discovered,
            already_known=summary.already_known,
            candidates=summary.candidates,
        )

        size = self.settings.batch_size
        batches = list(batched(to_process, size))
        self.progress.start(len(to_process))
        try:
            for number, batch in enumerate(batches, start=1):
                first = (number - 1) * size + 1
                self.logger.info(
                    "batch_started",
                    batch=number,
                    batches=len(batches),
                    first=first,
                    last=first + len(batch) - 1,
                    candidates=len(to_process),
                )
                results = await asyncio.gather(*(self._process_link(link) for link in batch))
                for result in results:
                    if result.status == "success":
                        summary.processed += 1
                        self.progress.advance(success=True, current_url=result.url)
                    elif result.status == "skipped":
                        self.progress.advance(skipped=True, current_url=result.url)
                    else:
                        summary.failed += 1
                        self.progress.advance(failed=True, current_url=result.url)
                if number < len(batches):
                    await self._sleep(self.settings.batch_delay)
        finally:
            self.progress.close()

        summary.total_stored = len(self.store)
        self.logger.info("crawl_finished", **summary.as_dict())
        return summary

    async def _process_link(self, url: str) -> ProcessingResult:
        if self.store.contains(url):
            self.logger.info("link_skipped_known", url=url)
            return ProcessingResult(status="skipped", url=url, reason="known")
        try:
            await self._sleep(self.settings.item_delay)
            document = await self.fetcher.fetch_document(url)
            if document is None:
                return ProcessingResult(status="failed", url=url, reason="fetch_failed")
            record = self.extractor.extract(document)
            if record is None:
                self.logger.info("link_unextractable", url=url)
                return ProcessingResult(status="failed", url=url, reason="nothing_extracted")
            if not await self.store.append(record):
                return ProcessingResult(status="skipped", url=url, reason="known")
            self.logger.info("record_stored", url=url, variants=len(record.variants_en), total=len(self.store))
            return ProcessingResult(status="success", url=url)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("link_error", url=url, error=str(exc), exc_info=True)
            return ProcessingResult(status="failed", url=url, reason=str(exc))


async def run_crawl(
    settings: CrawlerSettings,
    progress: ProgressReporter | None = None,
    sleep: Sleep = asyncio.sleep,
) -> CrawlSummary:
    """Build the crawl pipeline from settings, run it once and release resources."""

    logger = structlog.get_logger("feud_crawler.orchestrator")
    store = QuestionStore(settings.output_file, logger=logger)
    fetcher = Fetcher(settings, logger=logger)
    try:
        orchestrator = Orchestrator(settings, fetcher, store, progress=progress, sleep=sleep, logger=logger)
        return await orchestrator.run()
    finally:
        await fetcher.close()
        await store.close()


__all__ = ["CrawlSummary", "Orchestrator", "ProcessingResult", "batched", "run_crawl"]
