"""Typer CLI entrypoint for the answers crawler."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from .config import AppConfig, ConfigRepository
from .logging_conf import configure_logging
from .orchestrator import CrawlSummary, run_crawl
from .translation import InputFileError, TranslationSummary, run_translation
from .ui import ProgressReporter

app = typer.Typer(
    help="Crawl trivia answer pages and translate the collected questions.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: AppConfig


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    config = repository.load()
    configure_logging(verbose=verbose, log_dir=repository.locator.logs_dir)
    return AppState(repository=repository, config=config)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _progress_default_enabled() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _render_crawl_summary(summary: CrawlSummary) -> Table:
    table = Table(title="Crawl results", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Discovered", str(summary.discovered))
    table.add_row("Already known", str(summary.already_known))
    table.add_row("New candidates", str(summary.candidates))
    table.add_row("Processed", str(summary.processed))
    table.add_row("Failed", str(summary.failed))
    table.add_row("Total stored", str(summary.total_stored))
    return table


def _render_translation_summary(summary: TranslationSummary) -> Table:
    table = Table(title="Translation results", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Input records", str(summary.total))
    table.add_row("Translated", str(summary.translated))
    table.add_row("Already translated", str(summary.skipped_known))
    table.add_row("Duplicate question", str(summary.skipped_duplicate))
    table.add_row("Failed", str(summary.failed))
    table.add_row("Total stored", str(summary.total_stored))
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
) -> None:
    try:
        ctx.obj = build_state(verbose)
    except (ValueError, yaml.YAMLError) as exc:
        console.print(f"Cannot load configuration: {exc}", style="red")
        raise typer.Exit(code=1)


@app.command("crawl", help="Collect new question pages into the question store.")
def crawl(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    settings = state.config.crawler
    progress = ProgressReporter(enabled=_progress_default_enabled(), label="crawl")
    summary = asyncio.run(run_crawl(settings, progress=progress))
    if summary.discovered == 0:
        console.print(f"No question links found at {settings.base_url}.", style="yellow")
        return
    console.print(_render_crawl_summary(summary))
    console.print(f"Data saved to {summary.output_file}", style="dim")


@app.command("translate", help="Translate stored questions into the target language.")
def translate(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    settings = state.config.translation
    progress = ProgressReporter(enabled=_progress_default_enabled(), label="translate")
    try:
        summary = asyncio.run(run_translation(settings, progress=progress))
    except (ValueError, InputFileError) as exc:
        console.print(f"Translation cannot start: {exc}", style="red")
        raise typer.Exit(code=1)
    console.print(_render_translation_summary(summary))
    console.print(f"Data saved to {summary.output_file}", style="dim")


__all__ = ["app", "AppState", "build_state"]
