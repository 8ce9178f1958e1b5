"""Rich progress bar for the crawl and translate runs."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.errors import LiveError
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn, TimeElapsedColumn


@dataclass
class RunCounters:
    total: int
    success: int = 0
    failed: int = 0
    skipped: int = 0
    current_url: str | None = None


def _shorten(url: str, width: int = 60) -> str:
    return url if len(url) <= width else url[: width - 3] + "..."


class ProgressReporter:
    """Count per-item outcomes and mirror them on a terminal bar when one is attached."""

    def __init__(self, enabled: bool = True, label: str = "crawl", console: Console | None = None) -> None:
        self.enabled = enabled
        self.label = label
        self.console = console
        self.state: RunCounters | None = None
        self._bar: Progress | None = None
        self._task: TaskID | None = None

    def start(self, total: int) -> None:
        self.state = RunCounters(total=total)
        if not self.enabled:
            return
        console = self.console or Console()
        if not console.is_terminal:
            self.enabled = False
            return
        bar = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=None),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TextColumn("[green]ok {task.fields[success]} [red]failed {task.fields[failed]} [yellow]skipped {task.fields[skipped]}"),
            TextColumn("[dim]{task.fields[url]}"),
            console=console,
            transient=True,
        )
        try:
            bar.start()
        except LiveError:
            # Another live display owns the console
            self.enabled = False
            return
        self._bar = bar
        self._task = bar.add_task(self.label, total=total, success=0, failed=0, skipped=0, url="")

    def advance(
        self,
        success: bool = False,
        failed: bool = False,
        skipped: bool = False,
        current_url: str | None = None,
    ) -> None:
        state = self.state
        if state is None:
            raise RuntimeError("ProgressReporter.start must be called before advance")
        state.success += int(success)
        state.failed += int(failed)
        state.skipped += int(skipped)
        if current_url:
            state.current_url = current_url
        if self._bar is not None and self._task is not None:
            self._bar.update(
                self._task,
                advance=1,
                success=state.success,
                failed=state.failed,
                skipped=state.skipped,
                url=_shorten(state.current_url or ""),
            )

    def close(self) -> None:
        if self._bar is not None:
            self._bar.stop()
        self._bar = None
        self._task = None


__all__ = ["ProgressReporter", "RunCounters"]
