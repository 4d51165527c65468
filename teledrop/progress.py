"""Upload progress reporting."""

from typing import Optional, Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


class ProgressSink(Protocol):
    """Receives byte counts while a file is streamed to the API."""

    def on_progress(self, sent: int, total: int) -> None:
        ...

    def on_complete(self, total: int) -> None:
        ...

    def on_failure(self, error: BaseException) -> None:
        ...


class NullProgress:
    """Discards all notifications."""

    def on_progress(self, sent: int, total: int) -> None:
        pass

    def on_complete(self, total: int) -> None:
        pass

    def on_failure(self, error: BaseException) -> None:
        pass


class ConsoleProgress:
    """Terminal progress bar, cleared once the upload finishes or fails."""

    def __init__(self, console: Optional[Console] = None):
        self._progress = Progress(
            SpinnerColumn(style="green"),
            TimeElapsedColumn(),
            BarColumn(complete_style="cyan", finished_style="blue"),
            DownloadColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )
        self._task: Optional[TaskID] = None

    def __enter__(self) -> "ConsoleProgress":
        self._progress.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._progress.stop()

    def on_progress(self, sent: int, total: int) -> None:
        if self._task is None:
            self._task = self._progress.add_task("upload", total=total)
        self._progress.update(self._task, completed=sent)

    def on_complete(self, total: int) -> None:
        self.on_progress(total, total)

    def on_failure(self, error: BaseException) -> None:
        # the bar is cleared when the context exits
        pass


def format_size(size_bytes: float) -> str:
    """Format file size in human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} TB"
