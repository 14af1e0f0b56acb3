"""
Manages the Rich progress display for a single HTTP download.
"""

import os

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class ProgressManager:
    """
    Wraps a Rich Progress bar showing the file name, bytes transferred, speed,
    ETA and elapsed time of one download.
    """

    def __init__(self, console: Console):
        self.console = console
        self.progress = Progress(
            TextColumn("[magenta]⟶ Progress:[/magenta]"),
            BarColumn(bar_width=40, complete_style="blue"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "│",
            DownloadColumn(),
            "│",
            TransferSpeedColumn(),
            "│ ETA:",
            TimeRemainingColumn(),
            "│ Elapsed:",
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._task_id: TaskID | None = None

    def __enter__(self) -> "ProgressManager":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.progress.stop()

    def start_file(self, url: str, destination_path: str) -> None:
        """Prints the download header and creates the progress task."""
        file_name = os.path.basename(destination_path)
        self.console.print(
            f"[blue]⟶[/blue] [magenta]Downloading:[/magenta] {escape(url)}"
        )
        self.console.print(f"[blue]⟶[/blue] [magenta]File:[/magenta] {escape(file_name)}")
        self._task_id = self.progress.add_task(file_name, total=None)

    def set_total(self, total: int | None) -> None:
        """Sets the expected size; ``None`` keeps the bar indeterminate."""
        if self._task_id is not None:
            self.progress.update(self._task_id, total=total)

    def advance(self, bytes_count: int) -> None:
        if self._task_id is not None:
            self.progress.update(self._task_id, advance=bytes_count)

    def finish(self, destination_path: str) -> None:
        """Stops the bar and prints the completion message."""
        self.progress.stop()
        self.console.print("[blue]●[/blue] [magenta]Download complete![/magenta]")
        self.console.print(
            f"[blue]●[/blue] [magenta]File saved to:[/magenta] "
            f"[blue]{escape(destination_path)}[/blue]"
        )
