"""
Rich-based progress panel for the slower build steps (image inlining/copying).

Counters are shown in a live-updating panel instead of scrolling log lines.
"""

import time
from typing import Dict, Optional

from rich import box
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class ProgressDisplay:
    """
    Context manager showing named counters against an optional total.

    Usage:
        with ProgressDisplay("Inlining images", total=len(paths)) as progress:
            for path in paths:
                ...
                progress.advance(Read=1)
    """

    def __init__(self, title: str, total: Optional[int] = None,
                 enabled: bool = True, refresh_per_second: int = 8):
        self.title = title
        self.total = total
        self.enabled = enabled
        self.refresh_per_second = refresh_per_second

        self.counters: Dict[str, int] = {}
        self.done = 0
        self.start_time = 0.0
        self.live: Optional[Live] = None

    def __enter__(self):
        self.start_time = time.time()
        if self.enabled:
            self.live = Live(self._make_panel(), refresh_per_second=self.refresh_per_second)
            self.live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.live:
            self.live.update(self._make_panel())
            self.live.__exit__(exc_type, exc_val, exc_tb)
        return False

    def advance(self, **counters: int) -> None:
        """Mark one item done and add to the named counters."""
        self.done += 1
        for name, step in counters.items():
            self.counters[name] = self.counters.get(name, 0) + step
        if self.live:
            self.live.update(self._make_panel())

    def _make_panel(self) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(justify="left", no_wrap=True)
        grid.add_column(justify="right", no_wrap=True)

        progress = f"{self.done:,}" if self.total is None else f"{self.done:,}/{self.total:,}"
        grid.add_row(Text("Done:", style="bold grey50"), Text(progress, style="bright_cyan"))
        for name, value in self.counters.items():
            grid.add_row(Text(f"{name}:", style="bold grey50"), Text(f"{value:,}", style="bright_cyan"))

        elapsed = time.time() - self.start_time if self.start_time else 0.0
        minutes, seconds = divmod(int(elapsed), 60)
        grid.add_row(Text("Elapsed:", style="bold grey50"),
                     Text(f"{minutes:02d}:{seconds:02d}", style="bright_cyan"))

        return Panel(grid, title=self.title, box=box.SIMPLE, border_style="bright_black")
