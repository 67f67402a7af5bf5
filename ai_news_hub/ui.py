"""Terminal interface for the AI News Hub command line."""

import time
from contextlib import contextmanager

from rich import box
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from .processing.aggregate import DashboardState


class FriendlyUI:
    """Progress and summary output written to stderr, leaving stdout for the dashboard."""

    def __init__(self, verbose: bool = False, console: Console | None = None):
        self.verbose = verbose
        self.start_time = time.time()
        self.console = console or Console(stderr=True)

    def show_banner(self, query: str):
        title = Text("AI ニュースハブ", style="bold bright_magenta")
        subtitle = Text(f"Google News & Yahoo! · {query}", style="bright_cyan")
        self.console.print(Panel(
            Align.center(Text.assemble(title, "\n", subtitle)),
            box=box.ROUNDED,
            border_style="bright_cyan",
        ))

    def success(self, message: str, emoji: str = "✅"):
        self.console.print(f"{emoji} [bold bright_green]{message}[/bold bright_green]")

    def warning(self, message: str, emoji: str = "⚠️"):
        self.console.print(f"{emoji} [bold yellow]{message}[/bold yellow]")

    def error(self, message: str, emoji: str = "❌"):
        self.console.print(f"{emoji} [bold bright_red]{message}[/bold bright_red]")

    @contextmanager
    def stage(self, name: str, emoji: str = "📰"):
        """Show a spinner while a pipeline stage runs."""
        stage_start = time.time()

        with Progress(
            SpinnerColumn("dots", style="bold bright_green"),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task(f"{emoji} {name}...", total=None)
            try:
                yield progress, task
            except Exception as e:
                self.error(f"Failed: {e}")
                raise

        if not self.verbose:
            self.console.print(f"   [dim]Completed in {time.time() - stage_start:.1f}s[/dim]")

    def complete_progress(self, progress, task, result_message: str):
        progress.update(task, completed=1, total=1)
        self.console.print(f"   → [bold]{result_message}[/bold]")

    def show_final_summary(self, counts: dict[str, int], state: DashboardState, link: str | None):
        duration = time.time() - self.start_time

        summary_table = Table(show_header=False, box=box.SIMPLE, padding=(0, 2))
        summary_table.add_column("Metric", style="dim blue")
        summary_table.add_column("Value", style="bold bright_blue")

        summary_table.add_row("🔍 Query", state.query)
        summary_table.add_row("🗂  View", state.view.value)
        summary_table.add_row("🎚  Relevance level", str(state.threshold))
        summary_table.add_row("📊 All", str(counts["all"]))
        summary_table.add_row("📰 News", str(counts["news"]))
        summary_table.add_row("💬 Posts", str(counts["social"]))
        if link:
            summary_table.add_row("🔗 Share", link)
        summary_table.add_row("⏱️  Total time", f"{duration:.1f}s")

        self.console.print(Panel(
            summary_table,
            title="[bold cyan]Dashboard ready[/bold cyan]",
            title_align="center",
            box=box.ROUNDED,
            border_style="bright_blue",
        ))

    def verbose_log(self, message: str):
        if self.verbose:
            self.console.print(f"   [dim bright_blue]◦ {message}[/dim bright_blue]")


def init_ui(verbose: bool = False) -> FriendlyUI:
    """Initialize UI for the session."""
    return FriendlyUI(verbose=verbose)
