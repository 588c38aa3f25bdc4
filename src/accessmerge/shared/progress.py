"""Rich progress display for multi-engine runs."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class PipelineProgress:
    """One spinner per engine, with phase headers printed above them."""

    def __init__(self) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "PipelineProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start_engine(self, engine: str) -> None:
        """Register and start tracking an engine."""
        tid = self._progress.add_task(f"[cyan]{engine}[/]", total=None)
        self._task_ids[engine] = tid

    def finish_engine(self, engine: str, issue_count: int) -> None:
        """Mark an engine as complete."""
        if engine in self._task_ids:
            self._progress.update(
                self._task_ids[engine],
                description=f"[green]✓ {engine}[/] ({issue_count} issue(s))",
                completed=True,
            )

    def fail_engine(self, engine: str, error: str) -> None:
        """Mark an engine as failed."""
        if engine in self._task_ids:
            self._progress.update(
                self._task_ids[engine],
                description=f"[red]✗ {engine}: {escape(error)}[/]",
                completed=True,
            )

    def print_phase(self, label: str) -> None:
        """Print a phase header outside the progress display."""
        self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))
