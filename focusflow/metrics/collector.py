"""Metrics Collector — session progress across all goal cards."""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from focusflow.models.task import Task, TaskMode, TaskStatus


def format_duration(seconds: float) -> str:
    """``3725.4`` → ``"1h 2m 05s"``; ``65`` → ``"1m 05s"``; ``7`` → ``"07s"``."""
    total = int(seconds)
    hrs, rest = divmod(total, 3600)
    mins, secs = divmod(rest, 60)

    parts = []
    if hrs > 0:
        parts.append(f"{hrs}h")
    if mins > 0 or hrs > 0:
        parts.append(f"{mins}m")
    parts.append(f"{secs:02d}s")
    return " ".join(parts)


@dataclass
class SessionReport:
    """Container for all computed metrics."""
    total_tasks: int = 0
    tasks_completed: int = 0
    tasks_running: int = 0
    tasks_paused: int = 0
    tasks_pending: int = 0
    completion_ratio: float = 0.0
    focus_seconds: float = 0.0
    learn_seconds: float = 0.0
    running_title: Optional[str] = None
    per_task_progress: dict[str, float] = field(default_factory=dict)


class MetricsCollector:
    """Computes and prints the session summary."""

    def __init__(self, console: Optional[Console] = None):
        self.report: Optional[SessionReport] = None
        self.tasks: list[Task] = []
        self.console = console or Console()

    def calculate(self, tasks: list[Task]) -> SessionReport:
        """Compute all metrics from the current task states."""
        report = SessionReport(total_tasks=len(tasks))

        report.tasks_completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
        report.tasks_running = sum(1 for t in tasks if t.status == TaskStatus.RUNNING)
        report.tasks_paused = sum(1 for t in tasks if t.status == TaskStatus.PAUSED)
        report.tasks_pending = sum(1 for t in tasks if t.status == TaskStatus.PENDING)

        # Header bar divides by at least one so an empty board reads 0%
        report.completion_ratio = report.tasks_completed / (report.total_tasks or 1)

        report.focus_seconds = sum(t.focus_elapsed for t in tasks)
        report.learn_seconds = sum(t.learn_elapsed for t in tasks)

        running = next((t for t in tasks if t.status == TaskStatus.RUNNING), None)
        report.running_title = running.title if running else None

        report.per_task_progress = {t.id: t.progress for t in tasks}

        self.tasks = list(tasks)
        self.report = report
        return report

    def print_report(self) -> None:
        """Print the session summary and one row per task."""
        if self.report is None:
            self.console.print("No metrics calculated yet. Run calculate() first.")
            return

        r = self.report
        running = (
            f"Active: [bold yellow]{r.running_title}[/bold yellow]"
            if r.running_title else "[dim]No timer running[/dim]"
        )
        self.console.print(Panel(
            f"[bold cyan]FocusFlow — Session Progress[/bold cyan]\n"
            f"{r.tasks_completed}/{r.total_tasks} completed ({r.completion_ratio:.0%})  ·  {running}",
            border_style="cyan",
        ))

        summary = Table(title="Time Logged", border_style="blue")
        summary.add_column("Budget", style="bold")
        summary.add_column("Total", justify="right")
        summary.add_row("[cyan]Focus[/cyan]", format_duration(r.focus_seconds))
        summary.add_row("[green]Learn[/green]", format_duration(r.learn_seconds))
        self.console.print(summary)

        if not self.tasks:
            return

        task_table = Table(title="Tasks", border_style="magenta")
        task_table.add_column("ID", style="dim")
        task_table.add_column("Title", style="bold")
        task_table.add_column("Mode")
        task_table.add_column("Status")
        task_table.add_column("Focus", justify="right")
        task_table.add_column("Learn", justify="right")
        task_table.add_column("Progress")
        for t in self.tasks:
            util = r.per_task_progress.get(t.id, 0.0)
            bar_len = int(util * 20)
            bar = "█" * bar_len + "░" * (20 - bar_len)
            task_table.add_row(
                t.id[:8],
                t.title,
                "[green]LEARN[/green]" if t.active_mode == TaskMode.LEARN else "FOCUS",
                _status_markup(t.status),
                f"{format_duration(t.focus_elapsed)} / {format_duration(t.target_duration)}",
                f"{format_duration(t.learn_elapsed)} / {format_duration(t.learn_target_duration)}",
                f"{bar} {util:.0%}",
            )
        self.console.print(task_table)


def _status_markup(status: TaskStatus) -> str:
    color = {
        TaskStatus.PENDING: "white",
        TaskStatus.RUNNING: "yellow",
        TaskStatus.PAUSED: "blue",
        TaskStatus.COMPLETED: "green",
    }[status]
    return f"[{color}]{status.value}[/{color}]"
