"""
Tests for the session metrics collector.

These tests verify:
    1. Duration formatting
    2. Counts, completion ratio and time totals
    3. The rich report renders without a calculated report and with tasks
"""

import pytest
from rich.console import Console

from focusflow.metrics.collector import MetricsCollector, format_duration
from focusflow.models.task import Task, TaskMode, TaskStatus


def make_task(id: str, **overrides) -> Task:
    fields = dict(
        id=id, title=f"Task {id}", target_duration=1500,
        learn_target_duration=3600, created_at=0.0,
    )
    fields.update(overrides)
    return Task(**fields)


class TestFormatDuration:

    @pytest.mark.parametrize("seconds,expected", [
        (0, "00s"),
        (7, "07s"),
        (65, "1m 05s"),
        (3600, "1h 0m 00s"),
        (3725.9, "1h 2m 05s"),
    ])
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestMetricsCollector:

    def setup_method(self):
        self.console = Console(record=True, width=140)
        self.collector = MetricsCollector(console=self.console)

    def test_empty_board(self):
        report = self.collector.calculate([])
        assert report.total_tasks == 0
        assert report.completion_ratio == 0.0
        assert report.running_title is None

    def test_counts_and_totals(self):
        tasks = [
            make_task("a", status=TaskStatus.COMPLETED, focus_elapsed=1500.0),
            make_task("b", status=TaskStatus.RUNNING, last_proceeded_at=1.0, focus_elapsed=300.0),
            make_task("c", status=TaskStatus.PAUSED, active_mode=TaskMode.LEARN, learn_elapsed=900.0),
            make_task("d"),
        ]
        report = self.collector.calculate(tasks)
        assert report.total_tasks == 4
        assert report.tasks_completed == 1
        assert report.tasks_running == 1
        assert report.tasks_paused == 1
        assert report.tasks_pending == 1
        assert report.completion_ratio == pytest.approx(0.25)
        assert report.focus_seconds == pytest.approx(1800.0)
        assert report.learn_seconds == pytest.approx(900.0)
        assert report.running_title == "Task b"
        assert report.per_task_progress["c"] == pytest.approx(0.25)

    def test_print_without_report(self):
        self.collector.print_report()
        assert "No metrics calculated" in self.console.export_text()

    def test_print_report(self):
        self.collector.calculate([make_task("a", focus_elapsed=750.0)])
        self.collector.print_report()
        text = self.console.export_text()
        assert "Session Progress" in text
        assert "Task a" in text
        assert "50%" in text
