"""Command-line front end for the FocusFlow timer.

Usage:
    python scripts/focusflow_cli.py add "Deep Work: Product Design" --minutes 25 --learn-minutes 60
    python scripts/focusflow_cli.py watch <task-id> --ticks 300
    python scripts/focusflow_cli.py list

Task ids may be abbreviated to any unique prefix.
"""

import argparse
import logging
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rich.console import Console

from focusflow.core.config import settings
from focusflow.errors import InvalidTaskError
from focusflow.metrics.collector import MetricsCollector, format_duration
from focusflow.storage.store import JsonFileStore, PersistenceAdapter
from focusflow.suggest.service import TextSuggester
from focusflow.timer.driver import TickDriver
from focusflow.timer.engine import TimerEngine

console = Console()
logger = logging.getLogger("focusflow.cli")


def resolve_id(engine: TimerEngine, prefix: str) -> str:
    """Expand a unique id prefix to the full task id."""
    matches = [tid for tid in engine.tasks if tid.startswith(prefix)]
    if len(matches) != 1:
        raise SystemExit(f"No unique task matches {prefix!r} ({len(matches)} found)")
    return matches[0]


def print_board(engine: TimerEngine) -> None:
    metrics = MetricsCollector(console=console)
    metrics.calculate(engine.list_tasks())
    metrics.print_report()


def cmd_add(engine: TimerEngine, args) -> None:
    description = args.description
    minutes = args.hours * 60 + args.minutes

    if args.suggest:
        suggestion = TextSuggester().optimize(args.title, description, minutes)
        description, minutes = suggestion.description, suggestion.minutes
        console.print(f"[dim]Suggested: {format_duration(minutes * 60)} — {description}[/dim]")

    try:
        task = engine.create_task(
            title=args.title,
            description=description,
            focus_seconds=minutes * 60,
            learn_seconds=args.learn_hours * 3600 + args.learn_minutes * 60,
        )
    except InvalidTaskError as e:
        raise SystemExit(f"Cannot create task: {e}")
    console.print(f"Created [bold]{task.title}[/bold] ({task.id[:8]})")


def cmd_suggest(engine: TimerEngine, args) -> None:
    suggestion = TextSuggester().optimize(args.title, args.description, 0)
    hours, minutes = suggestion.hours_minutes
    console.print(f"[bold]Description:[/bold] {suggestion.description}")
    console.print(f"[bold]Duration:[/bold] {hours}h {minutes}m")


def cmd_watch(engine: TimerEngine, args) -> None:
    def on_tick(changed: list[str]) -> None:
        task = engine.running_task
        if task is not None:
            console.print(
                f"[yellow]{task.title}[/yellow] {task.active_mode.value}: "
                f"{format_duration(task.active_elapsed)} / {format_duration(task.active_target)}"
            )
        for task_id in changed:
            done = engine.get(task_id)
            if done is not None and done.is_completed:
                console.print(f"[bold green]✓ {done.title} reached its target[/bold green]")

    task_id = resolve_id(engine, args.task_id)
    if not engine.start(task_id):
        console.print("[dim]Task is completed; reset it or switch its mode first.[/dim]")
        return

    driver = TickDriver(engine, interval=args.interval, on_tick=on_tick)
    try:
        driver.run(max_ticks=args.ticks)
    except KeyboardInterrupt:
        driver.stop()
    finally:
        # credit the last partial interval, then freeze
        engine.tick()
        engine.pause(task_id)
    console.print("\n[dim]Paused.[/dim]")


def main():
    parser = argparse.ArgumentParser(
        description="FocusFlow — dual-budget focus/learning task timer"
    )
    parser.add_argument("--data-dir", type=str, default=settings.STORAGE_DIR,
                        help=f"Snapshot directory (default: {settings.STORAGE_DIR})")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show all tasks")

    add = sub.add_parser("add", help="Create a goal card")
    add.add_argument("title")
    add.add_argument("--description", "-d", default="")
    add.add_argument("--hours", type=int, default=0, help="Focus hours (default: 0)")
    add.add_argument("--minutes", type=int, default=25, help="Focus minutes (default: 25)")
    add.add_argument("--learn-hours", type=int, default=0, help="Learning hours (default: 0)")
    add.add_argument("--learn-minutes", type=int, default=60, help="Learning minutes (default: 60)")
    add.add_argument("--suggest", action="store_true", help="Let the language model refine description and focus time")

    for name, help_text in (
        ("mode", "Switch a task between FOCUS and LEARN (pauses it)"),
        ("complete", "Mark the active budget complete"),
        ("reset", "Zero both budgets"),
        ("delete", "Remove a task"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("task_id")

    suggest = sub.add_parser("suggest", help="Ask for a description and duration")
    suggest.add_argument("title")
    suggest.add_argument("--description", "-d", default="")

    watch = sub.add_parser("watch", help="Start a task and run the tick loop until Ctrl-C")
    watch.add_argument("task_id")
    watch.add_argument("--ticks", type=int, default=None, help="Stop after N ticks (default: until Ctrl-C)")
    watch.add_argument("--interval", type=float, default=settings.TICK_INTERVAL,
                       help=f"Seconds between ticks (default: {settings.TICK_INTERVAL})")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    adapter = PersistenceAdapter(JsonFileStore(args.data_dir))
    engine = TimerEngine.from_adapter(adapter)

    match args.command:
        case "list":
            print_board(engine)
        case "add":
            cmd_add(engine, args)
        case "suggest":
            cmd_suggest(engine, args)
        case "watch":
            cmd_watch(engine, args)
        case "mode":
            engine.toggle_mode(resolve_id(engine, args.task_id))
            print_board(engine)
        case "complete":
            engine.mark_complete(resolve_id(engine, args.task_id))
            print_board(engine)
        case "reset":
            engine.reset_task(resolve_id(engine, args.task_id))
            print_board(engine)
        case "delete":
            engine.delete_task(resolve_id(engine, args.task_id))
            print_board(engine)


if __name__ == "__main__":
    main()
