"""
CLI interface for Floss Streak.

Composes the persistence, reminder and feedback collaborators into one
orchestrator per invocation and exposes the log operations as commands.
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from floss_streak.config.loader import AppConfig, load_app_config
from floss_streak.core.log_interaction import LogInteractionOrchestrator
from floss_streak.core.streak import StreakInfo, StreakState
from floss_streak.feedback.haptics import FeedbackManager
from floss_streak.logging_config import setup_logging
from floss_streak.notifications.scheduler import ReminderScheduler
from floss_streak.storage.persistence import PersistenceManager
from floss_streak.storage.repository import FlossRecordRepository, initialize_schema
from floss_streak.storage.settings import SettingsStore

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

DATE_FORMAT = "%Y-%m-%d"

_STATE_LABELS = {
    StreakState.EMPTY: "[dim]No flosses logged yet[/]",
    StreakState.STREAK: "[green]On a {days}-day streak[/]",
    StreakState.MISSING_TODAY: "[yellow]{days}-day streak, floss today to keep it[/]",
    StreakState.MISSING: "[red]Streak lost, last floss {days} day(s) ago[/]",
}


@dataclass
class Services:
    """Collaborators composed for one CLI invocation."""
    persistence: PersistenceManager
    reminders: ReminderScheduler
    orchestrator: LogInteractionOrchestrator


def build_services(config: AppConfig) -> Services:
    """Create the schema if needed and wire the orchestrator."""
    db_path = config.storage.db_path
    initialize_schema(db_path)
    
    persistence = PersistenceManager(
        records=FlossRecordRepository(db_path),
        settings=SettingsStore(db_path)
    )
    reminders = ReminderScheduler(db_path=db_path, config=config.reminders)
    orchestrator = LogInteractionOrchestrator(
        persistence=persistence,
        reminders=reminders,
        feedback=FeedbackManager(console=console, config=config.feedback)
    )
    return Services(persistence=persistence, reminders=reminders, orchestrator=orchestrator)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML configuration file"
    )
):
    """Floss Streak CLI."""
    try:
        app_config = load_app_config(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    
    setup_logging(app_config.logging)
    ctx.obj = app_config
    
    if ctx.invoked_subcommand is None:
        console.print("Floss Streak - Use --help to see available commands")


@app.command()
def init(ctx: typer.Context):
    """Initialize the Floss Streak database."""
    try:
        initialize_schema(ctx.obj.storage.db_path)
        console.print("[green]✓[/] Database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def log(
    ctx: typer.Context,
    date: Optional[datetime] = typer.Option(
        None,
        "--date",
        "-d",
        formats=[DATE_FORMAT],
        help="Day you flossed, for logging a past day (defaults to now)"
    )
):
    """Log a floss for now or a past day."""
    now = datetime.now()
    if date is not None and date.date() > now.date():
        console.print("[red]Error:[/] Cannot log a floss in the future")
        sys.exit(EXIT_CODE_FAIL)
    
    try:
        services = build_services(ctx.obj)
        log_date = now if date is None or date.date() == now.date() else date
        record = services.orchestrator.handle_log_record(log_date)
        console.print(f"Logged floss [bold]{record.id}[/] at {_format_timestamp(record.timestamp)}")
        _print_streak(services.orchestrator.current_streak())
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_PASS)


@app.command("list")
def list_records(ctx: typer.Context):
    """List logged flosses, newest first."""
    try:
        records = build_services(ctx.obj).persistence.get_floss_records()
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    
    if not records:
        console.print("[dim]No flosses logged yet.[/]")
        sys.exit(EXIT_CODE_PASS)
    
    table = Table(title="Floss Log")
    table.add_column("ID")
    table.add_column("Logged at")
    for record in records:
        table.add_row(record.id, _format_timestamp(record.timestamp))
    console.print(table)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def remove(ctx: typer.Context, record_id: str = typer.Argument(..., help="ID of the record to remove")):
    """Remove a single logged floss."""
    try:
        services = build_services(ctx.obj)
        record = next(
            (r for r in services.persistence.get_floss_records() if r.id == record_id),
            None
        )
        if record is None:
            console.print(f"[red]Error:[/] No floss record with id {record_id}")
            sys.exit(EXIT_CODE_FAIL)
        
        services.orchestrator.remove_log_record(record)
        console.print(f"Removed floss logged at {_format_timestamp(record.timestamp)}")
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_PASS)


@app.command("clear-day")
def clear_day(
    ctx: typer.Context,
    day: datetime = typer.Argument(..., formats=[DATE_FORMAT], help="Day to clear (YYYY-MM-DD)")
):
    """Remove every floss logged on a day."""
    try:
        removed = build_services(ctx.obj).orchestrator.remove_all_log_records(day.date())
        console.print(f"Removed {len(removed)} floss record(s) from {day.strftime(DATE_FORMAT)}")
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def status(ctx: typer.Context):
    """Show the current streak and pending reminders."""
    try:
        services = build_services(ctx.obj)
        streak = services.orchestrator.current_streak()
        last_floss_date = services.persistence.get_last_floss_date()
        reminders = services.reminders.pending_reminders()
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    
    console.print("\n[bold]Floss Streak Status[/bold]")
    console.print("-" * 40)
    _print_streak(streak)
    if last_floss_date is not None:
        console.print(f"Last floss: {_format_timestamp(last_floss_date)}")
    
    if reminders:
        table = Table(title="Pending Reminders")
        table.add_column("Reminder")
        table.add_column("Fires at")
        table.add_column("Streak days", justify="right")
        for reminder in reminders:
            table.add_row(
                reminder.identifier,
                _format_timestamp(reminder.fire_at),
                "" if reminder.streak_days is None else str(reminder.streak_days)
            )
        console.print(table)
    else:
        console.print("[dim]No pending reminders.[/]")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def erase(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt")
):
    """Erase every logged floss and pending reminder."""
    if not yes and not typer.confirm("Erase all floss records?"):
        console.print("Aborted")
        sys.exit(EXIT_CODE_PASS)
    
    try:
        services = build_services(ctx.obj)
        services.persistence.erase_data()
        services.reminders.cancel_all()
        console.print("[green]✓[/] All floss data erased")
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_PASS)


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def _print_streak(streak: StreakInfo) -> None:
    console.print(_STATE_LABELS[streak.state].format(days=streak.days))


if __name__ == "__main__":
    app()
