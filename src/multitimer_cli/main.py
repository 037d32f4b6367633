"""Main entry point for Multitimer CLI."""

from pathlib import Path

import typer
from rich.table import Table

from multitimer_cli import __version__
from multitimer_cli.commands import config
from multitimer_cli.commands.decorators import command_wrapper
from multitimer_cli.commands.session import run_session
from multitimer_cli.config import get_settings_manager
from multitimer_cli.services.storage import TimerStore
from multitimer_cli.ui.console import get_console
from multitimer_cli.utils.duration import format_clock

app = typer.Typer(
    name="multitimer",
    help="Run several Pomodoro-style work/break timers side by side",
)

app.add_typer(config.app, name="config", help="Settings management")


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """Without a sub-command, start an interactive session."""
    if ctx.invoked_subcommand is None:
        run_session(get_settings_manager().settings, get_console())


@app.command("run")
def run(
    store: Path | None = typer.Option(
        None, "--store", "-s", help="Timer file to load and save"
    ),
    no_notify: bool = typer.Option(
        False, "--no-notify", help="Disable desktop notifications"
    ),
    bell: bool | None = typer.Option(
        None, "--bell/--no-bell", help="Ring the terminal bell on transitions"
    ),
) -> None:
    """Start an interactive session with the saved timers."""
    run_session(
        get_settings_manager().settings,
        get_console(),
        store_path=store,
        notifications=False if no_notify else None,
        bell=bell,
    )


@app.command("list")
@command_wrapper
def list_timers(
    store: Path | None = typer.Option(
        None, "--store", "-s", help="Timer file to read"
    ),
) -> None:
    """List saved timer programs."""
    path = store or get_settings_manager().settings.timers_file
    configs = TimerStore(path).load()
    console = get_console()
    if not configs:
        console.print("[yellow]No saved timers[/yellow]")
        return

    table = Table(title=f"Saved Timers ({len(configs)})", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Notification")
    table.add_column("Phases (work/break)")
    table.add_column("Cycles", justify="right")
    for number, cfg in enumerate(configs, 1):
        phases = ", ".join(
            f"{format_clock(p.work_duration)}/{format_clock(p.break_duration)}"
            for p in cfg.phases
        )
        cycles = "∞" if cfg.max_cycles is None else str(cfg.max_cycles)
        table.add_row(str(number), cfg.name, cfg.notification_text, phases, cycles)
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    get_console().print(
        f"[bold]Multitimer CLI[/bold] version [cyan]{__version__}[/cyan]"
    )


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
