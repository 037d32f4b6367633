"""Settings management commands."""

from typing import Optional

import typer
from rich.table import Table

from multitimer_cli.config import get_settings_manager
from multitimer_cli.services.storage import TimerStore
from multitimer_cli.ui.console import format_error, format_success, get_console

app = typer.Typer(help="Settings management commands")


def _parse_value(value: str) -> str | int | float | bool | None:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null"):
        return None
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


@app.command("show")
def show_config() -> None:
    """Show all settings."""
    settings = get_settings_manager().settings
    table = Table(show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, "-" if value is None else str(value))
    get_console().print(table)


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Setting name (e.g., tick_interval)"),
) -> None:
    """Get a single setting."""
    try:
        value = get_settings_manager().get(key)
    except KeyError:
        format_error(f"Unknown setting '{key}'")
        raise typer.Exit(1) from None
    get_console().print("-" if value is None else str(value))


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Setting name (e.g., notifications)"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a single setting."""
    parsed = _parse_value(value)
    try:
        get_settings_manager().set(key, parsed)
    except KeyError:
        format_error(f"Unknown setting '{key}'")
        raise typer.Exit(1) from None
    except (ValueError, RuntimeError) as e:
        format_error(f"Failed to set config: {e}")
        raise typer.Exit(1) from e
    format_success(f"Setting '{key}' set to '{parsed}'")


@app.command("reset")
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Setting to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset settings to defaults."""
    if not yes:
        what = f"'{key}'" if key else "all settings"
        if not typer.confirm(f"Are you sure you want to reset {what}?"):
            format_error("Cancelled")
            raise typer.Exit(0)
    try:
        get_settings_manager().reset(key)
    except KeyError:
        format_error(f"Unknown setting '{key}'")
        raise typer.Exit(1) from None
    except RuntimeError as e:
        format_error(str(e))
        raise typer.Exit(1) from e
    if key:
        format_success(f"Setting '{key}' reset to default")
    else:
        format_success("Settings reset to defaults")


@app.command("path")
def show_paths() -> None:
    """Show where settings and timers are stored."""
    manager = get_settings_manager()
    console = get_console()
    console.print(f"Settings: {manager.config_file}")
    console.print(f"Timers:   {TimerStore(manager.settings.timers_file).path}")
