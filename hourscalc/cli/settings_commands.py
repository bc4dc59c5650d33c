"""Settings CLI commands for Hours Calc.

Manages settings.json - data directory and profile location.
"""

from pathlib import Path

import click

from hourscalc.sdk import (
    get_cache_path,
    get_data_path,
    get_setting,
    get_settings_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage machine settings (settings.json).

    Available settings:
    - data_dir: where PTO balances are stored
    - profile: path to profile.yaml (set via 'profile use')
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and effective paths."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if current:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")
    else:
        click.echo("No settings configured (using defaults).")

    click.echo()
    click.echo("Effective paths:")
    suffix = "" if "data_dir" in current else " (default)"
    click.echo(f"  data_dir: {get_data_path()}{suffix}")
    click.echo(f"  cache: {get_cache_path()}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom data_dir, revert to default")
def settings_data_dir(path, clear):
    """Set or clear the custom data directory.

    Examples:
        hours-calc settings data-dir ~/hours-data
        hours-calc settings data-dir --clear
    """
    if clear:
        current = load_settings()
        if "data_dir" not in current:
            click.echo("data_dir was not set.")
            return
        del current["data_dir"]
        save_settings(current)
        click.echo("Cleared data_dir setting.")
        click.echo(f"Data directory is now: {get_data_path()} (default)")
        return

    if not path:
        current_data_dir = get_setting("data_dir")
        if current_data_dir:
            click.echo(f"Current data_dir: {current_data_dir}")
        else:
            click.echo(f"No custom data_dir set. Using default: {get_data_path()}")
        return

    data_path = Path(path).expanduser().resolve()

    if data_path.exists() and not data_path.is_dir():
        raise click.ClickException(f"Path exists but is not a directory: {data_path}")

    try:
        data_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise click.ClickException(f"Cannot create directory: {data_path}\n{e}")

    set_setting("data_dir", str(data_path))
    click.echo(f"Set data_dir: {data_path}")
    click.echo(f"Saved to: {get_settings_path()}")
