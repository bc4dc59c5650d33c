"""Hours Calc CLI - Command-line interface for pay period hour tracking."""

import json

import click
from rich.console import Console

from hourscalc import __version__
from hourscalc.sdk import (
    ConfigNotFoundError,
    InvalidConfigurationError,
    JsonFileBreakdownCache,
    JsonTimeEntryStore,
    active_hours,
    localize,
    cached_breakdown,
    get_timezone,
    load_pay_period_settings,
    load_profile,
    now_in,
    pay_periods_between,
    resolve_pay_period,
    summarize_hours,
)

from .profile_commands import profile as profile_group
from .pto_commands import pto as pto_group
from .settings_commands import settings as settings_group
from .renderers.hours_renderer import render_cached_breakdown, render_hours_summary

DAY = click.DateTime(formats=["%Y-%m-%d"])
MOMENT = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"])


def load_schedule():
    """Load pay period settings and timezone from the active profile.

    Returns:
        (PayPeriodSettings, tzinfo) tuple

    Raises:
        click.ClickException: If the profile is invalid
    """
    try:
        profile_data = load_profile(require_exists=False)
        return load_pay_period_settings(profile_data), get_timezone(profile_data)
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))


def cli_moment(value, tz):
    """Attach tz to a naive CLI datetime (None passes through)."""
    if value is None:
        return None
    return localize(value, tz)


@click.group()
@click.version_option(version=__version__, prog_name="hours-calc")
def cli():
    """Hours Calc - pay period and overtime hour tracking.

    Computes pay period boundaries and regular/overtime hour splits
    from exported time entries.

    Configuration is loaded from (in order):

    \b
    1. HOURS_CALC_CONFIG_PATH environment variable
    2. settings.json 'profile' key (if set via CLI)
    3. ~/.config/hours-calc/profile.yaml (XDG default)

    Run 'hours-calc profile show' to see the active settings.
    """
    pass


cli.add_command(profile_group)
cli.add_command(settings_group)
cli.add_command(pto_group)


@cli.command("period")
@click.argument("day", required=False, type=DAY)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def period(day, as_json):
    """Show the pay period containing DAY (default: today)."""
    settings, tz = load_schedule()

    try:
        current = resolve_pay_period(settings, cli_moment(day, tz), tz)
    except InvalidConfigurationError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(current.to_dict(), indent=2))
        return

    click.echo(f"Pay period: {current.label}")
    click.echo(f"  Start: {current.start:%Y-%m-%d %H:%M:%S}")
    click.echo(f"  End:   {current.end:%Y-%m-%d %H:%M:%S}")
    click.echo(f"  Days:  {current.length_days}")


@cli.command("periods")
@click.argument("start", type=DAY)
@click.argument("end", type=DAY)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def periods(start, end, as_json):
    """List pay periods overlapping START to END.

    Examples:
        hours-calc periods 2024-01-01 2024-03-31
    """
    settings, tz = load_schedule()

    try:
        found = pay_periods_between(settings, start.date(), end.date(), tz)
    except (InvalidConfigurationError, ValueError) as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in found], indent=2))
        return

    for p in found:
        click.echo(f"{p.start_date}  {p.end_date}  {p.label}")


@cli.command("hours")
@click.argument("entries_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--as-of", type=MOMENT, help="Reference time (default: now)")
@click.option("--live-hours", type=click.FloatRange(min=0), help="Hours of an open clock-in")
@click.option("--active-since", type=MOMENT, help="Clock-in time of an open entry")
@click.option("--employee", default="default", show_default=True, help="Cache scope")
@click.option("--no-cache", is_flag=True, help="Do not read or update the breakdown cache")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def hours(entries_file, as_of, live_hours, active_since, employee, no_cache, as_json):
    """Show regular/overtime hours for the current pay period.

    ENTRIES_FILE is a JSON export of time entries. Without it, the last
    cached breakdown for the pay period is shown (closed entries only,
    plus --live-hours when given).

    Live hours come from --live-hours, else --active-since, else the
    most recent open clock-in in ENTRIES_FILE.
    """
    settings, tz = load_schedule()
    as_of = cli_moment(as_of, tz) or now_in(tz)
    cache = None if no_cache else JsonFileBreakdownCache()

    if not entries_file:
        if cache is None:
            raise click.UsageError("ENTRIES_FILE is required with --no-cache")
        try:
            breakdown = cached_breakdown(cache, settings, as_of, tz, scope=employee)
            current = resolve_pay_period(settings, as_of, tz)
        except InvalidConfigurationError as e:
            raise click.ClickException(str(e))
        if breakdown is None:
            raise click.ClickException(
                f"No cached hours for pay period {current.label}. Pass ENTRIES_FILE to compute."
            )
        if live_hours:
            breakdown = breakdown.with_live_hours(live_hours)
        if as_json:
            click.echo(json.dumps({"period": current.to_dict(), **breakdown.to_dict()}, indent=2))
        else:
            render_cached_breakdown(Console(), current, breakdown)
        return

    store = JsonTimeEntryStore(entries_file)

    if live_hours is None:
        clock_in = cli_moment(active_since, tz)
        if clock_in is None:
            try:
                open_entry = store.active_entry()
            except ValueError as e:
                raise click.ClickException(str(e))
            clock_in = open_entry.clock_in_time if open_entry else None
        live_hours = active_hours(clock_in, as_of) if clock_in else 0.0

    try:
        summary = summarize_hours(
            store,
            settings,
            as_of=as_of,
            tz=tz,
            live_hours=live_hours,
            cache=cache,
            scope=employee,
        )
    except (InvalidConfigurationError, ValueError) as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    render_hours_summary(Console(), summary)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
