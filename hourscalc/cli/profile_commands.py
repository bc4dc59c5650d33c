"""Profile CLI commands for Hours Calc.

Manages organization settings (profile.yaml) - timezone, pay period, PTO.
"""

from pathlib import Path

import click
import yaml

from hourscalc.sdk import (
    get_profile_path,
    get_profile_value,
    load_settings,
    set_profile_value,
    set_setting,
    validate_profile,
    validate_profile_key,
)


def _display_validation(validation, show_contents=True):
    """Display validation results consistently across commands.

    Returns:
        True if valid (no errors), False if has errors
    """
    if validation.errors:
        click.echo()
        click.echo("Validation Errors (profile is invalid):")
        for error in validation.errors:
            click.echo(f"  ! {error}")
        click.echo()
        click.echo(f"Profile path: {validation.location_path}")

    if validation.warnings:
        click.echo()
        click.echo("Warnings:")
        for warning in validation.warnings:
            click.echo(f"  - {warning}")

    if show_contents and validation.profile:
        click.echo()
        click.echo("---")
        click.echo(yaml.dump(validation.profile, default_flow_style=False, sort_keys=False))

    return validation.is_valid


def _parse_value(value: str):
    """Parse a CLI string into bool, int, float or str."""
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


@click.group()
def profile():
    """Manage organization settings (profile.yaml).

    Profile contains:
    - timezone: IANA zone for day boundaries
    - pay_period: type, start_date, is_active, weekly_overtime_threshold
    - pto: enabled, accrual_rate, accrual_period, max_accrual
    """
    pass


@profile.command("show")
def profile_show():
    """Show the active profile, its location, and validation status."""
    profile_path = get_profile_path(require_exists=False)
    location = "custom" if load_settings().get("profile") else "central (default)"

    click.echo(f"Profile: {profile_path}")
    click.echo(f"Location: {location}")

    if not profile_path.exists():
        click.echo()
        click.echo("Profile does not exist yet; defaults apply. Create with:")
        click.echo("  hours-calc profile set pay_period.start_date 2024-02-25")

    _display_validation(validate_profile(), show_contents=True)


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get a profile value.

    KEY is a dot-notation path like 'pay_period.type'
    """
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"Key '{key}' not found in profile")

    if isinstance(value, (dict, list)):
        raise click.ClickException(
            f"Key '{key}' is a complex value. Use 'hours-calc profile show' to view."
        )

    click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile value.

    KEY is a dot-notation path like 'pay_period.type'
    VALUE is the value to set (string, number, or true/false)

    Examples:
        hours-calc profile set pay_period.type weekly
        hours-calc profile set pay_period.weekly_overtime_threshold 40
        hours-calc profile set timezone America/Chicago
    """
    is_valid, error_msg = validate_profile_key(key)
    if not is_valid:
        raise click.ClickException(error_msg)

    # Dates and zone names stay strings
    if key in ("pay_period.start_date", "timezone", "pay_period.type"):
        parsed_value = value
    else:
        parsed_value = _parse_value(value)

    profile_file = set_profile_value(key, parsed_value)
    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to: {profile_file}")

    _display_validation(validate_profile(), show_contents=False)


@profile.command("use")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def profile_use(path):
    """Use a profile.yaml stored elsewhere (e.g. a shared config repo)."""
    profile_path = Path(path).expanduser().resolve()

    if profile_path.suffix not in (".yaml", ".yml"):
        raise click.ClickException(f"Profile must be a YAML file: {profile_path}")

    try:
        with open(profile_path, "r") as f:
            profile_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {profile_path}: {e}")

    if not isinstance(profile_data, dict):
        raise click.ClickException(
            f"Profile must be a YAML dictionary, got {type(profile_data).__name__}"
        )

    validation = validate_profile(profile=profile_data)
    validation.location_path = profile_path
    if not _display_validation(validation, show_contents=False):
        raise click.ClickException("Profile has validation errors. Fix them before continuing.")

    settings_file = set_setting("profile", str(profile_path))
    click.echo(f"Using profile: {profile_path}")
    click.echo(f"Saved to: {settings_file}")
