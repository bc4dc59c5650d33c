"""PTO command group - hour banking accrual per closed pay period."""

import json

import click

from hourscalc.sdk import (
    ConfigNotFoundError,
    InvalidConfigurationError,
    JsonTimeEntryStore,
    PtoBalanceStore,
    accrue_pto,
    compute_breakdown,
    format_hours,
    load_pay_period_settings,
    load_profile,
    load_pto_settings,
    get_timezone,
    now_in,
    pay_period_ends_on,
    previous_pay_period,
    resolve_pay_period,
)


@click.group()
def pto():
    """Accrue and inspect PTO balances (pto_balances.json in the data dir).

    Worked hours bank toward PTO: every full accrual_period of hours
    earns accrual_rate PTO hours, capped at max_accrual.
    """
    pass


@pto.command("accrue")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--employee", default="default", show_default=True, help="Balance to credit")
@click.option("--period-of", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Credit the pay period containing this day")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def pto_accrue(entries_file, employee, period_of, as_json):
    """Credit a closed pay period's hours to a PTO balance.

    By default credits the pay period ending today, or the one before
    it if today is mid-period. A period is never credited twice.

    Examples:
        hours-calc pto accrue entries.json --employee user_42
        hours-calc pto accrue entries.json --period-of 2024-03-09
    """
    try:
        profile_data = load_profile(require_exists=False)
        settings = load_pay_period_settings(profile_data)
        pto_settings = load_pto_settings(profile_data)
        tz = get_timezone(profile_data)
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))

    if not pto_settings.enabled:
        raise click.ClickException(
            "PTO accrual is not enabled. Enable with: hours-calc profile set pto.enabled true"
        )

    try:
        if period_of:
            period = resolve_pay_period(settings, period_of.date(), tz)
        else:
            today = now_in(tz).date()
            period = resolve_pay_period(settings, today, tz)
            if not pay_period_ends_on(period, today):
                period = previous_pay_period(settings, period)
    except InvalidConfigurationError as e:
        raise click.ClickException(str(e))

    store = JsonTimeEntryStore(entries_file)
    try:
        entries = store.get_time_entries(period.start_date, period.end_date)
    except ValueError as e:
        raise click.ClickException(str(e))
    worked = compute_breakdown(entries, period, as_of=period.end, threshold=0).total_hours

    balances = PtoBalanceStore()
    balance = balances.load(employee)
    new_balance, accrual = accrue_pto(balance, worked, period, pto_settings)

    if accrual.applied:
        balances.save(employee, new_balance)

    if as_json:
        click.echo(json.dumps(accrual.model_dump(), indent=2))
        return

    click.echo(f"Pay period: {period.label}")
    click.echo(f"Hours worked: {format_hours(accrual.hours_worked)}")
    if not accrual.applied:
        click.echo(f"Not credited: {accrual.skipped_reason}")
        return
    click.echo(f"PTO earned: {accrual.pto_earned:g}h")
    click.echo(f"Balance: {accrual.previous_balance:g}h -> {accrual.new_balance:g}h")
    click.echo(f"Banked toward next accrual: {format_hours(accrual.banking_balance)}")


@pto.command("show")
@click.option("--employee", default="default", show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def pto_show(employee, as_json):
    """Show an employee's PTO balance and credited periods."""
    balance = PtoBalanceStore().load(employee)

    if as_json:
        click.echo(json.dumps(balance.model_dump(), indent=2))
        return

    click.echo(f"Employee: {employee}")
    click.echo(f"PTO balance: {balance.total_balance:g}h")
    click.echo(f"Banked hours: {format_hours(balance.banking_balance)}")

    if not balance.processed_periods:
        click.echo("No pay periods credited yet.")
        return

    click.echo()
    click.echo("Credited periods:")
    for p in balance.processed_periods:
        click.echo(f"  {p.start_date} to {p.end_date}: {format_hours(p.hours_worked)} worked, +{p.pto_earned:g}h")
