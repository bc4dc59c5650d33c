"""Hours Calc MCP Server - FastMCP implementation for pay period hour tools."""

import logging
from datetime import datetime
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from hourscalc.sdk import (
    ConfigNotFoundError,
    InvalidConfigurationError,
    JsonTimeEntryStore,
    compute_breakdown,
    get_timezone,
    load_pay_period_settings,
    load_profile,
    localize,
    now_in,
    overtime_threshold,
    resolve_pay_period,
    summarize_hours,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("hours-calc")


def _schedule():
    profile = load_profile(require_exists=False)
    return load_pay_period_settings(profile), get_timezone(profile)


def _as_of(value, tz):
    if not value:
        return now_in(tz)
    return localize(datetime.fromisoformat(value), tz)


# --- Tools ---

@mcp.tool()
async def current_pay_period(
    as_of: str | None = Field(default=None, description="Date or ISO datetime (default: now)"),
) -> dict[str, Any]:
    """Get the pay period containing a date, using the organization's pay period settings."""
    try:
        settings, tz = _schedule()
        period = resolve_pay_period(settings, _as_of(as_of, tz), tz)
        return {"period": period.to_dict()}
    except (ConfigNotFoundError, InvalidConfigurationError, ValueError) as e:
        logger.error(f"Error resolving pay period: {e}")
        return {"error": str(e), "period": None}


@mcp.tool()
async def hours_breakdown(
    entries_file: str | None = Field(default=None, description="Path to a JSON export of time entries"),
    entries: list[dict] | None = Field(
        default=None,
        description="Time entry records ({date, durationInHours}) when no file is given",
    ),
    as_of: str | None = Field(default=None, description="Date or ISO datetime (default: now)"),
    live_hours: float = Field(default=0.0, description="Hours of an open clock-in"),
) -> dict[str, Any]:
    """Split the current pay period's hours into regular, overtime, and current-week totals."""
    try:
        settings, tz = _schedule()
        now = _as_of(as_of, tz)

        if entries_file:
            summary = summarize_hours(
                JsonTimeEntryStore(entries_file), settings, as_of=now, tz=tz, live_hours=live_hours
            )
            return summary.to_dict()

        period = resolve_pay_period(settings, now, tz)
        breakdown = compute_breakdown(
            entries or [],
            period,
            as_of=now,
            threshold=overtime_threshold(settings),
            live_in_progress_hours=live_hours,
            tz=tz,
        )
        return {"period": period.to_dict(), **breakdown.to_dict()}

    except FileNotFoundError as e:
        return {"error": str(e)}
    except (ConfigNotFoundError, InvalidConfigurationError, ValueError) as e:
        logger.error(f"Error computing hours breakdown: {e}")
        return {"error": str(e)}


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
