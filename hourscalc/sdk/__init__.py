"""Hours Calc SDK - Core functionality for pay period hour tracking."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    ConfigNotFoundError,
    ProfileNotFoundError,
    load_pay_period_settings,
    load_pto_settings,
    get_timezone,
    validate_profile,
    validate_profile_key,
    ProfileValidationResult,
    get_cache_path,
    get_data_path,
)

from .schemas import (
    PayPeriodSettings,
    PtoSettings,
    PtoBalance,
    PtoAccrual,
)

from .pay_period import (
    PayPeriod,
    PayPeriodConfig,
    DEFAULT_CONFIG,
    InvalidConfigurationError,
    current_pay_period,
    monthly_pay_period,
    semi_monthly_pay_period,
    resolve_pay_period,
    pay_periods_between,
    next_pay_period,
    previous_pay_period,
    overtime_threshold,
    now_in,
    localize,
)

from .time_entries import (
    TimeEntry,
    TimeEntrySource,
    JsonTimeEntryStore,
    MalformedEntryError,
    time_entry_from_record,
    parse_entry_date,
    check_duration,
    active_hours,
)

from .overtime import (
    OvertimeBreakdown,
    compute_breakdown,
)

from .cache import (
    BreakdownCache,
    InMemoryBreakdownCache,
    JsonFileBreakdownCache,
    cache_key,
)

from .hours import (
    HoursSummary,
    summarize_hours,
    cached_breakdown,
    format_hours,
)

from .pto import (
    PtoBalanceStore,
    accrue_pto,
    pay_period_ends_on,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "ConfigNotFoundError",
    "ProfileNotFoundError",
    "load_pay_period_settings",
    "load_pto_settings",
    "get_timezone",
    "validate_profile",
    "validate_profile_key",
    "ProfileValidationResult",
    "get_cache_path",
    "get_data_path",
    # Schemas
    "PayPeriodSettings",
    "PtoSettings",
    "PtoBalance",
    "PtoAccrual",
    # Pay periods
    "PayPeriod",
    "PayPeriodConfig",
    "DEFAULT_CONFIG",
    "InvalidConfigurationError",
    "current_pay_period",
    "monthly_pay_period",
    "semi_monthly_pay_period",
    "resolve_pay_period",
    "pay_periods_between",
    "next_pay_period",
    "previous_pay_period",
    "overtime_threshold",
    "now_in",
    "localize",
    # Time entries
    "TimeEntry",
    "TimeEntrySource",
    "JsonTimeEntryStore",
    "MalformedEntryError",
    "time_entry_from_record",
    "parse_entry_date",
    "check_duration",
    "active_hours",
    # Overtime
    "OvertimeBreakdown",
    "compute_breakdown",
    # Cache
    "BreakdownCache",
    "InMemoryBreakdownCache",
    "JsonFileBreakdownCache",
    "cache_key",
    # Hours summary
    "HoursSummary",
    "summarize_hours",
    "cached_breakdown",
    "format_hours",
    # PTO
    "PtoBalanceStore",
    "accrue_pto",
    "pay_period_ends_on",
]
