"""Configuration management for Hours Calc.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - profile: path to profile.yaml (optional, if not colocated)
   - data_dir: custom data directory (PTO balances, exported entries)

2. profile.yaml - Organization configuration
   - timezone: IANA zone used for all day boundaries
   - pay_period: type, start_date, is_active, weekly_overtime_threshold
   - pto: accrual settings

Config directory resolution:
1. HOURS_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/hours-calc/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory

Cache and data paths follow XDG base directories:
- Cache: XDG_CACHE_HOME/hours-calc/ or ~/.cache/hours-calc/
- Data: settings "data_dir", else XDG_DATA_HOME/hours-calc/
"""

import json
import os
from datetime import tzinfo
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import ValidationError

from .schemas import PayPeriodSettings, PtoSettings


APP_NAME = "hours-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"


class ConfigNotFoundError(Exception):
    """Raised when no configuration is found."""
    pass


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. HOURS_CALC_CONFIG_PATH environment variable
    2. ~/.config/hours-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("HOURS_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Path to profile.yaml

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    config_dir = get_config_dir()

    custom_profile = load_settings().get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: hours-calc profile use /path/to/profile.yaml"
            )
        return profile_path

    profile_path = config_dir / PROFILE_FILENAME
    if profile_path.exists():
        return profile_path

    if require_exists:
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Create one with: hours-calc profile set pay_period.start_date 2024-02-25"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load organization profile from profile.yaml.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Profile dictionary (empty dict if not required and not found)
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save organization profile to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value by dot-notation key (e.g. "pay_period.type")."""
    profile = load_profile(require_exists=False)

    value = profile
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key.

    Returns:
        Path to the saved profile file
    """
    profile = load_profile(require_exists=False)

    parts = key.split(".")
    current = profile

    for part in parts[:-1]:
        if part not in current or not isinstance(current[part], dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


# =============================================================================
# Organization settings
# =============================================================================

def load_pay_period_settings(profile: Optional[dict] = None) -> PayPeriodSettings:
    """Load pay period settings from the profile.

    A missing 'pay_period' section yields inactive settings, which resolve
    to the default bi-weekly schedule.

    Raises:
        ConfigNotFoundError: If the section is present but invalid
    """
    if profile is None:
        profile = load_profile(require_exists=False)

    section = profile.get("pay_period")
    if not section:
        return PayPeriodSettings(is_active=False)

    try:
        return PayPeriodSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigNotFoundError(f"Invalid pay_period settings in profile:\n{e}")


def load_pto_settings(profile: Optional[dict] = None) -> PtoSettings:
    """Load PTO accrual settings from the profile (disabled if absent)."""
    if profile is None:
        profile = load_profile(require_exists=False)

    section = profile.get("pto")
    if not section:
        return PtoSettings(enabled=False)

    try:
        return PtoSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigNotFoundError(f"Invalid pto settings in profile:\n{e}")


def get_timezone(profile: Optional[dict] = None) -> Optional[tzinfo]:
    """Resolve the timezone used for day boundaries.

    Uses the profile 'timezone' key when set. Returns None otherwise, which
    the SDK treats as the machine's local zone (DST-aware per value).
    """
    if profile is None:
        profile = load_profile(require_exists=False)

    name = profile.get("timezone")
    if not name:
        return None

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigNotFoundError(f"Unknown timezone in profile: {name!r}")


# =============================================================================
# XDG path helpers
# =============================================================================

def get_cache_path() -> Path:
    """Get the cache directory path (XDG_CACHE_HOME/hours-calc/), created if needed."""
    xdg_cache_home = os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache")
    cache_path = Path(xdg_cache_home) / APP_NAME
    cache_path.mkdir(parents=True, exist_ok=True)
    return cache_path


def get_data_path() -> Path:
    """Get the data directory path, created if needed.

    Resolution order:
    1. settings.json "data_dir"
    2. XDG_DATA_HOME/hours-calc/
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom)
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


# =============================================================================
# Profile validation
# =============================================================================

PROFILE_SCHEMA = {
    "timezone": None,
    "pay_period": {
        "type": None,
        "start_date": None,
        "is_active": None,
        "weekly_overtime_threshold": None,
        "first_date": None,
        "second_date": None,
        "day_of_month": None,
    },
    "pto": {
        "enabled": None,
        "accrual_rate": None,
        "accrual_period": None,
        "max_accrual": None,
    },
}


def validate_profile_key(key: str) -> tuple:
    """Check that a dot-notation key exists in the profile schema.

    Returns:
        (is_valid, error_message) tuple
    """
    node: Any = PROFILE_SCHEMA
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            valid = ", ".join(_schema_keys(PROFILE_SCHEMA))
            return False, f"Unknown profile key '{key}'. Valid keys: {valid}"
        node = node[part]

    if isinstance(node, dict):
        return False, f"Key '{key}' is a section; set one of its fields instead"

    return True, None


def _schema_keys(node: dict, prefix: str = "") -> list:
    keys = []
    for name, child in node.items():
        path = f"{prefix}{name}"
        if isinstance(child, dict):
            keys.extend(_schema_keys(child, prefix=f"{path}."))
        else:
            keys.append(path)
    return keys


class ProfileValidationResult:
    """Result of profile validation."""

    def __init__(self, location_path: Path, profile: dict, errors: list = None, warnings: list = None):
        self.location_path = location_path
        self.profile = profile
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_profile(profile: Optional[dict] = None) -> ProfileValidationResult:
    """Validate profile sections against their schemas.

    Args:
        profile: Profile dict to validate (loads active profile if None)

    Returns:
        ProfileValidationResult with errors (invalid values) and
        warnings (missing but defaulted sections)
    """
    location_path = get_profile_path(require_exists=False)
    if profile is None:
        profile = load_profile(require_exists=False)

    errors = []
    warnings = []

    try:
        settings = load_pay_period_settings(profile)
        if not settings.is_active:
            warnings.append("pay_period not active; using default bi-weekly schedule from 2024-02-25")
    except ConfigNotFoundError as e:
        errors.append(str(e))

    try:
        load_pto_settings(profile)
    except ConfigNotFoundError as e:
        errors.append(str(e))

    try:
        get_timezone(profile)
    except ConfigNotFoundError as e:
        errors.append(str(e))

    if not profile.get("timezone"):
        warnings.append("timezone not set; using machine local time")

    return ProfileValidationResult(
        location_path=location_path,
        profile=profile,
        errors=errors,
        warnings=warnings,
    )
