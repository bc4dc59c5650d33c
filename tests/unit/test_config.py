"""Tests for profile and settings configuration."""

import json
from zoneinfo import ZoneInfo

import pytest
import yaml

from hourscalc.sdk.config import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    get_config_dir,
    get_data_path,
    get_profile_path,
    get_profile_value,
    get_timezone,
    load_pay_period_settings,
    load_profile,
    load_pto_settings,
    set_profile_value,
    validate_profile,
    validate_profile_key,
)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point config, cache, and data at a temporary directory."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("HOURS_CALC_CONFIG_PATH", str(config_dir))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))

    (config_dir / "settings.json").write_text(json.dumps({"data_dir": str(data_dir)}))

    return {"config_dir": config_dir, "data_dir": data_dir}


def write_profile(config_dir, profile):
    (config_dir / "profile.yaml").write_text(yaml.dump(profile))


class TestPaths:

    def test_config_dir_from_env(self, isolated_config):
        assert get_config_dir() == isolated_config["config_dir"]

    def test_config_dir_xdg_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("HOURS_CALC_CONFIG_PATH", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "hours-calc"

    def test_data_dir_setting_is_honored(self, isolated_config):
        assert get_data_path() == isolated_config["data_dir"]

    def test_missing_profile_required(self, isolated_config):
        with pytest.raises(ProfileNotFoundError):
            get_profile_path(require_exists=True)

    def test_missing_profile_optional_is_empty(self, isolated_config):
        assert load_profile(require_exists=False) == {}


class TestPayPeriodSettings:

    def test_absent_section_is_inactive(self):
        settings = load_pay_period_settings({})

        assert not settings.is_active
        assert settings.start_date == "2024-02-25"

    def test_valid_section(self):
        settings = load_pay_period_settings({
            "pay_period": {"type": "weekly", "start_date": "2024-01-07", "weekly_overtime_threshold": 36}
        })

        assert settings.type == "weekly"
        assert settings.weekly_overtime_threshold == 36
        assert settings.is_active

    def test_unknown_key_is_rejected(self):
        with pytest.raises(ConfigNotFoundError, match="pay_period"):
            load_pay_period_settings({"pay_period": {"type": "weekly", "lenght": 7}})

    def test_loads_from_profile_file(self, isolated_config):
        write_profile(isolated_config["config_dir"], {"pay_period": {"type": "monthly"}})
        assert load_pay_period_settings().type == "monthly"

    def test_pto_absent_is_disabled(self):
        assert not load_pto_settings({}).enabled

    def test_pto_invalid_period(self):
        with pytest.raises(ConfigNotFoundError):
            load_pto_settings({"pto": {"accrual_period": 0}})


class TestTimezone:

    def test_named_zone(self):
        assert get_timezone({"timezone": "America/Chicago"}) == ZoneInfo("America/Chicago")

    def test_unset_means_local_zone(self):
        assert get_timezone({}) is None

    def test_unknown_zone(self):
        with pytest.raises(ConfigNotFoundError, match="Unknown timezone"):
            get_timezone({"timezone": "Mars/Olympus_Mons"})


class TestProfileValues:

    def test_set_nested_value_creates_sections(self, isolated_config):
        set_profile_value("pay_period.type", "weekly")
        set_profile_value("pay_period.weekly_overtime_threshold", 38)

        assert get_profile_value("pay_period.type") == "weekly"
        assert load_profile()["pay_period"] == {"type": "weekly", "weekly_overtime_threshold": 38}

    def test_missing_value_returns_default(self, isolated_config):
        assert get_profile_value("pto.max_accrual", default=240) == 240

    @pytest.mark.parametrize("key", ["timezone", "pay_period.start_date", "pto.max_accrual"])
    def test_valid_keys(self, key):
        assert validate_profile_key(key) == (True, None)

    def test_unknown_key(self):
        is_valid, message = validate_profile_key("pay_period.lenght")

        assert not is_valid
        assert "pay_period.weekly_overtime_threshold" in message

    def test_section_key(self):
        is_valid, message = validate_profile_key("pto")

        assert not is_valid
        assert "section" in message


class TestValidateProfile:

    def test_empty_profile_warns(self, isolated_config):
        result = validate_profile({})

        assert result.is_valid
        assert len(result.warnings) == 2

    def test_invalid_sections_are_errors(self, isolated_config):
        result = validate_profile({
            "timezone": "Nowhere/Special",
            "pay_period": {"weekly_overtime_threshold": -5},
        })

        assert not result.is_valid
        assert len(result.errors) == 2
