"""Tests for tax rules and inflation table loading.

Uses isolated directories via tmp_path and TAX_CURVE_CONFIG_PATH
to avoid touching the user's settings.
"""

import json

import pytest
import yaml
from pydantic import ValidationError

from taxcurve.sdk import (
    get_adjuster,
    get_available_years,
    get_bundled_rules_dir,
    get_rules_dir,
    get_schedule,
    get_setting,
    load_inflation_table,
    load_settings,
    load_tax_rules,
    set_setting,
)


# === FIXTURES ===


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Set up isolated config directory with no settings."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("TAX_CURVE_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir}


@pytest.fixture
def custom_rules(tmp_path, isolated_env):
    """Rules directory with 2020 and 2022 only, registered in settings.json."""
    rules_dir = tmp_path / "rules"
    rules_dir.mkdir()

    base = {
        "e0": 9000, "e1": 14000, "e2": 55000, "e3": 270000,
        "s1": 900.0, "s2": 15000.0, "s3": 105000.0,
        "p1": 1e-5, "p2": 2e-6,
        "sg1": 0.14, "sg2": 0.2397, "sg3": 0.42, "sg4": 0.45,
    }
    (rules_dir / "2020.yaml").write_text(yaml.safe_dump(base))
    (rules_dir / "2022.yaml").write_text(yaml.safe_dump({**base, "e0": 10000}))
    (rules_dir / "inflation.yaml").write_text(yaml.safe_dump({
        "rates": {2021: 3.0, 2022: 7.0},
    }))

    settings = {"rules_dir": str(rules_dir)}
    (isolated_env["config_dir"] / "settings.json").write_text(json.dumps(settings))
    return rules_dir


# === TESTS ===


class TestSettings:
    def test_empty_without_file(self, isolated_env):
        assert load_settings() == {}
        assert get_setting("rules_dir") is None

    def test_set_and_get(self, isolated_env):
        path = set_setting("rules_dir", "/tmp/rules")
        assert path == isolated_env["config_dir"] / "settings.json"
        assert get_setting("rules_dir") == "/tmp/rules"

    def test_rules_dir_defaults_to_bundled(self, isolated_env):
        assert get_rules_dir() == get_bundled_rules_dir()

    def test_rules_dir_from_settings(self, custom_rules):
        assert get_rules_dir() == custom_rules


class TestBundledRules:
    def test_available_years(self, isolated_env):
        years = get_available_years()
        assert years[0] >= 2026
        assert 2024 in years
        assert years == sorted(years, reverse=True)

    def test_load_2024(self, isolated_env):
        params = load_tax_rules(2024)
        assert params.year == 2024
        assert params.e0 == 11604

    @pytest.mark.parametrize("year", [2021, 2022, 2023, 2024, 2025, 2026])
    def test_bundled_years_are_consistent(self, isolated_env, year):
        result = get_schedule(year, fallback=False).validate()
        assert result.is_valid, result.errors

    def test_bundled_inflation_table(self, isolated_env):
        adjuster = get_adjuster()
        assert adjuster.min_year == 1998
        assert adjuster.max_year >= 2024
        assert adjuster.conversions[2002] == pytest.approx(1 / 1.95583)
        assert adjuster.adjust(100, 2003, 2005) == pytest.approx(103.2256)


class TestCustomRules:
    def test_years_from_custom_dir(self, custom_rules):
        assert get_available_years() == [2022, 2020]

    def test_fallback_to_prior_year(self, custom_rules):
        schedule = get_schedule(2021)
        assert schedule.year == 2020

    def test_fallback_logs_substitution(self, custom_rules, caplog):
        with caplog.at_level("INFO", logger="taxcurve.sdk.taxes.rules"):
            get_schedule(2023)
        assert "using 2022" in caplog.text

    def test_exact_year_preferred(self, custom_rules):
        assert get_schedule(2022).thresholds()[0] == 10000

    def test_strict_missing_year(self, custom_rules):
        with pytest.raises(FileNotFoundError, match="2021"):
            get_schedule(2021, fallback=False)

    def test_no_prior_year(self, custom_rules):
        with pytest.raises(FileNotFoundError, match="or any prior year"):
            get_schedule(2019)

    def test_malformed_rules_rejected(self, custom_rules):
        (custom_rules / "2023.yaml").write_text(yaml.safe_dump({"e0": 1}))
        with pytest.raises(ValidationError):
            load_tax_rules(2023)

    def test_explicit_rules_dir_argument(self, custom_rules, tmp_path):
        other = tmp_path / "other"
        other.mkdir()
        assert get_available_years(rules_dir=other) == []

    def test_custom_inflation_table(self, custom_rules):
        table = load_inflation_table()
        assert table.rates == {2021: 3.0, 2022: 7.0}
        assert table.conversions == {}

    def test_missing_inflation_table(self, tmp_path, isolated_env):
        with pytest.raises(FileNotFoundError):
            load_inflation_table(tmp_path / "nope.yaml")
