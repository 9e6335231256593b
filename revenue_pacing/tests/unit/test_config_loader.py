"""
Tests for config/loader.py and the scenario schema.
"""

import pytest
import yaml
from datetime import date

from revenue_pacing.config import (
    ConfigLoader,
    DailyActual,
    DailyCounters,
    EngineSettings,
    ForecastScenario,
    RevenueSource,
)


class TestScenarioYaml:
    """Tests for scenario YAML round trips."""

    def test_roundtrip(self, tmp_path, monthly_scenario):
        path = tmp_path / "scenarios" / "q1.yaml"

        ConfigLoader.to_yaml(monthly_scenario, path)
        loaded = ConfigLoader.from_yaml(path)

        assert loaded == monthly_scenario

    def test_camel_case_keys(self, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text(
            "id: camel\n"
            "startDate: 2025-01-01\n"
            "endDate: 2025-01-31\n"
            "revenueTarget: 3100\n"
            "revenueSource: etsy\n"
            "autoCatchUpEnabled: true\n",
            encoding="utf-8",
        )

        scenario = ConfigLoader.from_yaml(path)

        assert scenario.start_date == date(2025, 1, 1)
        assert scenario.revenue_target == 3100.0
        assert scenario.revenue_source == RevenueSource.ETSY
        assert scenario.auto_catch_up_enabled is True
        assert scenario.roas == 2.5
        assert scenario.total_days == 31

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("id: bad\nstart_date: not-a-date\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid configuration"):
            ConfigLoader.from_yaml(path)

    def test_non_mapping_content(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="expected a mapping"):
            ConfigLoader.from_yaml(path)

    def test_template_is_a_valid_scenario(self, tmp_path):
        path = tmp_path / "template.yaml"
        path.write_text(yaml.dump(ConfigLoader.get_template()), encoding="utf-8")

        scenario = ConfigLoader.from_yaml(path)

        assert scenario.use_monthly_targets
        assert sum(t.target for t in scenario.monthly_targets) == scenario.revenue_target


class TestSettingsYaml:

    def test_top_level(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("target_precision: 2\non_track_tolerance_pct: 1.5\n", encoding="utf-8")

        settings = ConfigLoader.settings_from_yaml(path)

        assert settings.target_precision == 2
        assert settings.on_track_tolerance_pct == 1.5
        assert settings.curve_precision == 2

    def test_engine_section(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("engine:\n  rolling_window_days: 14\nother: {}\n", encoding="utf-8")

        assert ConfigLoader.settings_from_yaml(path).rolling_window_days == 14

    def test_out_of_bounds(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("rolling_window_days: 0\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid configuration"):
            ConfigLoader.settings_from_yaml(path)


class TestSchema:
    """Field-level behavior of the schema models."""

    def test_from_dict_accepts_both_key_styles(self):
        snake = ConfigLoader.from_dict({
            "id": "a", "start_date": "2025-01-01", "end_date": "2025-01-31", "revenue_target": 1,
        })
        camel = ConfigLoader.from_dict({
            "id": "a", "startDate": "2025-01-01", "endDate": "2025-01-31", "revenueTarget": 1,
        })

        assert snake == camel
        assert isinstance(snake, ForecastScenario)

    def test_combined_source_on_actual_means_untagged(self):
        actual = DailyActual(date=date(2025, 1, 1), revenue=1.0, source="combined")

        assert actual.source is None

    def test_daily_counters_date_alias(self):
        counters = DailyCounters(**{"date": "2025-01-02", "spend": 3, "revenue": 9})

        assert counters.day == date(2025, 1, 2)

    def test_default_settings(self):
        settings = EngineSettings()

        assert settings.target_precision == 0
        assert settings.on_track_tolerance_pct == 0.0
        assert settings.rolling_window_days == 7
