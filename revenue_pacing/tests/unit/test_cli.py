"""
Tests for the command-line interface.
"""

import json

import pandas as pd
import pytest
import yaml

import cli
from revenue_pacing.config.loader import ConfigLoader


@pytest.fixture
def scenario_file(tmp_path, q1_scenario):
    path = tmp_path / "scenario.yaml"
    ConfigLoader.to_yaml(q1_scenario, path)
    return path


@pytest.fixture
def actuals_file(tmp_path):
    path = tmp_path / "actuals.csv"
    pd.DataFrame({
        "date": ["2025-01-01", "2025-01-02", "2025-01-03"],
        "revenue": [900.0, 900.0, 900.0],
        "ad_spend": [300.0, 300.0, 300.0],
    }).to_csv(path, index=False)
    return path


class TestForecastCommand:

    def test_summary_to_stdout(self, scenario_file, actuals_file, capsys):
        cli.main([
            "forecast", "-s", str(scenario_file), "-a", str(actuals_file),
            "--as-of", "2025-01-03", "--summary",
        ])

        summary = json.loads(capsys.readouterr().out)
        assert summary["status"] == "behind"
        assert summary["actual_revenue_to_date"] == 2700.0
        assert summary["forecast_revenue_to_date"] == 3000.0

    def test_full_result_to_file(self, tmp_path, scenario_file, actuals_file):
        output = tmp_path / "out" / "forecast.json"

        cli.main([
            "forecast", "-s", str(scenario_file), "-a", str(actuals_file),
            "--as-of", "2025-01-03", "-o", str(output),
        ])

        payload = json.loads(output.read_text(encoding="utf-8"))
        assert len(payload["daily_data"]) == 90
        assert payload["metrics"]["elapsed_days"] == 3

    def test_settings_file(self, tmp_path, scenario_file, actuals_file, capsys):
        settings = tmp_path / "settings.yaml"
        settings.write_text("engine:\n  on_track_tolerance_pct: 15\n", encoding="utf-8")

        cli.main([
            "forecast", "-s", str(scenario_file), "-a", str(actuals_file),
            "--as-of", "2025-01-03", "--settings", str(settings), "--summary",
        ])

        assert json.loads(capsys.readouterr().out)["status"] == "on_track"

    def test_invalid_scenario_exits(self, tmp_path, q1_scenario):
        path = tmp_path / "bad.yaml"
        ConfigLoader.to_yaml(q1_scenario.model_copy(update={"roas": 0.0}), path)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["forecast", "-s", str(path), "--as-of", "2025-01-03"])

        assert exc_info.value.code == 1


class TestOtherCommands:

    def test_months(self, capsys):
        cli.main(["months", "--start", "2025-01-15", "--end", "2025-02-10"])

        out = capsys.readouterr().out
        assert "January 2025" in out
        assert "February 2025" in out
        assert "17" in out

    def test_months_inverted_range_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["months", "--start", "2025-02-01", "--end", "2025-01-01"])

        assert exc_info.value.code == 1

    def test_template(self, tmp_path):
        output = tmp_path / "template.yaml"

        cli.main(["template", "-o", str(output)])

        content = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert content["id"] == "q1-growth"
        assert len(content["monthly_targets"]) == 3

    def test_no_command_exits(self):
        with pytest.raises(SystemExit):
            cli.main([])

    def test_bad_date_rejected(self):
        with pytest.raises(SystemExit):
            cli.main(["months", "--start", "01/01/2025", "--end", "2025-01-31"])
