"""
Configuration loader for scenario and settings YAML files.
"""

import yaml
from pathlib import Path
from typing import Union
import logging

from .schema import ForecastScenario, EngineSettings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load and save forecast scenarios and engine settings."""

    @staticmethod
    def _read_yaml(path: Union[str, Path]) -> tuple[Path, dict]:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)

        if not isinstance(content, dict):
            raise ValueError(f"Invalid configuration in {path}: expected a mapping")
        return path, content

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> ForecastScenario:
        """
        Load a forecast scenario from a YAML file.

        Parameters
        ----------
        path : Union[str, Path]
            Path to the YAML scenario file.

        Returns
        -------
        ForecastScenario
            Parsed scenario. Semantic checks happen in the engine.

        Raises
        ------
        FileNotFoundError
            If the scenario file doesn't exist.
        ValueError
            If the file content doesn't parse as a scenario.
        """
        path, scenario_dict = ConfigLoader._read_yaml(path)

        try:
            scenario = ForecastScenario(**scenario_dict)
            logger.info(f"Loaded scenario '{scenario.id}' from {path}")
            return scenario
        except Exception as e:
            raise ValueError(f"Invalid configuration in {path}: {e}")

    @staticmethod
    def to_yaml(scenario: ForecastScenario, path: Union[str, Path]) -> None:
        """
        Save a scenario to a YAML file.

        Parameters
        ----------
        scenario : ForecastScenario
            Scenario to save.
        path : Union[str, Path]
            Path to save the YAML file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        scenario_dict = scenario.model_dump(mode="json", exclude_none=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(scenario_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved scenario '{scenario.id}' to {path}")

    @staticmethod
    def from_dict(scenario_dict: dict) -> ForecastScenario:
        """Load a scenario from a dictionary (snake_case or camelCase keys)."""
        return ForecastScenario(**scenario_dict)

    @staticmethod
    def settings_from_yaml(path: Union[str, Path]) -> EngineSettings:
        """
        Load engine settings from a YAML file.

        The settings may sit at the top level or under an ``engine`` key,
        so they can share a file with other sections.
        """
        path, content = ConfigLoader._read_yaml(path)
        section = content.get("engine", content)

        try:
            settings = EngineSettings(**section)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {path}: {e}")

        logger.info(f"Loaded engine settings from {path}")
        return settings

    @staticmethod
    def get_template() -> dict:
        """
        Get a template scenario dictionary with all options documented.

        Returns
        -------
        dict
            Template scenario with default values.
        """
        return {
            "id": "q1-growth",
            "name": "Q1 Aggressive Growth",
            "start_date": "2025-01-01",
            "end_date": "2025-03-31",
            "revenue_target": 1500000.0,
            "roas": 2.5,
            "auto_catch_up_enabled": False,
            "revenue_source": "shopify",
            "use_monthly_targets": True,
            "monthly_targets": [
                {"month": "2025-01", "target": 450000.0},
                {"month": "2025-02", "target": 450000.0},
                {"month": "2025-03", "target": 600000.0},
            ],
        }
