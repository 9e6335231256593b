#!/usr/bin/env python
"""
Command-line interface for the revenue pacing engine.

Usage:
    python cli.py forecast --scenario scenario.yaml --actuals actuals.csv --as-of 2025-02-14
    python cli.py months --start 2025-01-01 --end 2025-03-31
    python cli.py template --output scenario.yaml
    python cli.py serve --port 8000
"""

import argparse
import json
import sys
import logging
from datetime import date
from pathlib import Path

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected a YYYY-MM-DD date, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Revenue Pacing - goal forecasting and pacing CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Forecast command
    forecast_parser = subparsers.add_parser("forecast", help="Compute pacing for a scenario")
    forecast_parser.add_argument(
        "--scenario", "-s",
        type=str,
        required=True,
        help="Path to YAML scenario file"
    )
    forecast_parser.add_argument(
        "--actuals", "-a",
        type=str,
        help="Path to CSV of daily actuals (date, revenue, ad_spend[, source])"
    )
    forecast_parser.add_argument(
        "--as-of",
        type=_parse_date,
        default=None,
        help="Date treated as today (default: today)"
    )
    forecast_parser.add_argument(
        "--settings",
        type=str,
        help="Optional: Path to YAML engine settings"
    )
    forecast_parser.add_argument(
        "--catch-up",
        action="store_true",
        help="Apply the catch-up pace to future days when the scenario enables it"
    )
    forecast_parser.add_argument(
        "--summary",
        action="store_true",
        help="Only output the metrics summary"
    )
    forecast_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write JSON to this file instead of stdout"
    )

    # Months command
    months_parser = subparsers.add_parser("months", help="List the months of a date range")
    months_parser.add_argument("--start", type=_parse_date, required=True, help="Range start")
    months_parser.add_argument("--end", type=_parse_date, required=True, help="Range end")

    # Template command
    template_parser = subparsers.add_parser("template", help="Write a scenario template")
    template_parser.add_argument(
        "--output", "-o",
        type=str,
        default="scenario.yaml",
        help="Where to write the template"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Launch the HTTP API")
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to listen on"
    )
    serve_parser.add_argument("--host", type=str, default="127.0.0.1", help="Interface to bind")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # Route to command handlers
    if args.command == "forecast":
        cmd_forecast(args)
    elif args.command == "months":
        cmd_months(args)
    elif args.command == "template":
        cmd_template(args)
    elif args.command == "serve":
        cmd_serve(args)


def cmd_forecast(args):
    """Compute a forecast from a scenario file and an actuals CSV."""
    import pandas as pd
    from revenue_pacing.config.loader import ConfigLoader
    from revenue_pacing.config.schema import EngineSettings
    from revenue_pacing.forecasting import ForecastEngine, ForecastError, actuals_from_dataframe

    logger.info(f"Loading scenario from: {args.scenario}")
    scenario = ConfigLoader.from_yaml(args.scenario)

    settings = ConfigLoader.settings_from_yaml(args.settings) if args.settings else EngineSettings()

    actuals = []
    if args.actuals:
        logger.info(f"Loading actuals from: {args.actuals}")
        df = pd.read_csv(args.actuals)
        logger.info(f"Loaded {len(df)} rows, {len(df.columns)} columns")
        actuals = actuals_from_dataframe(df)

    as_of = args.as_of or date.today()
    engine = ForecastEngine(settings)

    try:
        result = engine.compute_forecast(scenario, actuals, as_of)
    except ForecastError as e:
        logger.error(f"Forecast failed: {e}")
        sys.exit(1)

    if args.catch_up:
        result = result.with_daily_data(tuple(engine.project_catch_up(result)))

    payload = result.get_summary_dict() if args.summary else result.to_dict()
    text = json.dumps(payload, indent=2)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        logger.info(f"Forecast written to: {output_path}")
    else:
        print(text)


def cmd_months(args):
    """Print the months of a date range."""
    from revenue_pacing.forecasting import ForecastError, months_in_range

    try:
        months = months_in_range(args.start, args.end)
    except ForecastError as e:
        logger.error(str(e))
        sys.exit(1)

    print(f"{'Month':<10} {'Name':<16} {'Days':>5} {'In range':>9}")
    for m in months:
        print(f"{m.month:<10} {m.month_name:<16} {m.days_in_month:>5} {m.days_in_range:>9}")


def cmd_template(args):
    """Write a documented scenario template."""
    import yaml
    from revenue_pacing.config.loader import ConfigLoader

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(ConfigLoader.get_template(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Template written to: {output_path}")


def cmd_serve(args):
    """Launch the HTTP API."""
    import uvicorn

    logger.info(f"Serving API at: http://{args.host}:{args.port}")
    uvicorn.run("revenue_pacing.api.server:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
