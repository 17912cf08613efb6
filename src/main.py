"""Command-line bootstrap for the survey report.

Loads a survey export saved from the data service (either the raw array or
the processed mapping), applies the requested filter and prints the report as
JSON.  Environment variables, including a local ``.env`` file, are loaded
before the reporting configuration is imported.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file before config constants are read
load_dotenv()

from src.exceptions import InvalidFilterError, PayloadError  # noqa: E402
from src.reporting.context import build_survey_report  # noqa: E402
from src.reporting.models import ALL, AggregationFilter  # noqa: E402
from src.survey_data import SurveyData  # noqa: E402

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging_level = os.environ.get("SURVEY_LOG_LEVEL", "INFO")
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging_level,
    )


def load_export(path: str) -> SurveyData:
    """Read the JSON export at *path* (``-`` for stdin).

    Raises
    ------
    PayloadError
        If the file cannot be read or does not contain valid JSON.
    """
    try:
        if path == "-":
            raw = sys.stdin.read()
        else:
            raw = Path(path).read_text(encoding="utf-8")
        payload: Any = json.loads(raw)
    except OSError as exc:
        raise PayloadError(f"Cannot read survey export {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Survey export {path} is not valid JSON: {exc}") from exc
    return SurveyData.load(payload)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-report",
        description="Compute the delivery satisfaction report for a survey export.",
    )
    parser.add_argument("export", help="Path to the JSON export, or - for stdin")
    parser.add_argument("--year", default=ALL, help="Delivery year or 'all'")
    parser.add_argument("--month", default=ALL, help="Delivery month 1-12 or 'all'")
    parser.add_argument(
        "--exclude-ignored",
        action="store_true",
        help="Drop responses flagged as test or duplicate data",
    )
    parser.add_argument(
        "--dissatisfied-only",
        action="store_true",
        help="Keep only completed responses scoring below the threshold",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit status."""
    args = _build_parser().parse_args(argv)
    configure_logging()

    try:
        survey_filter = AggregationFilter(
            year=args.year,
            month=args.month,
            exclude_ignored=args.exclude_ignored,
            dissatisfied_only=args.dissatisfied_only,
        )
        data = load_export(args.export)
    except (InvalidFilterError, PayloadError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Loaded %r", data)
    report = build_survey_report(data, survey_filter)
    json.dump(report.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
