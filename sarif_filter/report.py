# Reading and writing SARIF report files.
# The report is kept as plain JSON objects so fields the filter does not
# model are written back untouched.

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ReportFormatError(ValueError):
    """The report is valid JSON but not shaped like a SARIF log."""


def load_report(path: Path) -> dict[str, Any]:
    """
    Read a SARIF report into memory.

    Raises:
        OSError: if the file cannot be read.
        json.JSONDecodeError: if it is not valid JSON.
        ReportFormatError: if the top level is not an object or "runs"
            (when present) is not a list.
    """
    report = json.loads(path.read_text(encoding="utf-8-sig"))
    if not isinstance(report, dict):
        raise ReportFormatError(f"{path}: expected a JSON object at the top level")
    runs = report.get("runs")
    if runs is not None and not isinstance(runs, list):
        raise ReportFormatError(f"{path}: \"runs\" must be a list")
    logger.info("Loaded report %s with %d run(s)", path, len(runs or []))
    return report


def get_runs(report: dict[str, Any]) -> list[Any]:
    """Return the report's runs (an empty list when absent)."""
    return report.get("runs") or []


def get_results(run: Any, run_index: int = 0) -> list[Any]:
    """
    Return a run's results list (an empty list when absent).

    Raises:
        ReportFormatError: if the run is not an object or its results are not a list.
    """
    if not isinstance(run, dict):
        raise ReportFormatError(f"run #{run_index}: expected a JSON object")
    results = run.get("results")
    if results is None:
        return []
    if not isinstance(results, list):
        raise ReportFormatError(f"run #{run_index}: \"results\" must be a list")
    return results


def count_results(report: dict[str, Any]) -> int:
    """Total number of results across all runs."""
    return sum(len(get_results(run, i)) for i, run in enumerate(get_runs(report)))


def write_report(report: dict[str, Any], path: Path) -> None:
    """Write the report as indented JSON (UTF-8, trailing newline)."""
    path.write_text(json.dumps(report, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info("Wrote filtered report to %s", path)
