from __future__ import annotations

"""
Typer CLI entry point: filter a SARIF report through a suppression config.

    sarif-filter <input.sarif> <config.json> <output.sarif>

Pipeline: load report -> load and compile suppressions -> filter every run
-> write the filtered report -> print a one-line summary.

Missing arguments produce a usage message on stderr and exit status 2.
Read, parse and write errors are not caught and terminate the process.

Set SARIF_FILTER_LOG_LEVEL (DEBUG, INFO, WARNING, ...) for more detail on
stderr; at INFO a per-rule hit table is printed as well.
"""

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from sarif_filter.config import get_suppression_rules, load_config
from sarif_filter.filtering import filter_report
from sarif_filter.report import load_report, write_report
from sarif_filter.reporting.console import print_rule_hits, print_summary

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SARIF_FILTER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING

app = typer.Typer(
    help="Remove findings matching a suppression configuration from a SARIF report.",
    add_completion=False,
)


def get_log_level() -> int:
    """Log level from SARIF_FILTER_LOG_LEVEL; unknown values fall back to WARNING."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def configure_logging(level: int | None = None) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def run(
    input_sarif: Path = typer.Argument(..., help="SARIF report to filter."),
    config_json: Path = typer.Argument(..., help="Suppression configuration (JSON)."),
    output_sarif: Path = typer.Argument(..., help="Where to write the filtered report."),
) -> None:
    """
    Filter INPUT_SARIF through the suppressions in CONFIG_JSON and write OUTPUT_SARIF.
    """
    configure_logging()

    report = load_report(input_sarif)
    rules = get_suppression_rules(load_config(config_json))
    logger.info("Compiled %d suppression rule(s)", len(rules))

    result = filter_report(report, rules)
    write_report(report, output_sarif)

    if logger.isEnabledFor(logging.INFO):
        print_rule_hits(rules, result)
    print_summary(result)


def main() -> None:
    """Entry point for `python -m sarif_filter.main` and the sarif-filter script."""
    app()


if __name__ == "__main__":
    main()
