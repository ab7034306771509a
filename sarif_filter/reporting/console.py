# Console output: the one-line summary on stdout and a Rich table of
# per-rule hits on stderr.

from __future__ import annotations

from typing import Sequence

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sarif_filter.filtering import FilterResult
from sarif_filter.rules.suppression import SuppressionRule


def format_summary(result: FilterResult) -> str:
    """One-line summary, e.g. "SARIF filter: suppressed 3 result(s), kept 5 result(s)."."""
    return (
        f"SARIF filter: suppressed {result.suppressed} result(s), "
        f"kept {result.kept} result(s)."
    )


def print_summary(result: FilterResult) -> None:
    """Print the summary line to stdout."""
    typer.echo(format_summary(result))


def build_rule_hits_table(rules: Sequence[SuppressionRule], result: FilterResult) -> Table:
    """Table with one row per suppression rule and how many findings it removed."""
    table = Table(
        title="Suppression rules",
        show_header=True,
        header_style="bold magenta",
        box=box.SIMPLE,
        padding=(0, 1),
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Rule", style="white")
    table.add_column("Suppressed", justify="right", width=10)

    for rule in rules:
        hits = result.rule_hits.get(rule.index, 0)
        table.add_row(
            str(rule.index),
            rule.describe(),
            Text(str(hits), style="bold green" if hits else "dim"),
        )
    return table


def print_rule_hits(
    rules: Sequence[SuppressionRule],
    result: FilterResult,
    console: Console | None = None,
) -> None:
    """Print the per-rule table (stderr by default so stdout stays one line)."""
    if not rules:
        return
    if console is None:
        console = Console(stderr=True)
    console.print(build_rule_hits_table(rules, result))
