from __future__ import annotations

"""
Apply compiled suppression rules to every run of a SARIF report.

Each run is filtered on its own: findings that only carry a ruleIndex are
resolved against that run's tool.driver.rules, never another run's. The
report's results lists are replaced in place; nothing else is modified.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from sarif_filter.findings.models import Finding, rule_descriptor_ids
from sarif_filter.report import get_results, get_runs
from sarif_filter.rules.suppression import SuppressionRule

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Counts for one run."""

    index: int
    tool: str
    total: int = 0
    suppressed: int = 0

    @property
    def kept(self) -> int:
        return self.total - self.suppressed


@dataclass
class FilterResult:
    """
    Outcome of filtering a whole report.

    `rule_hits` maps a rule index to the number of findings it removed; a
    finding matched by several rules is credited to the first one only.
    """

    runs: List[RunStats] = field(default_factory=list)
    rule_hits: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return sum(r.total for r in self.runs)

    @property
    def suppressed(self) -> int:
        return sum(r.suppressed for r in self.runs)

    @property
    def kept(self) -> int:
        return sum(r.kept for r in self.runs)


def find_matching_rule(
    finding: Finding,
    rules: Sequence[SuppressionRule],
    descriptor_ids: Sequence[Optional[str]] = (),
) -> Optional[SuppressionRule]:
    """Return the first rule that matches the finding, or None if it should be kept."""
    for rule in rules:
        if rule.matches(finding, descriptor_ids):
            return rule
    return None


def _tool_name(run: dict[str, Any]) -> str:
    tool = run.get("tool")
    driver = tool.get("driver") if isinstance(tool, dict) else None
    name = driver.get("name") if isinstance(driver, dict) else None
    return name if isinstance(name, str) else "unknown tool"


def filter_run(
    run: dict[str, Any],
    rules: Sequence[SuppressionRule],
    index: int = 0,
    rule_hits: Optional[Counter] = None,
) -> RunStats:
    """
    Drop suppressed findings from one run, in place.

    The run's "results" key is only rewritten when it exists.
    """
    results = get_results(run, index)
    stats = RunStats(index=index, tool=_tool_name(run), total=len(results))
    descriptor_ids = rule_descriptor_ids(run)

    kept: List[Any] = []
    for raw in results:
        finding = Finding.from_sarif(raw)
        rule = find_matching_rule(finding, rules, descriptor_ids)
        if rule is None:
            kept.append(raw)
            continue
        stats.suppressed += 1
        if rule_hits is not None:
            rule_hits[rule.index] += 1
        logger.debug(
            "Suppressed %s (%s) by rule #%d [%s]",
            finding.check_id(descriptor_ids) or "<no check id>",
            finding.message.text or "",
            rule.index,
            rule.describe(),
        )

    if "results" in run:
        run["results"] = kept
    logger.info(
        "Run #%d (%s): suppressed %d of %d result(s)",
        index,
        stats.tool,
        stats.suppressed,
        stats.total,
    )
    return stats


def filter_report(report: dict[str, Any], rules: Sequence[SuppressionRule]) -> FilterResult:
    """Filter every run of the report in place and return the counts."""
    result = FilterResult()
    for index, run in enumerate(get_runs(report)):
        result.runs.append(filter_run(run, rules, index, result.rule_hits))
    return result
