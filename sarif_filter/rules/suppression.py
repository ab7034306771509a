# Compiled suppression rules: decide whether one SARIF finding matches one rule.
# Rules are built from configuration entries by sarif_filter.config.

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from sarif_filter.findings.models import Finding, Location, as_integer
from sarif_filter.globs import glob_matches, glob_to_regex
from sarif_filter.paths import canonical_artifact_path

_LINE_RANGE = re.compile(r"([0-9]+)\s*-\s*([0-9]+)")


@dataclass(frozen=True)
class LineRange:
    """Inclusive span of line numbers."""

    start: int
    end: int

    def intersects(self, lines: range) -> bool:
        if not lines:
            return False
        return max(self.start, lines[0]) <= min(self.end, lines[-1])

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


def parse_line_range(value: Any) -> Optional[LineRange]:
    """
    Parse a "start-end" line range such as "20-25" or "20 - 25".

    Returns None for anything else ("abc", "10", "-5", " 20-25 ").
    """
    match = _LINE_RANGE.fullmatch(str(value))
    if match is None:
        return None
    return LineRange(int(match.group(1)), int(match.group(2)))


def parse_line(value: Any) -> Optional[Union[int, float]]:
    """
    Return value as a line constraint, or None if it is not a finite number.

    Integral floats become ints. A fractional line such as 10.5 is kept as is:
    it is still a constraint, one that no region line can satisfy.
    """
    line = as_integer(value)
    if line is not None:
        return line
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


@dataclass(frozen=True)
class SuppressionRule:
    """
    One compiled suppression entry.

    Every constraint is optional. Present constraints are ANDed, except that
    `line` and `line_range` are alternatives: a location matches if its lines
    contain `line` or intersect `line_range`.

    A rule with neither a file nor a line constraint is location-agnostic and
    matches on check/function alone. A rule with no constraint at all matches
    nothing.
    """

    index: int
    check: Optional[re.Pattern[str]] = None
    file: Optional[re.Pattern[str]] = None
    function: Optional[re.Pattern[str]] = None
    line: Optional[Union[int, float]] = None
    line_range: Optional[LineRange] = None
    file_glob: Optional[str] = None

    @classmethod
    def compile(
        cls,
        index: int,
        *,
        check: Optional[str] = None,
        file: Optional[str] = None,
        function: Optional[str] = None,
        line: Optional[Union[int, float]] = None,
        line_range: Optional[LineRange] = None,
    ) -> "SuppressionRule":
        """
        Compile raw pattern strings into a rule. Empty strings mean "absent".

        Raises:
            re.error: if check or function is not a valid regular expression.
        """
        return cls(
            index=index,
            check=re.compile(check) if check else None,
            file=glob_to_regex(file) if file else None,
            function=re.compile(function) if function else None,
            line=line,
            line_range=line_range,
            file_glob=file or None,
        )

    @property
    def has_location_constraint(self) -> bool:
        return self.file is not None or self.line is not None or self.line_range is not None

    @property
    def has_line_constraint(self) -> bool:
        return self.line is not None or self.line_range is not None

    @property
    def is_empty(self) -> bool:
        return self.check is None and self.function is None and not self.has_location_constraint

    def describe(self) -> str:
        """Short human-readable summary, e.g. "check=reentrancy.* file=src/**"."""
        parts = []
        if self.check is not None:
            parts.append(f"check={self.check.pattern}")
        if self.function is not None:
            parts.append(f"function={self.function.pattern}")
        if self.file_glob is not None:
            parts.append(f"file={self.file_glob}")
        if self.line is not None:
            parts.append(f"line={self.line}")
        if self.line_range is not None:
            parts.append(f"lineRange={self.line_range}")
        return " ".join(parts) or "(empty)"

    def matches_location(self, location: Location) -> bool:
        """True if the location satisfies this rule's file and line constraints."""
        if self.file is not None:
            path = canonical_artifact_path(location.uri)
            if not glob_matches(self.file, path):
                return False

        if not self.has_line_constraint:
            return True

        lines = location.lines()
        if self.line is not None and self.line in lines:
            return True
        return self.line_range is not None and self.line_range.intersects(lines)

    def matches(self, finding: Finding, descriptor_ids: Sequence[Optional[str]] = ()) -> bool:
        """
        True if this rule suppresses the finding.

        Args:
            finding: The finding to test.
            descriptor_ids: Rule descriptor ids of the finding's own run, used
                to resolve findings that only carry a ruleIndex.
        """
        if self.is_empty:
            return False

        if self.check is not None and not self.check.search(finding.check_id(descriptor_ids)):
            return False

        if self.function is not None and not self.function.search(finding.function_text()):
            return False

        if not self.has_location_constraint:
            return True

        return any(self.matches_location(loc) for loc in finding.locations)
