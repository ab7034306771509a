from __future__ import annotations

"""
Suppression configuration: loading the JSON file and compiling its entries.

The configuration file looks like:

    {
      "suppressions": [
        {"check": "reentrancy-.*"},
        {"check": "naming-convention", "file": "contracts/mocks/**"},
        {"function": "withdraw\\\\(", "file": "src/Vault.sol", "lineRange": "40-60"},
        {"file": "lib/**/*.sol", "line": 12}
      ]
    }

Shape errors (the document is not an object, "suppressions" is not a list,
an entry is not an object, a pattern is not a string) are fatal. Individual
malformed line constraints are dropped with a warning so that one bad entry
does not block the whole run.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from sarif_filter.rules.suppression import SuppressionRule, parse_line, parse_line_range

logger = logging.getLogger(__name__)


class SuppressionEntry(BaseModel):
    """One entry of the "suppressions" list, as written by the user."""

    check: Optional[str] = Field(None, description="Regex searched in the check id")
    file: Optional[str] = Field(None, description="Glob matched against the artifact path")
    function: Optional[str] = Field(None, description="Regex searched in function/message text")
    line: Any = Field(None, description="Single line number")
    line_range: Any = Field(None, alias="lineRange", description='Inclusive "start-end" range')

    model_config = {"populate_by_name": True, "extra": "ignore"}


class SuppressionConfig(BaseModel):
    suppressions: List[SuppressionEntry] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("suppressions", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def load_config(path: Path) -> SuppressionConfig:
    """
    Read and validate a suppression configuration file.

    Raises:
        OSError: if the file cannot be read.
        json.JSONDecodeError: if it is not valid JSON.
        pydantic.ValidationError: if it does not have the expected shape.
    """
    data = json.loads(path.read_text(encoding="utf-8-sig"))
    config = SuppressionConfig.model_validate(data)
    logger.info("Loaded %d suppression entr%s from %s",
                len(config.suppressions), "y" if len(config.suppressions) == 1 else "ies", path)
    return config


def compile_entry(index: int, entry: SuppressionEntry) -> SuppressionRule:
    """
    Compile one configuration entry into a SuppressionRule.

    A "line" that is not a finite integer, or a "lineRange" that is not
    "<int>-<int>", is treated as absent and reported with a warning.

    Raises:
        re.error: if "check" or "function" is not a valid regular expression.
    """
    line = None
    if entry.line is not None:
        line = parse_line(entry.line)
        if line is None:
            logger.warning("Suppression #%d: ignoring invalid line %r", index, entry.line)

    line_range = None
    if entry.line_range:
        line_range = parse_line_range(entry.line_range)
        if line_range is None:
            logger.warning(
                "Suppression #%d: ignoring invalid lineRange %r (expected \"<start>-<end>\")",
                index,
                entry.line_range,
            )

    rule = SuppressionRule.compile(
        index,
        check=entry.check,
        file=entry.file,
        function=entry.function,
        line=line,
        line_range=line_range,
    )
    if rule.is_empty:
        logger.warning("Suppression #%d has no usable constraint and will match nothing", index)
    return rule


def get_suppression_rules(config: SuppressionConfig) -> Sequence[SuppressionRule]:
    """Compile every entry of the configuration, preserving order."""
    return [compile_entry(index, entry) for index, entry in enumerate(config.suppressions)]
