# Pydantic views over SARIF results: Finding, Location, Region.
# Only the fields the suppression filter reads are modelled. Every field is
# optional; a value of the wrong JSON type is treated as absent.

import math
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

_LENIENT = {"populate_by_name": True, "extra": "ignore"}


def as_integer(value: Any) -> Optional[int]:
    """Return value as an int, or None if it is not a finite integral number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


def _mapping_or_empty(value: Any) -> Any:
    return value if isinstance(value, dict) else {}


def _string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class Region(BaseModel):
    """Line span of a location. endLine defaults to startLine."""

    start_line: Optional[int] = Field(None, alias="startLine")
    end_line: Optional[int] = Field(None, alias="endLine")

    model_config = _LENIENT

    @field_validator("start_line", "end_line", mode="before")
    @classmethod
    def _finite_line(cls, value: Any) -> Optional[int]:
        return as_integer(value)

    def lines(self) -> range:
        """Inclusive range of covered line numbers (empty without a startLine)."""
        if self.start_line is None:
            return range(0)
        end = self.end_line if self.end_line is not None else self.start_line
        return range(self.start_line, end + 1)


class ArtifactLocation(BaseModel):
    uri: Optional[str] = None
    uri_base_id: Optional[str] = Field(None, alias="uriBaseId")

    model_config = _LENIENT

    @field_validator("uri", "uri_base_id", mode="before")
    @classmethod
    def _string(cls, value: Any) -> Optional[str]:
        return _string_or_none(value)

    @property
    def reference(self) -> str:
        """The uri, or the uriBaseId when no uri is given."""
        return self.uri or self.uri_base_id or ""


class PhysicalLocation(BaseModel):
    artifact_location: ArtifactLocation = Field(
        default_factory=ArtifactLocation, alias="artifactLocation"
    )
    region: Optional[Region] = None

    model_config = _LENIENT

    @field_validator("artifact_location", mode="before")
    @classmethod
    def _artifact(cls, value: Any) -> Any:
        return _mapping_or_empty(value)

    @field_validator("region", mode="before")
    @classmethod
    def _region(cls, value: Any) -> Any:
        return _mapping_or_none(value)


class Location(BaseModel):
    """Where a finding was reported: artifact reference plus optional region."""

    physical_location: PhysicalLocation = Field(
        default_factory=PhysicalLocation, alias="physicalLocation"
    )

    model_config = _LENIENT

    @field_validator("physical_location", mode="before")
    @classmethod
    def _physical(cls, value: Any) -> Any:
        return _mapping_or_empty(value)

    @property
    def uri(self) -> str:
        return self.physical_location.artifact_location.reference

    @property
    def region(self) -> Optional[Region]:
        return self.physical_location.region

    def lines(self) -> range:
        """Line numbers covered by this location (empty without a region)."""
        if self.region is None:
            return range(0)
        return self.region.lines()


class Message(BaseModel):
    text: Optional[str] = None

    model_config = _LENIENT

    @field_validator("text", mode="before")
    @classmethod
    def _string(cls, value: Any) -> Optional[str]:
        return _string_or_none(value)


class FindingProperties(BaseModel):
    """Producer-specific property bag; function/signature hints live here."""

    function: Any = None
    signature: Any = None
    function_name: Any = None

    model_config = _LENIENT


class Finding(BaseModel):
    """A single SARIF result as seen by the suppression rules."""

    rule_id: Optional[str] = Field(None, alias="ruleId")
    rule_index: Optional[int] = Field(None, alias="ruleIndex")
    message: Message = Field(default_factory=Message)
    properties: FindingProperties = Field(default_factory=FindingProperties)
    locations: list[Location] = Field(default_factory=list)

    model_config = _LENIENT

    @field_validator("rule_id", mode="before")
    @classmethod
    def _rule_id(cls, value: Any) -> Optional[str]:
        return _string_or_none(value)

    @field_validator("rule_index", mode="before")
    @classmethod
    def _rule_index(cls, value: Any) -> Optional[int]:
        index = as_integer(value)
        return index if index is not None and index >= 0 else None

    @field_validator("message", "properties", mode="before")
    @classmethod
    def _mapping(cls, value: Any) -> Any:
        return _mapping_or_empty(value)

    @field_validator("locations", mode="before")
    @classmethod
    def _locations(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [_mapping_or_empty(item) for item in value]

    @classmethod
    def from_sarif(cls, result: Any) -> "Finding":
        """Build a Finding from a raw SARIF result object (non-objects give an empty Finding)."""
        return cls.model_validate(_mapping_or_empty(result))

    def check_id(self, descriptor_ids: Sequence[Optional[str]]) -> str:
        """
        Resolve the detector/check id of this finding.

        ruleId wins; otherwise ruleIndex is looked up in the run's rule
        descriptors; otherwise "".
        """
        if self.rule_id is not None:
            return self.rule_id
        if self.rule_index is not None and self.rule_index < len(descriptor_ids):
            return descriptor_ids[self.rule_index] or ""
        return ""

    def function_text(self) -> str:
        """Searchable text for function constraints: properties hints then the message."""
        parts = [
            self.properties.function,
            self.properties.signature,
            self.properties.function_name,
            self.message.text,
        ]
        return " | ".join(str(part) for part in parts if part)


def rule_descriptor_ids(run: Any) -> list[Optional[str]]:
    """Return tool.driver.rules[*].id of a raw SARIF run, positionally (None where missing)."""
    run = _mapping_or_empty(run)
    driver = _mapping_or_empty(_mapping_or_empty(run.get("tool")).get("driver"))
    rules = driver.get("rules")
    if not isinstance(rules, list):
        return []
    return [_string_or_none(_mapping_or_empty(rule).get("id")) for rule in rules]
