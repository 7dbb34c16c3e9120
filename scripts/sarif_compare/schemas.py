"""
SARIF Schemas - Typed models for the subset of SARIF 2.1.0 the comparison reads.

These models sit at the ingestion boundary: an uploaded document is
validated here once, and everything downstream works with the plain
dataclasses in ``models.py``.

Hierarchy:
    SarifLog                   - top-level document (version + runs)
    SarifRun                   - one tool invocation (tool + results)
    SarifTool / SarifDriver    - tool identity and rule metadata
    SarifReportingDescriptor   - a rule (id, tags, default level)
    SarifResult                - a finding
    SarifLocation              - physical location of a finding

Only the fields the comparison consumes are declared. The ``extra = "allow"``
policy lets producers attach any other SARIF properties without failing
validation; full schema validation is not attempted.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

_MODEL_CONFIG = {"extra": "allow", "populate_by_name": True}


def _lower_level(v: Optional[str]) -> Optional[str]:
    """Normalize a SARIF level once, at the boundary."""
    if v is None:
        return None
    v = v.strip().lower()
    return v or None


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


class SarifArtifactLocation(BaseModel):
    uri: str = ""

    model_config = _MODEL_CONFIG


class SarifRegion(BaseModel):
    start_line: Optional[int] = Field(default=None, alias="startLine")
    start_column: Optional[int] = Field(default=None, alias="startColumn")
    end_line: Optional[int] = Field(default=None, alias="endLine")
    end_column: Optional[int] = Field(default=None, alias="endColumn")

    model_config = _MODEL_CONFIG


class SarifPhysicalLocation(BaseModel):
    artifact_location: Optional[SarifArtifactLocation] = Field(default=None, alias="artifactLocation")
    region: Optional[SarifRegion] = None

    model_config = _MODEL_CONFIG


class SarifLocation(BaseModel):
    physical_location: Optional[SarifPhysicalLocation] = Field(default=None, alias="physicalLocation")

    model_config = _MODEL_CONFIG


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class SarifMessage(BaseModel):
    text: str = ""

    model_config = _MODEL_CONFIG


class SarifResult(BaseModel):
    """A single finding (SARIF ``result`` object)."""

    rule_id: Optional[str] = Field(default=None, alias="ruleId")
    message: SarifMessage = Field(default_factory=SarifMessage)
    locations: List[SarifLocation] = Field(default_factory=list)
    level: Optional[str] = None

    model_config = _MODEL_CONFIG

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: Optional[str]) -> Optional[str]:
        """Lower-case the level so consumers never compare case-insensitively."""
        return _lower_level(v)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class SarifMultiformatMessage(BaseModel):
    text: str = ""

    model_config = _MODEL_CONFIG


class SarifRuleConfiguration(BaseModel):
    level: Optional[str] = None

    model_config = _MODEL_CONFIG

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: Optional[str]) -> Optional[str]:
        return _lower_level(v)


class SarifPropertyBag(BaseModel):
    tags: List[str] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    @field_validator("tags", mode="before")
    @classmethod
    def stringify_tags(cls, v: Any) -> Any:
        """Tags are free text; tolerate producers that emit numbers."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(tag) for tag in v]
        return v


class SarifReportingDescriptor(BaseModel):
    """A rule (SARIF ``reportingDescriptor``)."""

    id: str
    name: Optional[str] = None
    short_description: Optional[SarifMultiformatMessage] = Field(default=None, alias="shortDescription")
    default_configuration: Optional[SarifRuleConfiguration] = Field(default=None, alias="defaultConfiguration")
    properties: Optional[SarifPropertyBag] = None

    model_config = _MODEL_CONFIG


# ---------------------------------------------------------------------------
# Tool / run / log
# ---------------------------------------------------------------------------


class SarifDriver(BaseModel):
    name: str = ""
    rules: List[SarifReportingDescriptor] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class SarifTool(BaseModel):
    driver: SarifDriver

    model_config = _MODEL_CONFIG


class SarifRun(BaseModel):
    tool: SarifTool
    results: List[SarifResult] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class SarifLog(BaseModel):
    """Top-level SARIF document."""

    version: str = ""
    runs: List[SarifRun]

    model_config = _MODEL_CONFIG

    @field_validator("runs")
    @classmethod
    def validate_runs(cls, v: List[SarifRun]) -> List[SarifRun]:
        """A document without runs has nothing to compare."""
        if not v:
            raise ValueError("SARIF log contains no runs")
        return v


__all__ = [
    "SarifArtifactLocation",
    "SarifRegion",
    "SarifPhysicalLocation",
    "SarifLocation",
    "SarifMessage",
    "SarifResult",
    "SarifMultiformatMessage",
    "SarifRuleConfiguration",
    "SarifPropertyBag",
    "SarifReportingDescriptor",
    "SarifDriver",
    "SarifTool",
    "SarifRun",
    "SarifLog",
]
