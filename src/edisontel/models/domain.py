"""Host-facing domain object models.

These mirror the plain records the visualization host expects from a
model provider.  They carry no behavior.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RangeDefinition(BaseModel):
    key: str = "value"
    name: str = "Value"
    units: str | None = None
    format: str | None = None


class TelemetryDefinition(BaseModel):
    key: str
    ranges: list[RangeDefinition] = Field(default_factory=list)


class DomainModel(BaseModel):
    """A domain object as seen by the host: board, subsystem or measurement."""

    type: str
    name: str
    composition: list[str] | None = None
    telemetry: TelemetryDefinition | None = None


class TelemetryRequest(BaseModel):
    """A host request for telemetry of one measurement."""

    source: str
    key: str
