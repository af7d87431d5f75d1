"""Shape of the telemetry server's measurement dictionary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Measurement(BaseModel):
    """A single measurable value, e.g. ``pwr.v`` (volts)."""

    model_config = ConfigDict(extra="allow")

    identifier: str
    name: str = ""
    type: str | None = None
    units: str | None = None


class Subsystem(BaseModel):
    """A group of related measurements, e.g. power or temperature."""

    model_config = ConfigDict(extra="allow")

    identifier: str
    name: str = ""
    measurements: list[Measurement] = Field(default_factory=list)


class Dictionary(BaseModel):
    """Catalog of subsystems and measurements published by the board."""

    model_config = ConfigDict(extra="allow")

    identifier: str = ""
    name: str = ""
    subsystems: list[Subsystem] = Field(default_factory=list)

    def measurements(self) -> list[Measurement]:
        """Return every measurement across all subsystems, in order."""
        return [m for s in self.subsystems for m in s.measurements]
