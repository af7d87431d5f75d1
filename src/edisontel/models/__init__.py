from __future__ import annotations

from edisontel.models.config import DEFAULT_WS_URL, FeedSettings
from edisontel.models.domain import (
    DomainModel,
    RangeDefinition,
    TelemetryDefinition,
    TelemetryRequest,
)
from edisontel.models.telemetry import Dictionary, Measurement, Subsystem

__all__ = [
    # config
    "DEFAULT_WS_URL",
    "FeedSettings",
    # domain
    "DomainModel",
    "RangeDefinition",
    "TelemetryDefinition",
    "TelemetryRequest",
    # telemetry
    "Dictionary",
    "Measurement",
    "Subsystem",
]
