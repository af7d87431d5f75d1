"""Host-facing providers built on the feed adapter."""

from __future__ import annotations

from edisontel.providers.model import (
    PREFIX,
    ROOT_ID,
    SOURCE,
    ModelProvider,
    build_taxonomy,
    initialize_root,
)
from edisontel.providers.telemetry import TelemetryProvider

__all__ = [
    "PREFIX",
    "ROOT_ID",
    "SOURCE",
    "ModelProvider",
    "TelemetryProvider",
    "build_taxonomy",
    "initialize_root",
]
