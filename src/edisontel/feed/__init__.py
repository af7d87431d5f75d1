"""Telemetry server feed: WebSocket adapter and series wrapper."""

from __future__ import annotations

from edisontel.feed.adapter import TelemetryFeedAdapter
from edisontel.feed.series import TelemetrySeries

__all__ = [
    "TelemetryFeedAdapter",
    "TelemetrySeries",
]
