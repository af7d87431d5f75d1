"""Intel Edison telemetry source for a WebSocket-fed visualization host."""

from __future__ import annotations

__version__ = "0.1.0"
