"""Index-based view over a sequence of ``{timestamp, value}`` points."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def _field(point: Any, name: str) -> Any:
    if isinstance(point, Mapping):
        return point.get(name)
    return None


class TelemetrySeries:
    """Wraps an ordered sequence of points for the host's plotting code.

    Out-of-range indices, including negative ones, yield ``None`` rather
    than raising.
    """

    def __init__(self, points: Sequence[Any] | None = None) -> None:
        self._points: Sequence[Any] = points if points is not None else []

    @classmethod
    def from_frame(cls, frame: Mapping[str, Any]) -> TelemetrySeries:
        """Build a series from a ``history`` frame or a single ``data`` frame."""
        value = frame.get("value")
        if value is None:
            return cls([])
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return cls(value)
        return cls([value])

    @property
    def point_count(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def _point(self, index: int) -> Any:
        if 0 <= index < len(self._points):
            return self._points[index]
        return None

    def domain_value(self, index: int) -> Any:
        """Return the timestamp at *index*, or ``None``."""
        return _field(self._point(index), "timestamp")

    def range_value(self, index: int) -> Any:
        """Return the value at *index*, or ``None``."""
        return _field(self._point(index), "value")
