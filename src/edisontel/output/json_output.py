"""JSON envelopes for piped output.

Every record carries ``ok``, ``command`` and a UTC ``timestamp``; successes
add ``data`` and failures add ``error``.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel

from edisontel.feed.series import TelemetrySeries


def _serialize(obj: Any) -> Any:
    """Turn models and series into plain JSON structures, recursively."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(exclude_none=True)
    if isinstance(obj, TelemetrySeries):
        return [
            {"timestamp": obj.domain_value(i), "value": obj.range_value(i)}
            for i in range(obj.point_count)
        ]
    if isinstance(obj, list):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {key: _serialize(value) for key, value in obj.items()}
    return obj


def _envelope(command: str, **body: Any) -> dict[str, Any]:
    return {
        "ok": "error" not in body,
        "command": command,
        **body,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def format_json_response(*, data: Any, command: str) -> str:
    """Indented success envelope for one-shot commands."""
    return json.dumps(_envelope(command, data=_serialize(data)), indent=2, default=str)


def format_json_line(*, data: Any, command: str) -> str:
    """Single-line success envelope, one per streamed record."""
    return json.dumps(_envelope(command, data=_serialize(data)), default=str)


def format_json_error(*, code: str, message: str, command: str, **extra: Any) -> str:
    error = {"code": code, "message": message, **extra}
    return json.dumps(_envelope(command, error=error), indent=2, default=str)
