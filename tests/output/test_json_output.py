from __future__ import annotations

import json

from edisontel.feed.series import TelemetrySeries
from edisontel.models.telemetry import Dictionary, Measurement, Subsystem
from edisontel.output.json_output import (
    format_json_error,
    format_json_line,
    format_json_response,
)


class TestFormatJsonResponse:
    """Tests for :func:`format_json_response`."""

    def test_with_model(self) -> None:
        d = Dictionary(
            identifier="edison",
            name="Intel Edison",
            subsystems=[
                Subsystem(identifier="pwr", measurements=[Measurement(identifier="pwr.v")])
            ],
        )
        parsed = json.loads(format_json_response(data=d, command="dictionary"))

        assert parsed["ok"] is True
        assert parsed["command"] == "dictionary"
        assert parsed["data"]["name"] == "Intel Edison"
        assert parsed["data"]["subsystems"][0]["measurements"][0]["identifier"] == "pwr.v"
        # None fields are excluded
        assert "units" not in parsed["data"]["subsystems"][0]["measurements"][0]
        assert "timestamp" in parsed

    def test_with_series(self) -> None:
        series = TelemetrySeries([{"timestamp": 1, "value": 2.0}, {"timestamp": 3}])
        parsed = json.loads(
            format_json_response(data={"id": "pwr.v", "points": series}, command="history")
        )
        assert parsed["data"] == {
            "id": "pwr.v",
            "points": [{"timestamp": 1, "value": 2.0}, {"timestamp": 3, "value": None}],
        }

    def test_with_dict(self) -> None:
        parsed = json.loads(format_json_response(data={"count": 42}, command="raw"))
        assert parsed["data"] == {"count": 42}

    def test_timestamp_is_iso_utc(self) -> None:
        parsed = json.loads(format_json_response(data={"x": 1}, command="test"))
        assert parsed["timestamp"].endswith("+00:00")


class TestFormatJsonLine:
    def test_single_line(self) -> None:
        raw = format_json_line(data={"id": "pwr.v", "value": 1}, command="watch")
        assert "\n" not in raw
        parsed = json.loads(raw)
        assert parsed["ok"] is True
        assert parsed["data"]["id"] == "pwr.v"


class TestFormatJsonError:
    """Tests for :func:`format_json_error`."""

    def test_basic_error(self) -> None:
        parsed = json.loads(
            format_json_error(code="timeout", message="No reply", command="history")
        )
        assert parsed["ok"] is False
        assert parsed["command"] == "history"
        assert parsed["error"] == {"code": "timeout", "message": "No reply"}

    def test_extra_fields(self) -> None:
        parsed = json.loads(
            format_json_error(code="x", message="m", command="c", url="ws://edison:8081")
        )
        assert parsed["error"]["url"] == "ws://edison:8081"
