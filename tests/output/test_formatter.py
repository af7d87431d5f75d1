from __future__ import annotations

import io
import json

import pytest

from edisontel.bundle import build_bundle
from edisontel.feed.series import TelemetrySeries
from edisontel.models.telemetry import Dictionary
from edisontel.output.formatter import OutputFormatter


class TestFormatSelection:
    def test_non_tty_defaults_to_json(self) -> None:
        assert OutputFormatter(stream=io.StringIO()).format == "json"

    def test_tty_defaults_to_rich(self) -> None:
        class Tty(io.StringIO):
            def isatty(self) -> bool:
                return True

        assert OutputFormatter(stream=Tty()).format == "rich"

    def test_force_format(self) -> None:
        assert OutputFormatter(force_format="rich").format == "rich"
        assert OutputFormatter(force_format="quiet").format == "quiet"


class TestJsonMode:
    def test_dictionary(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputFormatter(force_format="json").dictionary(Dictionary(name="Intel Edison"))
        parsed = json.loads(capsys.readouterr().out)
        assert parsed["command"] == "dictionary"
        assert parsed["data"]["name"] == "Intel Edison"

    def test_history(self, capsys: pytest.CaptureFixture[str]) -> None:
        series = TelemetrySeries([{"timestamp": 1, "value": 3.3}])
        OutputFormatter(force_format="json").history("pwr.v", series)
        parsed = json.loads(capsys.readouterr().out)
        assert parsed["command"] == "history"
        assert parsed["data"] == {"id": "pwr.v", "points": [{"timestamp": 1, "value": 3.3}]}

    def test_points_are_one_line_each(self, capsys: pytest.CaptureFixture[str]) -> None:
        formatter = OutputFormatter(force_format="json")
        formatter.point("pwr.v", 1, 3.3)
        formatter.point("pwr.v", 2, 3.4)
        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line)["data"]["value"] for line in lines] == [3.3, 3.4]
        assert all(json.loads(line)["command"] == "watch" for line in lines)

    def test_notice_is_silent(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputFormatter(force_format="json").notice("Watching pwr.v")
        assert capsys.readouterr().out == ""

    def test_error_includes_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputFormatter(force_format="json").error(
            code="timeout", message="late", command="history", hint="try again"
        )
        parsed = json.loads(capsys.readouterr().out)
        assert parsed["ok"] is False
        assert parsed["error"] == {"code": "timeout", "message": "late try again"}


class TestRichMode:
    def test_bundle_printed_as_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputFormatter(force_format="rich").bundle(build_bundle())
        out = capsys.readouterr().out
        assert "Edison_WS_URL" in out
        assert '"ok"' not in out

    def test_error_and_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputFormatter(force_format="rich").error(
            code="timeout", message="late", command="history", hint="try again"
        )
        out = capsys.readouterr().out
        assert "Error:" in out
        assert "try again" in out


class TestQuietMode:
    def test_results_suppressed(self, capsys: pytest.CaptureFixture[str]) -> None:
        formatter = OutputFormatter(force_format="quiet")
        formatter.dictionary(Dictionary(name="Intel Edison"))
        formatter.history("pwr.v", TelemetrySeries([{"timestamp": 1, "value": 3.3}]))
        formatter.point("pwr.v", 1, 3.3)
        assert capsys.readouterr().out == ""

    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputFormatter(force_format="quiet").error(code="x", message="boom", command="c")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "boom" in captured.err
