from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from rich.console import Console

from edisontel.output.json_output import (
    format_json_error,
    format_json_line,
    format_json_response,
)
from edisontel.output.rich_output import RichOutput

if TYPE_CHECKING:
    from edisontel.bundle import Bundle
    from edisontel.feed.series import TelemetrySeries
    from edisontel.models.telemetry import Dictionary

OUTPUT_FORMATS = ("rich", "json", "quiet")


class OutputFormatter:
    """Writes command results as Rich terminal output or JSON envelopes.

    Without *force_format* the format follows *stream*: a TTY gets
    ``"rich"``, anything else ``"json"``.  In ``"quiet"`` mode results are
    dropped and only errors are printed, to stderr.
    """

    def __init__(self, *, stream: Any | None = None, force_format: str | None = None) -> None:
        stream = stream or sys.stdout
        if force_format is None:
            force_format = "rich" if getattr(stream, "isatty", lambda: False)() else "json"
        self._format = force_format
        self._rich = RichOutput(Console(stderr=force_format == "quiet"))

    @property
    def format(self) -> str:  # noqa: A003
        return self._format

    def _json(self, text: str, *, flush: bool = False) -> None:
        print(text, flush=flush)  # noqa: T201

    def dictionary(self, dictionary: Dictionary) -> None:
        if self._format == "json":
            self._json(format_json_response(data=dictionary, command="dictionary"))
        elif self._format == "rich":
            self._rich.dictionary(dictionary)

    def history(self, measurement_id: str, series: TelemetrySeries) -> None:
        if self._format == "json":
            payload = {"id": measurement_id, "points": series}
            self._json(format_json_response(data=payload, command="history"))
        elif self._format == "rich":
            self._rich.series(measurement_id, series)

    def point(self, measurement_id: str, timestamp: Any, value: Any) -> None:
        """Emit one live point; JSON mode writes one flushed line per point."""
        if self._format == "json":
            payload = {"id": measurement_id, "timestamp": timestamp, "value": value}
            self._json(format_json_line(data=payload, command="watch"), flush=True)
        elif self._format == "rich":
            self._rich.live_point(measurement_id, timestamp, value)

    def bundle(self, bundle: Bundle) -> None:
        if self._format == "json":
            self._json(format_json_response(data=bundle, command="bundle"))
        elif self._format == "rich":
            self._rich.definition(bundle.to_definition())

    def notice(self, message: str) -> None:
        """Print a status line for humans; silent outside Rich mode."""
        if self._format == "rich":
            self._rich.info(message)

    def error(self, *, code: str, message: str, command: str, hint: str = "") -> None:
        if self._format == "json":
            text = f"{message} {hint}".strip()
            self._json(format_json_error(code=code, message=text, command=command))
            return
        self._rich.error(message)
        if hint:
            self._rich.info(f"[dim]{hint}[/dim]")
