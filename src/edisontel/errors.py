"""Exception hierarchy for edisontel.

The feed adapter itself never raises these; transport failures surface as
the ``websockets`` library's own exceptions.  The CLI wraps them so it can
print friendly messages.
"""

from __future__ import annotations


class EdisonTelError(Exception):
    """Base class for all edisontel errors."""


class ConfigError(EdisonTelError):
    """Invalid or missing configuration."""


class FeedConnectionError(EdisonTelError):
    """The telemetry server could not be reached or dropped the connection."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class FeedTimeoutError(EdisonTelError):
    """The telemetry server did not answer a request in time."""

    def __init__(self, message: str, *, request: str | None = None) -> None:
        super().__init__(message)
        self.request = request
