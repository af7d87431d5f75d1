"""CLI entry-point: Click command group and dispatch."""

from __future__ import annotations

import dataclasses
import sys

import click
from pydantic import ValidationError

from edisontel._internal.logs import configure_logging
from edisontel.errors import ConfigError, FeedConnectionError, FeedTimeoutError
from edisontel.models.config import FeedSettings
from edisontel.output.formatter import OUTPUT_FORMATS, OutputFormatter

# ---------------------------------------------------------------------------
# Application context (stored in ctx.obj)
# ---------------------------------------------------------------------------


@dataclasses.dataclass
class AppContext:
    """Shared state passed to every Click command via ``@click.pass_obj``."""

    url: str | None
    timeout: float | None
    output_format: str | None
    quiet: bool
    verbose: bool
    command: str | None = None
    _formatter: OutputFormatter | None = dataclasses.field(default=None, repr=False)

    @property
    def settings(self) -> FeedSettings:
        """Environment settings with command-line overrides applied."""
        try:
            return FeedSettings().merge_overrides(ws_url=self.url, request_timeout=self.timeout)
        except ValidationError as exc:
            raise ConfigError(f"Invalid EDISON_* settings: {exc}") from exc

    @property
    def formatter(self) -> OutputFormatter:
        if self._formatter is None:
            force = "quiet" if self.quiet else (self.output_format or self.settings.output_format)
            self._formatter = OutputFormatter(force_format=force)
        return self._formatter

    def reset_formatter(self) -> None:
        self._formatter = None


# ---------------------------------------------------------------------------
# Root Click group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--url",
    default=None,
    help="Telemetry server WebSocket URL (env: EDISON_WS_URL, default: ws://localhost:8081)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for a server reply (default: 10)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: auto-detect)",
)
@click.option("--quiet", is_flag=True, default=False, help="Suppress normal output")
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    url: str | None,
    timeout: float | None,
    output_format: str | None,
    quiet: bool,
    verbose: bool,
) -> None:
    """Inspect and stream Intel Edison telemetry from a WebSocket server."""
    configure_logging(verbose)
    ctx.obj = AppContext(
        url=url,
        timeout=timeout,
        output_format=output_format,
        quiet=quiet,
        verbose=verbose,
    )


# ---------------------------------------------------------------------------
# Register subcommands
# ---------------------------------------------------------------------------


def _register_commands() -> None:
    """Import and attach all subcommands to the root CLI."""
    from edisontel.cli.bundle import bundle_cmd
    from edisontel.cli.feed import dictionary_cmd, history_cmd, watch_cmd

    cli.add_command(bundle_cmd)
    cli.add_command(dictionary_cmd)
    cli.add_command(history_cmd)
    cli.add_command(watch_cmd)


_register_commands()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the appropriate command handler."""
    args = list(argv) if argv is not None else sys.argv[1:]
    ctx: click.Context | None = None
    try:
        ctx = cli.make_context("edisontel", args)
        with ctx:
            cli.invoke(ctx)
    except click.exceptions.Exit as exc:
        raise SystemExit(exc.exit_code) from None
    except click.exceptions.Abort:
        raise SystemExit(1) from None
    except click.ClickException as exc:
        exc.show()
        raise SystemExit(exc.exit_code) from None
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except SystemExit:
        raise
    except Exception as exc:
        app_ctx = ctx.obj if ctx is not None and isinstance(ctx.obj, AppContext) else None
        cmd_name = (app_ctx.command if app_ctx else None) or "unknown"
        _report_error(exc, _error_formatter(app_ctx), cmd_name)
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# Helpers for error handling
# ---------------------------------------------------------------------------

# Exception type -> (error code, hint shown under the message)
_KNOWN_ERRORS: tuple[tuple[type[Exception], str, str], ...] = (
    (
        FeedConnectionError,
        "connection_failed",
        "Check that the telemetry server is running and --url is correct.",
    ),
    (
        FeedTimeoutError,
        "timeout",
        "The server may not implement this request; try a larger --timeout.",
    ),
    (ConfigError, "config_error", ""),
)


def _error_formatter(app_ctx: AppContext | None) -> OutputFormatter:
    """Return a formatter for reporting, even when the settings are invalid."""
    if app_ctx is None:
        return OutputFormatter()
    try:
        return app_ctx.formatter
    except ConfigError:
        force = "quiet" if app_ctx.quiet else app_ctx.output_format
        return OutputFormatter(force_format=force)


def _report_error(exc: Exception, formatter: OutputFormatter, cmd_name: str) -> None:
    for exc_type, code, hint in _KNOWN_ERRORS:
        if isinstance(exc, exc_type):
            formatter.error(code=code, message=str(exc), command=cmd_name, hint=hint)
            return
    formatter.error(code=type(exc).__name__, message=str(exc), command=cmd_name)
