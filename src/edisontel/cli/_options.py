"""Connection and output options accepted after the subcommand name.

``edisontel history pwr.v --url ws://edison:8081`` behaves like
``edisontel --url ws://edison:8081 history pwr.v``; values given after the
subcommand win.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

import click

from edisontel._internal.logs import configure_logging
from edisontel.output.formatter import OUTPUT_FORMATS

if TYPE_CHECKING:
    from edisontel.cli.main import AppContext

_LOCAL_OPTIONS = (
    click.option("--url", "local_url", default=None, help="Telemetry server WebSocket URL"),
    click.option(
        "--timeout",
        "local_timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Seconds to wait for a server reply",
    ),
    click.option(
        "--format",
        "local_output_format",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: auto-detect)",
    ),
    click.option("--quiet", "local_quiet", is_flag=True, help="Suppress normal output"),
    click.option("--verbose", "local_verbose", is_flag=True, help="Enable verbose logging"),
)


def _apply_overrides(
    app_ctx: AppContext,
    *,
    local_url: str | None,
    local_timeout: float | None,
    local_output_format: str | None,
    local_quiet: bool,
    local_verbose: bool,
) -> None:
    # Error reporting runs after Click has torn its context down
    app_ctx.command = click.get_current_context().info_name

    if local_url is not None:
        app_ctx.url = local_url
    if local_timeout is not None:
        app_ctx.timeout = local_timeout
    if local_output_format is not None or local_quiet:
        app_ctx.output_format = local_output_format or app_ctx.output_format
        app_ctx.quiet = app_ctx.quiet or local_quiet
        app_ctx.reset_formatter()
    if local_verbose and not app_ctx.verbose:
        app_ctx.verbose = True
        configure_logging(True)


def global_options(f: Any) -> Any:
    """Accept the root group's options on a leaf command as well."""

    @click.pass_obj
    @functools.wraps(f)
    def wrapper(app_ctx: AppContext, /, **kwargs: Any) -> Any:
        overrides = {name: kwargs.pop(name) for name in list(kwargs) if name.startswith("local_")}
        _apply_overrides(app_ctx, **overrides)
        return f(app_ctx, **kwargs)

    for option in reversed(_LOCAL_OPTIONS):
        wrapper = option(wrapper)
    return wrapper
