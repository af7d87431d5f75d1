"""Commands that query or stream from the telemetry server."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

import click

from edisontel.cli._client import open_adapter, request_reply, until_closed
from edisontel.cli._options import global_options
from edisontel.feed.series import TelemetrySeries
from edisontel.models.domain import TelemetryRequest
from edisontel.models.telemetry import Dictionary
from edisontel.providers.model import SOURCE
from edisontel.providers.telemetry import TelemetryProvider

if TYPE_CHECKING:
    from edisontel.cli.main import AppContext

logger = logging.getLogger(__name__)

# How long to wait for queued unsubscribe commands before closing
_DRAIN_TIMEOUT = 2.0


@click.command("dictionary")
@global_options
def dictionary_cmd(app_ctx: AppContext) -> None:
    """Show the subsystems and measurements the board publishes."""
    asyncio.run(_cmd_dictionary(app_ctx))


async def _cmd_dictionary(app_ctx: AppContext) -> None:
    formatter = app_ctx.formatter
    timeout = app_ctx.settings.request_timeout

    async with open_adapter(app_ctx) as adapter:
        raw = await request_reply(adapter, adapter.get_dictionary(), timeout, request="dictionary")

    formatter.dictionary(Dictionary.model_validate(raw or {}))


@click.command("history")
@click.argument("measurement_id")
@global_options
def history_cmd(app_ctx: AppContext, measurement_id: str) -> None:
    """Show the historical series for MEASUREMENT_ID (e.g. pwr.v)."""
    asyncio.run(_cmd_history(app_ctx, measurement_id))


async def _cmd_history(app_ctx: AppContext, measurement_id: str) -> None:
    formatter = app_ctx.formatter
    timeout = app_ctx.settings.request_timeout

    async with open_adapter(app_ctx) as adapter:
        frame = await request_reply(
            adapter,
            adapter.get_history(measurement_id),
            timeout,
            request=f"history {measurement_id}",
        )

    formatter.history(measurement_id, TelemetrySeries.from_frame(frame))


@click.command("watch")
@click.argument("measurement_ids", nargs=-1, required=True, metavar="ID...")
@click.option(
    "--count",
    type=click.IntRange(min=0),
    default=0,
    help="Stop after this many points (0 = until interrupted)",
)
@global_options
def watch_cmd(app_ctx: AppContext, measurement_ids: tuple[str, ...], count: int) -> None:
    """Stream live points for one or more measurement ids.

    \b
    Examples:
      edisontel watch pwr.v
      edisontel watch pwr.v temp.board --count 10 --format json
    """
    asyncio.run(_cmd_watch(app_ctx, measurement_ids, count))


async def _cmd_watch(app_ctx: AppContext, measurement_ids: tuple[str, ...], count: int) -> None:
    formatter = app_ctx.formatter
    finished = asyncio.Event()
    received = 0

    def on_points(packaged: dict[str, dict[str, TelemetrySeries]]) -> None:
        nonlocal received
        for key, series in packaged.get(SOURCE, {}).items():
            for i in range(series.point_count):
                if count and received >= count:
                    break
                received += 1
                formatter.point(key, series.domain_value(i), series.range_value(i))
        if count and received >= count:
            finished.set()

    async with open_adapter(app_ctx) as adapter:
        provider = TelemetryProvider(adapter)
        requests = [TelemetryRequest(source=SOURCE, key=key) for key in measurement_ids]
        unsubscribe = provider.subscribe(on_points, requests)
        formatter.notice(
            f"Watching [cyan]{', '.join(measurement_ids)}[/cyan] on {adapter.url}"
            " [dim](Ctrl+C to stop)[/dim]"
        )

        waiter = asyncio.ensure_future(finished.wait())
        try:
            await until_closed(adapter, waiter)
        finally:
            waiter.cancel()
            unsubscribe()
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(adapter.drain(), timeout=_DRAIN_TIMEOUT)

    logger.debug("Watch finished after %d points", received)
