"""Helpers shared by commands that talk to the telemetry server."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

from edisontel._internal.async_utils import wait_reply
from edisontel.errors import ConfigError, FeedConnectionError
from edisontel.feed.adapter import TelemetryFeedAdapter

if TYPE_CHECKING:
    from edisontel.cli.main import AppContext

logger = logging.getLogger(__name__)


def open_adapter(app_ctx: AppContext) -> TelemetryFeedAdapter:
    """Create an adapter for the configured URL.  Call from inside the loop."""
    url = app_ctx.settings.ws_url
    if not url.startswith(("ws://", "wss://")):
        raise ConfigError(f"Telemetry server URL must start with ws:// or wss://, got {url!r}")
    logger.debug("Opening telemetry feed at %s", url)
    return TelemetryFeedAdapter(url)


async def until_closed(adapter: TelemetryFeedAdapter, pending: asyncio.Future[Any]) -> Any:
    """Await *pending*, failing fast if the connection ends first.

    Transport errors are wrapped in :class:`FeedConnectionError`.
    """
    closed = asyncio.ensure_future(adapter.wait_closed())
    try:
        done, _ = await asyncio.wait({closed, pending}, return_when=asyncio.FIRST_COMPLETED)
        if pending in done:
            return pending.result()

        exc = closed.exception()
        if exc is not None:
            raise FeedConnectionError(
                f"Connection to {adapter.url} failed: {exc}", url=adapter.url
            ) from exc
        raise FeedConnectionError(
            f"Connection to {adapter.url} closed before a reply arrived", url=adapter.url
        )
    finally:
        closed.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await closed


async def request_reply(
    adapter: TelemetryFeedAdapter,
    future: asyncio.Future[Any],
    timeout: float,
    *,
    request: str,
) -> Any:
    """Wait for a dictionary/history reply with a timeout and connection check."""
    pending = asyncio.ensure_future(wait_reply(future, timeout, request=request))
    try:
        return await until_closed(adapter, pending)
    finally:
        if not pending.done():
            pending.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pending
