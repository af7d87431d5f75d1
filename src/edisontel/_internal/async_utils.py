"""Asyncio utilities."""

from __future__ import annotations

import asyncio
from typing import Any

from edisontel.errors import FeedTimeoutError


async def wait_reply(future: asyncio.Future[Any], timeout: float, *, request: str) -> Any:
    """Wait up to *timeout* seconds for a shared reply future.

    The future is shielded so giving up does not cancel it for other
    waiters.  Raises :class:`FeedTimeoutError` on expiry.
    """
    try:
        return await asyncio.wait_for(asyncio.shield(future), timeout=timeout)
    except TimeoutError:
        raise FeedTimeoutError(
            f"No reply to '{request}' within {timeout:g}s", request=request
        ) from None
