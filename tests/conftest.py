"""Shared fixtures: an in-memory WebSocket and a sample dictionary."""

from __future__ import annotations

import asyncio
import copy
import json
from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

SAMPLE_DICTIONARY: dict[str, Any] = {
    "identifier": "edison",
    "name": "Intel Edison",
    "subsystems": [
        {
            "identifier": "pwr",
            "name": "Power",
            "measurements": [
                {"identifier": "pwr.v", "name": "Voltage", "type": "float", "units": "V"},
                {"identifier": "pwr.c", "name": "Current", "type": "integer", "units": "mA"},
            ],
        },
        {
            "identifier": "sys",
            "name": "System",
            "measurements": [
                {"identifier": "sys.mode", "name": "Mode", "type": "string"},
                {"identifier": "sys.flags", "name": "Flags", "type": "enum"},
            ],
        },
    ],
}


class FakeSocket:
    """Stand-in for a ``websockets`` client connection.

    Frames pushed with :meth:`push` are yielded by ``async for`` in order;
    :meth:`finish` ends the stream cleanly and :meth:`fail` raises from it.
    Setting :attr:`send_error` makes every later ``send`` raise it.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.send_error: BaseException | None = None
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    def push(self, frame: Any) -> None:
        if not isinstance(frame, (str, bytes)):
            frame = json.dumps(frame)
        self._inbox.put_nowait(frame)

    def finish(self) -> None:
        self._inbox.put_nowait(None)

    def fail(self, exc: BaseException) -> None:
        self._inbox.put_nowait(exc)

    async def send(self, message: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        if self.closed:
            raise ConnectionError("socket closed")
        self.sent.append(message)

    async def close(self) -> None:
        self.closed = True

    def __aiter__(self) -> FakeSocket:
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if item is None:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture()
def sample_dictionary() -> dict[str, Any]:
    return copy.deepcopy(SAMPLE_DICTIONARY)


@pytest.fixture()
def fake_ws() -> FakeSocket:
    return FakeSocket()


@pytest.fixture()
def mock_connect(fake_ws: FakeSocket) -> Iterator[AsyncMock]:
    """Patch the websockets client so adapters connect to *fake_ws*."""
    with patch("websockets.asyncio.client.connect", new_callable=AsyncMock) as connect:
        connect.return_value = fake_ws
        yield connect
