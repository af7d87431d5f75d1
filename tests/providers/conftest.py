"""Stub adapter for provider tests."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

import pytest


class StubAdapter:
    """Records commands and serves canned replies without a socket."""

    def __init__(
        self,
        dictionary: Any = None,
        histories: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self._loop = asyncio.get_running_loop()
        self._dictionary: asyncio.Future[Any] = self._loop.create_future()
        if dictionary is not None:
            self._dictionary.set_result(dictionary)
        self._histories = histories or {}
        self.commands: list[str] = []
        self.listeners: list[Callable[[dict[str, Any]], Any]] = []
        self.dictionary_calls = 0

    def get_dictionary(self) -> asyncio.Future[Any]:
        self.dictionary_calls += 1
        return self._dictionary

    def get_history(self, key: str) -> asyncio.Future[Any]:
        self.commands.append(f"history {key}")
        future = self._loop.create_future()
        future.set_result(self._histories.get(key, {"type": "history", "id": key, "value": []}))
        return future

    def subscribe(self, key: str) -> None:
        self.commands.append(f"subscribe {key}")

    def unsubscribe(self, key: str) -> None:
        self.commands.append(f"unsubscribe {key}")

    def on_data(self, callback: Callable[[dict[str, Any]], Any]) -> None:
        self.listeners.append(callback)

    async def emit(self, frame: dict[str, Any]) -> None:
        for listener in self.listeners:
            result = listener(frame)
            if inspect.isawaitable(result):
                await result


@pytest.fixture()
def stub_adapter_factory() -> type[StubAdapter]:
    return StubAdapter
