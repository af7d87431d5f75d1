"""Telemetry provider: history requests and live subscriptions for the host.

Results are packaged the way the host expects, keyed first by telemetry
source and then by measurement key::

    {"Edison.source": {"pwr.v": TelemetrySeries(...)}}
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from edisontel.feed.series import TelemetrySeries
from edisontel.models.domain import TelemetryRequest
from edisontel.providers.model import SOURCE

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from edisontel.feed.adapter import TelemetryFeedAdapter

logger = logging.getLogger(__name__)

Packaged = dict[str, dict[str, TelemetrySeries]]


def _relevant_keys(requests: Iterable[TelemetryRequest | Mapping[str, Any]]) -> list[str]:
    keys: list[str] = []
    for raw in requests:
        request = (
            raw if isinstance(raw, TelemetryRequest) else TelemetryRequest.model_validate(raw)
        )
        if request.source == SOURCE:
            keys.append(request.key)
    return keys


class TelemetryProvider:
    """Routes host telemetry requests to a :class:`TelemetryFeedAdapter`.

    The server is told to ``subscribe`` to an id when the first callback for
    it registers and to ``unsubscribe`` when the last one leaves.
    """

    def __init__(self, adapter: TelemetryFeedAdapter) -> None:
        self._adapter = adapter
        self._subscribers: dict[str, list[Callable[[Packaged], Any]]] = {}
        adapter.on_data(self._on_data)

    @property
    def subscribed_keys(self) -> list[str]:
        return list(self._subscribers)

    async def request_telemetry(
        self, requests: Iterable[TelemetryRequest | Mapping[str, Any]]
    ) -> Packaged:
        """Fetch history for every request addressed to this source."""
        keys = _relevant_keys(requests)
        frames = await asyncio.gather(
            *(asyncio.shield(self._adapter.get_history(key)) for key in keys)
        )
        series = {key: TelemetrySeries.from_frame(frame) for key, frame in zip(keys, frames)}
        return {SOURCE: series}

    def subscribe(
        self,
        callback: Callable[[Packaged], Any],
        requests: Iterable[TelemetryRequest | Mapping[str, Any]],
    ) -> Callable[[], None]:
        """Deliver live points for the requested keys to *callback*.

        Returns a function that removes the subscription; calling it more
        than once has no further effect.
        """
        # A key named twice still gets one callback registration
        keys = list(dict.fromkeys(_relevant_keys(requests)))
        for key in keys:
            callbacks = self._subscribers.setdefault(key, [])
            if not callbacks:
                self._adapter.subscribe(key)
            callbacks.append(callback)

        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            for key in keys:
                callbacks = self._subscribers.get(key)
                if callbacks is None:
                    continue
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    del self._subscribers[key]
                    self._adapter.unsubscribe(key)

        return unsubscribe

    async def _on_data(self, frame: dict[str, Any]) -> None:
        key = frame.get("id")
        if key is None:
            return
        callbacks = self._subscribers.get(str(key))
        if not callbacks:
            return

        packaged: Packaged = {SOURCE: {str(key): TelemetrySeries.from_frame(frame)}}
        for callback in list(callbacks):
            try:
                result = callback(packaged)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning("Subscriber %s failed for %s", callback, key, exc_info=True)
