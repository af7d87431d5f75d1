"""WebSocket client for the Edison telemetry server.

Commands sent to the server are plain text frames:

  - ``dictionary``          request the measurement dictionary
  - ``history <id>``        request the historical series for one measurement
  - ``subscribe <id>``      start live updates for one measurement
  - ``unsubscribe <id>``    stop live updates for one measurement

Frames received from the server are JSON objects with a ``type`` field:

  - Dictionary: ``{type: "dictionary", value: {...}}``
  - History:    ``{type: "history", id, value: [{timestamp, value}, ...]}``
  - Data:       ``{type: "data", id, value: {timestamp, value}}``

The dictionary is requested exactly once, as soon as the socket opens.
There is no reconnect: if the connection drops, outstanding futures are
never resolved and the transport error surfaces from :meth:`wait_closed`.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

logger = logging.getLogger(__name__)


class TelemetryFeedAdapter:
    """Owns one WebSocket connection to the telemetry server.

    Must be constructed inside a running event loop.  The connection is
    opened in a background task, so construction never blocks; commands
    issued before the socket is open are queued and sent, in order, right
    after the initial ``dictionary`` request.

    *future_factory* produces the single-resolution futures handed back by
    :meth:`get_dictionary` and :meth:`get_history`.  It defaults to the
    running loop's :meth:`~asyncio.AbstractEventLoop.create_future`.
    """

    def __init__(
        self,
        url: str,
        future_factory: Callable[[], asyncio.Future[Any]] | None = None,
    ) -> None:
        loop = asyncio.get_running_loop()
        self._url = url
        self._future_factory = future_factory or loop.create_future
        self._ws: Any = None
        self._connected = False
        self._send_count = 0
        self._recv_count = 0
        self._dictionary: asyncio.Future[Any] = self._future_factory()
        self._histories: dict[str, asyncio.Future[Any]] = {}
        self._listeners: list[Callable[[dict[str, Any]], Any]] = []
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._send_task: asyncio.Task[None] | None = None
        self._task: asyncio.Task[None] = loop.create_task(self._run())
        self._task.add_done_callback(self._on_connection_done)

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def send_count(self) -> int:
        return self._send_count

    @property
    def recv_count(self) -> int:
        return self._recv_count

    # -- Public operations ----------------------------------------------------

    def get_dictionary(self) -> asyncio.Future[Any]:
        """Return the future for the server's dictionary payload.

        Every call returns the same future, before and after it resolves.
        There is no timeout: if the server never sends a dictionary frame
        the future never resolves.
        """
        return self._dictionary

    def get_history(self, measurement_id: str) -> asyncio.Future[Any]:
        """Return a future for the history frame of *measurement_id*.

        While a request for the same id is outstanding the pending future is
        returned and no second ``history`` command goes on the wire.
        """
        key = str(measurement_id)
        pending = self._histories.get(key)
        if pending is not None and not pending.done():
            logger.debug("History request for %s already pending", key)
            return pending

        future = self._future_factory()
        self._histories[key] = future
        self._send(f"history {key}")
        return future

    def subscribe(self, measurement_id: str) -> None:
        """Ask the server to push live data for *measurement_id*."""
        self._send(f"subscribe {measurement_id}")

    def unsubscribe(self, measurement_id: str) -> None:
        """Ask the server to stop pushing live data for *measurement_id*."""
        self._send(f"unsubscribe {measurement_id}")

    def on_data(self, callback: Callable[[dict[str, Any]], Any]) -> None:
        """Register *callback* for every subsequent ``data`` frame.

        Listeners are called in registration order with the full frame and
        are never removed.  Filtering by id is up to the listener.  A
        callback may be a coroutine function; it is awaited before the next
        listener runs.
        """
        self._listeners.append(callback)

    # -- Lifecycle --------------------------------------------------------------

    async def wait_closed(self) -> None:
        """Wait for the connection to end.

        Re-raises the transport's exception if the connection failed and
        returns normally once :meth:`close` has stopped it.
        """
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def drain(self) -> None:
        """Wait until every queued command has been written to the socket.

        Never returns if the connection is lost with commands still queued;
        callers should bound it with a timeout.
        """
        await self._outbox.join()

    async def close(self) -> None:
        """Close the connection.  Outstanding futures stay unresolved."""
        self._connected = False
        if not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        if self._ws is not None:
            with contextlib.suppress(Exception):
                await self._ws.close()
            self._ws = None

    async def __aenter__(self) -> TelemetryFeedAdapter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -- Connection task --------------------------------------------------------

    async def _run(self) -> None:
        import websockets.asyncio.client as ws_client

        self._ws = await ws_client.connect(self._url)
        self._connected = True
        logger.info("Connected to telemetry server at %s", self._url)

        try:
            await self._write("dictionary")
            self._send_task = asyncio.create_task(self._drain_outbox())
            await self._receive_loop()
        finally:
            self._connected = False
            if self._send_task is not None:
                self._send_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._send_task
                self._send_task = None

    def _on_connection_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Connection to %s ended with error: %s", self._url, exc)
        else:
            logger.info("Connection to %s closed", self._url)

    # -- Outbound ---------------------------------------------------------------

    def _send(self, command: str) -> None:
        logger.debug("Queued command: %s", command)
        self._outbox.put_nowait(command)

    async def _write(self, command: str) -> None:
        await self._ws.send(command)
        self._send_count += 1
        logger.debug("Sent command: %s", command)

    async def _drain_outbox(self) -> None:
        """Send queued commands in the order they were issued."""
        try:
            while True:
                command = await self._outbox.get()
                await self._write(command)
                self._outbox.task_done()
        except Exception:
            logger.warning("Send failed, marking connection as closed", exc_info=True)
            self._connected = False

    # -- Inbound ----------------------------------------------------------------

    async def _receive_loop(self) -> None:
        async for raw in self._ws:
            await self._handle_frame(raw)

    async def _handle_frame(self, raw: str | bytes) -> None:
        """Demultiplex one inbound frame by its ``type`` field.

        Malformed frames are logged and dropped; unknown types are ignored.
        """
        try:
            msg = json.loads(raw)
        except (ValueError, TypeError):
            logger.warning("Received non-JSON frame, ignoring")
            return

        if not isinstance(msg, dict):
            logger.warning("Received %s frame instead of an object, ignoring", type(msg).__name__)
            return

        self._recv_count += 1
        msg_type = msg.get("type")
        if msg_type == "dictionary":
            self._resolve_dictionary(msg.get("value"))
        elif msg_type == "history":
            self._resolve_history(msg)
        elif msg_type == "data":
            await self._notify(msg)
        else:
            logger.debug("Ignoring frame of unknown type %r", msg_type)

    def _resolve_dictionary(self, value: Any) -> None:
        if self._dictionary.done():
            logger.debug("Dictionary already resolved, ignoring repeat frame")
            return
        self._dictionary.set_result(value)

    def _resolve_history(self, msg: dict[str, Any]) -> None:
        frame_id = msg.get("id")
        if not isinstance(frame_id, (str, int)):
            logger.warning("History frame without a usable id, ignoring")
            return

        future = self._histories.pop(str(frame_id), None)
        if future is None:
            logger.debug("No pending history request for %s, dropping frame", frame_id)
            return
        if not future.done():
            future.set_result(msg)

    async def _notify(self, msg: dict[str, Any]) -> None:
        """Deliver a data frame to every listener; one failing does not stop others."""
        for listener in list(self._listeners):
            try:
                result = listener(msg)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.warning("Data listener %s failed", listener, exc_info=True)
