"""Per-request progress channel between the orchestrator and the transport."""

from __future__ import annotations

import asyncio
import logging

from gapzero.models.events import ProgressEvent

logger = logging.getLogger(__name__)

_CLOSED = object()


class ProgressChannel:
    """Single-producer, single-consumer event stream.

    The producer awaits ``send`` and calls ``close`` exactly once when done;
    the consumer iterates with ``async for``. Once the consumer calls
    ``disconnect`` further sends are dropped silently.
    """

    def __init__(self):
        # Unbounded: a run emits a handful of events, and close() must never block
        self._queue: asyncio.Queue = asyncio.Queue()
        self._last_progress = 0
        self._closed = False
        self._disconnected = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def disconnected(self) -> bool:
        return self._disconnected

    async def send(self, event: ProgressEvent) -> None:
        if self._closed:
            raise RuntimeError("send() on a closed ProgressChannel")
        if self._disconnected:
            return
        if event.progress is not None:
            if event.progress < self._last_progress:
                logger.warning(
                    "Progress regressed from %d to %d at step %s, clamping",
                    self._last_progress,
                    event.progress,
                    event.step,
                )
                event = event.model_copy(update={"progress": self._last_progress})
            self._last_progress = event.progress
        self._queue.put_nowait(event)
        await asyncio.sleep(0)

    def close(self) -> None:
        """Mark the end of the stream. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        if not self._disconnected:
            self._queue.put_nowait(_CLOSED)

    def disconnect(self) -> None:
        """The consumer went away; drop queued and future events."""
        self._disconnected = True
        while not self._queue.empty():
            self._queue.get_nowait()

    def __aiter__(self):
        return self

    async def __anext__(self) -> ProgressEvent:
        if self._disconnected:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item
