# kriedko/modules/feedback/services/stream_service.py

"""
Live dashboard stream: pushes aggregate snapshots over Server-Sent Events
whenever the submission store version changes.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from kriedko.core.config import Settings
from kriedko.modules.feedback.services.aggregation_service import compute_aggregates
from kriedko.modules.feedback.storage.base import SubmissionStore

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class StreamState(str, Enum):
    """Lifecycle of one stream connection"""
    CONNECTED = "connected"
    POLLING = "polling"
    CLOSING = "closing"
    TERMINATED = "terminated"


class StreamEvent(str, Enum):
    AGGREGATE = "aggregate"
    PING = "ping"
    TICK = "tick"


@dataclass
class StreamConfig:
    poll_interval: float = 1.0
    keepalive_interval: float = 25.0
    max_lifetime: float = 55.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "StreamConfig":
        return cls(
            poll_interval=settings.stream_poll_interval_seconds,
            keepalive_interval=settings.stream_keepalive_seconds,
            max_lifetime=settings.stream_max_lifetime_seconds,
        )


def format_sse(event: StreamEvent, data: Any) -> str:
    return f"event: {event.value}\ndata: {json.dumps(data, separators=(',', ':'))}\n\n"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


async def _never_disconnected() -> bool:
    return False


class AggregateStream:
    """
    One subscriber connection.

    CONNECTED sends a snapshot and a ping, POLLING checks the store version
    every poll interval and pushes a new snapshot when it moved, CLOSING is
    entered on client disconnect or when the lifetime cap is hit. Store
    calls run in worker threads so many idle connections cost nothing on
    the event loop.
    """

    def __init__(
        self,
        store: SubmissionStore,
        config: Optional[StreamConfig] = None,
        is_disconnected: Callable[[], Awaitable[bool]] = _never_disconnected,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.store = store
        self.config = config or StreamConfig()
        self.is_disconnected = is_disconnected
        self.clock = clock
        self.sleep = sleep
        self.state = StreamState.CONNECTED
        self.observed_version: Optional[str] = None
        self.snapshots_sent = 0

    async def _snapshot(self) -> str:
        records = await asyncio.to_thread(self.store.load)
        self.snapshots_sent += 1
        return format_sse(StreamEvent.AGGREGATE, compute_aggregates(records).to_payload())

    async def _version(self) -> str:
        return await asyncio.to_thread(self.store.current_version)

    async def events(self) -> AsyncIterator[str]:
        started = self.clock()
        self.state = StreamState.CONNECTED
        try:
            if await self.is_disconnected():
                return

            try:
                # Version first: a write landing during the load is picked up next poll
                version = await self._version()
                snapshot = await self._snapshot()
                self.observed_version = version
                yield snapshot
            except Exception as e:
                logger.error(f"Initial aggregate snapshot failed: {e}")

            yield format_sse(StreamEvent.PING, {"t": _epoch_millis()})
            last_ping = self.clock()

            self.state = StreamState.POLLING
            while True:
                await self.sleep(self.config.poll_interval)

                if self.clock() - started >= self.config.max_lifetime:
                    logger.debug("Stream reached its lifetime cap, closing")
                    break
                if await self.is_disconnected():
                    logger.debug("Stream client disconnected")
                    break

                try:
                    version = await self._version()
                    if version != self.observed_version:
                        if await self.is_disconnected():
                            break
                        snapshot = await self._snapshot()
                        self.observed_version = version
                        yield snapshot
                        yield format_sse(StreamEvent.TICK, {"t": _epoch_millis()})
                except Exception as e:
                    logger.warning(f"Stream poll failed, will retry: {e}")

                if self.clock() - last_ping >= self.config.keepalive_interval:
                    yield format_sse(StreamEvent.PING, {"t": _epoch_millis()})
                    last_ping = self.clock()

            self.state = StreamState.CLOSING
        finally:
            self.state = StreamState.TERMINATED
