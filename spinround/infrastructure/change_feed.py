"""Change Feed — in-process fan-out of committed entity mutations to SSE subscribers.

Invariants:
    - publish() never blocks: a full subscriber queue drops the event and logs
    - Events carry the topic and action only; clients re-read GET /state
    - Subscribers unregister when their stream ends (finally block)

Design Decisions:
    - Module-level singleton: single-process uvicorn; multi-worker deployments
      fall back to polling GET /state every poll_interval_seconds
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from spinround.core.domain_types import ChangeKind

logger = logging.getLogger(__name__)

SUBSCRIBER_QUEUE_SIZE = 100


class ChangeFeed:
    """Fan-out broker: one bounded queue per subscriber."""

    def __init__(self, queue_size: int = SUBSCRIBER_QUEUE_SIZE):
        self._queue_size = queue_size
        self._subscribers: set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(
        self, kind: ChangeKind, action: str, **data: object,
    ) -> None:
        event = {
            "type": "change",
            "data": {
                "topic": kind.value,
                "action": action,
                "at": datetime.now(timezone.utc).isoformat(),
                **data,
            },
        }
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(
                    "Change feed subscriber lagging, dropped %s/%s",
                    kind.value, action,
                )

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        logger.info("Change feed subscriber joined (%d)", len(self._subscribers))
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)
            logger.info("Change feed subscriber left (%d)", len(self._subscribers))


change_feed = ChangeFeed()
