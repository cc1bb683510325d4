"""Change Feed Stream — SSE push of committed mutations, the alternative to polling GET /state.

Invariants:
    - First event is always {"type": "ready"} carrying pollIntervalSeconds
    - Idle streams receive an SSE comment every KEEPALIVE_SECONDS
    - Subscriber is removed from the feed when the client disconnects

Design Decisions:
    - Events name the changed topic only; clients re-read GET /state rather
      than patching local copies
"""

import asyncio
import json
import logging
from typing import AsyncIterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from spinround.config import get_settings
from spinround.infrastructure.change_feed import ChangeFeed, change_feed

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/events", tags=["events"])

KEEPALIVE_SECONDS = 15.0

# SSE headers prevent proxy/browser buffering of streamed events
_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


async def stream_changes(
    feed: ChangeFeed, keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Yield SSE lines for every event published on the feed."""
    async with feed.subscribe() as queue:
        yield _sse_line({
            "type": "ready",
            "data": {"pollIntervalSeconds": get_settings().poll_interval_seconds},
        })
        while True:
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield _sse_line(event)


@router.get("")
async def subscribe():
    """Open the change feed stream."""

    async def event_generator():
        try:
            async for line in stream_changes(change_feed):
                yield line
        except asyncio.CancelledError:
            logger.info("Client disconnected from change feed")
            return

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )


def _sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
