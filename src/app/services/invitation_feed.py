"""
Live invitation feed for the creator dashboard.

Request handlers stay stateless: the feed polls the store and emits a full
snapshot whenever it differs from the last one sent.
"""

import asyncio
import json
import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional

from libs.result import Result

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[], Awaitable[Result[List]]]


async def watch_invitations(
    load: SnapshotLoader,
    poll_seconds: float,
    ping_seconds: float,
    max_events: Optional[int] = None,
) -> AsyncIterator[Dict[str, str]]:
    """
    Yield SSE events: "snapshot" on change, "ping" when idle, "error" once
    when loading fails (then stop).
    """
    last_payload = None
    idle = 0.0
    sent = 0

    while max_events is None or sent < max_events:
        result = await load()
        if result.is_err():
            logger.warning(f"Invitation feed stopped: {result.error.code}")
            yield {
                "event": "error",
                "data": json.dumps({"code": result.error.code, "message": result.error.message}),
            }
            return

        payload = json.dumps([item.model_dump(mode="json") for item in result.value])
        if payload != last_payload:
            last_payload = payload
            idle = 0.0
            sent += 1
            yield {"event": "snapshot", "data": payload}
        elif idle >= ping_seconds:
            idle = 0.0
            sent += 1
            yield {"event": "ping", "data": "{}"}

        await asyncio.sleep(poll_seconds)
        idle += poll_seconds
