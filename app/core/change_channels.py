"""Client-side subscriptions to page maintenance change notifications"""
import asyncio
import json
import logging
from typing import Callable, Optional

import httpx

from app.core.change_feed import ChangeFeed
from app.core.config import settings
from app.core.pages import page_key

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[dict], None]


class Subscription:
    """Handle for one active subscription; close() is idempotent"""

    def __init__(self, page_path: str):
        self.page_path = page_path
        self.closed = False

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self._teardown()

    async def _teardown(self) -> None:
        pass


class ChangeChannel:
    def subscribe(self, page_path: str, callback: ChangeCallback) -> Subscription:
        raise NotImplementedError


class _FeedSubscription(Subscription):
    def __init__(self, page_path: str, feed: ChangeFeed, listener_id: int):
        super().__init__(page_path)
        self._feed = feed
        self._listener_id = listener_id

    async def _teardown(self) -> None:
        self._feed.unsubscribe(self._listener_id)


class FeedChangeChannel(ChangeChannel):
    """Subscribes directly to an in-process ChangeFeed"""

    def __init__(self, feed: ChangeFeed):
        self._feed = feed

    def subscribe(self, page_path: str, callback: ChangeCallback) -> Subscription:
        key = page_key(page_path)
        listener_id = self._feed.subscribe(
            lambda event: callback(event.model_dump(mode="json")),
            page_path=key,
        )
        return _FeedSubscription(key, self._feed, listener_id)


class _StreamSubscription(Subscription):
    def __init__(self, page_path: str, task: asyncio.Task):
        super().__init__(page_path)
        self._task = task

    async def _teardown(self) -> None:
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class SSEChangeChannel(ChangeChannel):
    """Follows the realtime server-sent events stream for one page.

    A dropped stream is reopened after ``reconnect_delay`` seconds; callers
    keep their own polling as the fallback.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        api_prefix: str = settings.API_V1_STR,
        http_client: Optional[httpx.AsyncClient] = None,
        reconnect_delay: Optional[float] = None,
    ):
        self._api_prefix = api_prefix.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(10.0, read=None),
        )
        self._owns_client = http_client is None
        self.reconnect_delay = settings.REALTIME_RECONNECT_SECONDS if reconnect_delay is None else reconnect_delay

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    def subscribe(self, page_path: str, callback: ChangeCallback) -> Subscription:
        key = page_key(page_path)
        task = asyncio.create_task(self._follow(key, callback))
        return _StreamSubscription(key, task)

    async def _follow(self, key: str, callback: ChangeCallback) -> None:
        url = f"{self._api_prefix}/realtime/page-maintenance"
        while True:
            try:
                async with self._client.stream("GET", url, params={"page_path": key}) as response:
                    response.raise_for_status()
                    async for line in response.aiter_lines():
                        event = parse_data_line(line)
                        if event is not None:
                            callback(event)
                logger.info(f"Change stream for '{key}' ended, reconnecting")
            except httpx.HTTPError as e:
                logger.warning(f"Change stream for '{key}' failed: {e}")
            await asyncio.sleep(self.reconnect_delay)


def parse_data_line(line: str) -> Optional[dict]:
    """decode one `data:` line of an event stream, ignoring everything else"""
    if not line.startswith("data:"):
        return None
    payload = line[len("data:"):].strip()
    if not payload:
        return None
    try:
        event = json.loads(payload)
    except ValueError:
        logger.warning(f"Ignoring undecodable change event: {payload[:100]}")
        return None
    return event if isinstance(event, dict) else None
