import asyncio
import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Query, Request
from sse_starlette.sse import EventSourceResponse

from app.core.change_feed import ChangeFeed, change_feed
from app.core.config import settings
from app.core.pages import page_key
from app.schemas import ChangeEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])


async def page_maintenance_events(
    request: Request,
    feed: ChangeFeed,
    page_path: Optional[str] = None
) -> AsyncIterator[dict]:
    """yield SSE messages for page_maintenance changes until the client leaves"""
    queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
    listener_id = feed.subscribe(queue.put_nowait, page_path=page_path)
    logger.info(f"Realtime subscriber joined for '{page_path or '*'}'")
    try:
        while not await request.is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            yield {"event": "change", "data": event.model_dump_json()}
    finally:
        feed.unsubscribe(listener_id)
        logger.info(f"Realtime subscriber left for '{page_path or '*'}'")


@router.get("/page-maintenance")
async def stream_page_maintenance(
    request: Request,
    page_path: Optional[str] = Query(None, description="Logical page key to filter on; omit for every page"),
):
    key = page_key(page_path) if page_path is not None else None
    return EventSourceResponse(
        page_maintenance_events(request, change_feed, key),
        ping=settings.REALTIME_PING_SECONDS,
    )
