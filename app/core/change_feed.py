"""Row-change feed for page maintenance records"""
import asyncio
import itertools
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from app.schemas import ChangeEvent

logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]


class ChangeFeed:
    """In-process publish/subscribe of page_maintenance row changes.

    Listeners are always invoked on the event loop they subscribed from, so
    publishing from a threadpool route handler is safe.
    """

    def __init__(self):
        self._listeners: Dict[int, Tuple[asyncio.AbstractEventLoop, Listener, Optional[str]]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, callback: Listener, page_path: Optional[str] = None) -> int:
        """Register a listener; page_path=None receives every change"""
        loop = asyncio.get_running_loop()
        with self._lock:
            listener_id = next(self._ids)
            self._listeners[listener_id] = (loop, callback, page_path)
        return listener_id

    def unsubscribe(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [
                (listener_id, loop, callback)
                for listener_id, (loop, callback, page_path) in self._listeners.items()
                if page_path is None or page_path == event.page_path
            ]

        for listener_id, loop, callback in targets:
            try:
                loop.call_soon_threadsafe(self._deliver, listener_id, callback, event)
            except RuntimeError:
                #subscriber loop is closed
                self.unsubscribe(listener_id)

    def _deliver(self, listener_id: int, callback: Listener, event: ChangeEvent) -> None:
        #listener may have unsubscribed between publish and delivery
        with self._lock:
            if listener_id not in self._listeners:
                return
        try:
            callback(event)
        except Exception as e:
            logger.error(f"Change listener {listener_id} failed for {event.page_path}: {e}")

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)


#global instance
change_feed = ChangeFeed()
