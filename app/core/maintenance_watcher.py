"""
Keeps one page's maintenance status fresh for as long as the page is mounted.

A watcher holds at most one change subscription and one polling task, both
scoped to the current page key. Resolutions are tagged with a generation
token so a slow response for a previous page, or an older request for the
same page, can never overwrite a newer result.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Set, Tuple

from app.core.change_channels import ChangeChannel, Subscription
from app.core.config import settings
from app.core.maintenance_resolver import DEFAULT_STATUS, MaintenanceResolver
from app.core.pages import page_key
from app.schemas import MaintenanceStatus

logger = logging.getLogger(__name__)


class MaintenanceWatcher:
    def __init__(
        self,
        resolver: MaintenanceResolver,
        channel: Optional[ChangeChannel] = None,
        *,
        poll_interval: Optional[float] = None,
    ):
        self._resolver = resolver
        self._channel = channel
        self.poll_interval = settings.MAINTENANCE_POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval

        self._key: Optional[str] = None
        self._status: MaintenanceStatus = DEFAULT_STATUS
        self._error: Optional[str] = None
        self._resolved = False

        self._path_generation = 0
        self._request_seq = 0
        self._applied_seq = 0

        self._subscription: Optional[Subscription] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._applied = asyncio.Event()

    # -- read surface --

    @property
    def page_key(self) -> Optional[str]:
        return self._key

    @property
    def status(self) -> MaintenanceStatus:
        return self._status

    @property
    def is_maintenance_mode(self) -> bool:
        return self._status.is_maintenance

    @property
    def maintenance_message(self) -> Optional[str]:
        return self._status.maintenance_message

    @property
    def is_loading(self) -> bool:
        return self._key is not None and not self._resolved

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_mounted(self) -> bool:
        return self._key is not None

    def snapshot(self) -> dict:
        return {
            "is_maintenance_mode": self.is_maintenance_mode,
            "maintenance_message": self.maintenance_message,
            "is_loading": self.is_loading,
            "error": self.error,
        }

    # -- lifecycle --

    async def mount(self, path: str) -> None:
        """start watching `path` and wait for its first resolution"""
        if self._key is not None:
            await self._teardown()

        self._key = page_key(path)
        self._path_generation += 1
        self._status = DEFAULT_STATUS
        self._error = None
        self._resolved = False
        self._applied.clear()

        if self._channel is not None:
            self._subscription = self._channel.subscribe(self._key, self._on_change)
        self._poll_task = asyncio.create_task(self._poll())

        await self._run_resolution()

    async def navigate(self, path: str) -> None:
        """follow a router path change; same page key is a no-op"""
        if self._key == page_key(path):
            return
        await self.mount(path)

    async def refresh_status(self) -> None:
        """re-resolve immediately, outside the normal triggers"""
        if self._key is None:
            return
        await self._run_resolution()

    async def unmount(self) -> None:
        await self._teardown()

    @asynccontextmanager
    async def mounted(self, path: str):
        await self.mount(path)
        try:
            yield self
        finally:
            await self.unmount()

    # -- internals --

    def _on_change(self, event: dict) -> None:
        #payload is only a hint; always re-read the canonical status
        if self._key is None:
            return
        logger.debug(f"Change notification for '{self._key}': {event.get('type')}")
        self._spawn_resolution()

    async def _poll(self) -> None:
        #the interval restarts after every applied resolution, whatever triggered it
        while True:
            try:
                await asyncio.wait_for(self._applied.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                self._spawn_resolution()
                continue
            self._applied.clear()

    def _spawn_resolution(self) -> Optional[asyncio.Task]:
        if self._key is None:
            return None
        self._request_seq += 1
        token = (self._path_generation, self._request_seq)
        task = asyncio.create_task(self._resolve(self._key, token))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_resolution(self) -> None:
        task = self._spawn_resolution()
        if task is None:
            return
        #wait without inheriting the task's cancellation on teardown
        await asyncio.wait({task})

    async def _resolve(self, key: str, token: Tuple[int, int]) -> None:
        status, error = await self._resolver.check(key)

        generation, seq = token
        if generation != self._path_generation or seq <= self._applied_seq:
            logger.debug(f"Discarding superseded maintenance status for '{key}'")
            return

        self._applied_seq = seq
        self._status = status
        self._error = error
        self._resolved = True
        self._applied.set()

    async def _teardown(self) -> None:
        #no new resolution may start once teardown begins
        self._key = None
        self._path_generation += 1

        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.close()

        tasks = list(self._inflight)
        if self._poll_task is not None:
            tasks.append(self._poll_task)
            self._poll_task = None

        while tasks:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            tasks = list(self._inflight)
