"""
Maintenance status resolver

Answers "is this page under maintenance, and with what message?" by asking
the maintenance read endpoint. Every failure resolves to the default status
so a broken or slow backend never blocks a page from rendering.
"""
import asyncio
import logging
from typing import Optional, Tuple
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.pages import page_key
from app.schemas import MaintenanceStatus

logger = logging.getLogger(__name__)

DEFAULT_STATUS = MaintenanceStatus(is_maintenance=False, maintenance_message=None)


class MaintenanceCheckError(Exception):
    """a maintenance check that could not produce a status"""


class MaintenanceTimeout(MaintenanceCheckError):
    pass


class MaintenanceTransportError(MaintenanceCheckError):
    pass


class MaintenanceHTTPError(MaintenanceCheckError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class MalformedMaintenanceResponse(MaintenanceCheckError):
    pass


class MaintenanceResolver:
    """Reads page maintenance status from the site API.

    Args:
        base_url: Origin of the API, e.g. ``https://cgsg.example``.
        timeout: Upper bound in seconds for one resolution attempt.
        api_prefix: Prefix the API routers are mounted under.
        http_client: Injected client; the resolver only closes clients it created.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: Optional[float] = None,
        api_prefix: str = settings.API_V1_STR,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = settings.MAINTENANCE_REQUEST_TIMEOUT_SECONDS if timeout is None else timeout
        self._api_prefix = api_prefix.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(self.timeout),
        )
        self._owns_client = http_client is None

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def status_url(self, path: str) -> str:
        return f"{self._api_prefix}/maintenance/{quote(page_key(path), safe='')}"

    async def fetch(self, path: str) -> MaintenanceStatus:
        """Fetch the status for ``path``.

        Raises:
            MaintenanceCheckError: One of its subclasses for timeouts, transport
                failures, non-2xx responses and malformed bodies.
        """
        url = self.status_url(path)
        try:
            response = await asyncio.wait_for(self._client.get(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise MaintenanceTimeout(f"Maintenance check timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise MaintenanceTransportError(f"Maintenance check failed: {e}") from e

        if not response.is_success:
            raise MaintenanceHTTPError(
                response.status_code,
                f"Maintenance check returned HTTP {response.status_code}",
            )

        try:
            return MaintenanceStatus.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MalformedMaintenanceResponse(f"Malformed maintenance response: {e}") from e

    async def check(self, path: str) -> Tuple[MaintenanceStatus, Optional[str]]:
        """Resolve ``path`` and report the failure, if any, next to the status"""
        key = page_key(path)
        try:
            return await self.fetch(path), None
        except MaintenanceTimeout as e:
            logger.warning(f"Maintenance check for '{key}' timed out, treating page as available: {e}")
            return DEFAULT_STATUS, str(e)
        except MaintenanceHTTPError as e:
            logger.error(f"Maintenance check for '{key}' got status {e.status_code}, treating page as available")
            return DEFAULT_STATUS, str(e)
        except MaintenanceCheckError as e:
            logger.error(f"Maintenance check for '{key}' failed, treating page as available: {e}")
            return DEFAULT_STATUS, str(e)

    async def resolve(self, path: str) -> MaintenanceStatus:
        status, _ = await self.check(path)
        return status
