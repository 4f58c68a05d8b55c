"""tests for the maintenance status resolver"""
import asyncio
import json

import httpx
import pytest

from app.core.maintenance_resolver import (
    DEFAULT_STATUS,
    MaintenanceHTTPError,
    MaintenanceResolver,
    MaintenanceTimeout,
    MaintenanceTransportError,
    MalformedMaintenanceResponse,
)


def make_resolver(handler, timeout=1.0):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://cgsg.test")
    return MaintenanceResolver(timeout=timeout, http_client=client)


def status_handler(pages, seen=None):
    """serve maintenance status from a dict of key -> (flag, message)"""

    def handler(request: httpx.Request):
        if seen is not None:
            seen.append(request.url.raw_path.decode())
        key = request.url.raw_path.decode().rsplit("/maintenance/", 1)[1]
        is_maintenance, message = pages.get(key, (False, None))
        return httpx.Response(200, json={"is_maintenance": is_maintenance, "maintenance_message": message})

    return handler


def test_status_url_normalizes_keys():
    """test root, plain and nested paths map onto one endpoint segment"""
    resolver = MaintenanceResolver(http_client=httpx.AsyncClient())

    assert resolver.status_url("/") == "/api/maintenance/home"
    assert resolver.status_url("") == "/api/maintenance/home"
    assert resolver.status_url("/news") == "/api/maintenance/news"
    assert resolver.status_url("/news/") == "/api/maintenance/news"
    assert resolver.status_url("/a/b") == "/api/maintenance/a%2Fb"
    assert resolver.status_url("/guide?tab=2") == "/api/maintenance/guide"


@pytest.mark.asyncio
async def test_resolve_home_requests_home_key():
    """test the root path asks for the home record"""
    seen = []
    resolver = make_resolver(status_handler({"home": (True, "Upgrading")}, seen))

    status = await resolver.resolve("/")

    assert seen == ["/api/maintenance/home"]
    assert status.is_maintenance is True
    assert status.maintenance_message == "Upgrading"


@pytest.mark.asyncio
async def test_resolve_page_not_in_maintenance():
    """test an available page resolves to the default status"""
    resolver = make_resolver(status_handler({"news": (False, "Old message")}))

    status = await resolver.resolve("/news")

    assert status.is_maintenance is False
    assert status.maintenance_message == "Old message"


@pytest.mark.asyncio
async def test_resolve_nested_path():
    """test nested paths are percent-encoded into a single segment"""
    seen = []
    resolver = make_resolver(status_handler({"a%2Fb": (True, None)}, seen))

    status = await resolver.resolve("/a/b")

    assert seen == ["/api/maintenance/a%2Fb"]
    assert status.is_maintenance is True
    assert status.maintenance_message is None


@pytest.mark.asyncio
async def test_resolve_is_idempotent():
    """test resolving twice without a change gives the same answer"""
    resolver = make_resolver(status_handler({"forum": (True, "Soon")}))

    first = await resolver.resolve("/forum")
    second = await resolver.resolve("/forum")

    assert first == second


@pytest.mark.asyncio
async def test_server_error_fails_open():
    """test a 500 answer resolves to available with an error"""
    resolver = make_resolver(lambda request: httpx.Response(500, json={"detail": "boom"}))

    with pytest.raises(MaintenanceHTTPError) as exc_info:
        await resolver.fetch("/news")
    assert exc_info.value.status_code == 500

    status, error = await resolver.check("/news")
    assert status == DEFAULT_STATUS
    assert "500" in error


@pytest.mark.asyncio
async def test_transport_error_fails_open():
    """test a refused connection resolves to available"""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    resolver = make_resolver(handler)

    with pytest.raises(MaintenanceTransportError):
        await resolver.fetch("/casinos")
    assert await resolver.resolve("/casinos") == DEFAULT_STATUS


@pytest.mark.asyncio
async def test_malformed_body_fails_open():
    """test a non-json or mistyped body resolves to available"""
    not_json = make_resolver(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    wrong_type = make_resolver(
        lambda request: httpx.Response(200, content=json.dumps({"is_maintenance": "yes"}).encode())
    )

    with pytest.raises(MalformedMaintenanceResponse):
        await not_json.fetch("/guide")
    with pytest.raises(MalformedMaintenanceResponse):
        await wrong_type.fetch("/guide")

    assert await not_json.resolve("/guide") == DEFAULT_STATUS
    assert await wrong_type.resolve("/guide") == DEFAULT_STATUS


@pytest.mark.asyncio
async def test_missing_fields_default():
    """test an empty object is read as not in maintenance"""
    resolver = make_resolver(lambda request: httpx.Response(200, json={}))

    assert await resolver.resolve("/about") == DEFAULT_STATUS


@pytest.mark.asyncio
async def test_slow_backend_times_out():
    """test a response slower than the timeout resolves to available"""

    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"is_maintenance": True})

    resolver = make_resolver(handler, timeout=0.05)

    with pytest.raises(MaintenanceTimeout):
        await resolver.fetch("/forum")

    status, error = await resolver.check("/forum")
    assert status == DEFAULT_STATUS
    assert "timed out" in error


@pytest.mark.asyncio
async def test_owned_client_closed():
    """test the resolver closes only the client it created"""
    injected = httpx.AsyncClient()
    async with MaintenanceResolver(http_client=injected):
        pass
    assert injected.is_closed is False
    await injected.aclose()

    async with MaintenanceResolver("http://cgsg.test") as resolver:
        client = resolver._client
    assert client.is_closed is True
