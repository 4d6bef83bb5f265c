"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientSession, web

from pyzenwifi.client import ZenClient


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from aiohttp.test_utils import TestClient


TEST_USERNAME = "test@example.com"
TEST_PASSWORD = "password123"
TEST_CONSUMER_ID = "c0ffee00-1111-2222-3333-444455556666"

SAMPLE_DEVICE_LIST = {
    "devices": [
        {"id": "dev-1", "name": "Heating"},
        {"id": "dev-2", "name": "Upstairs"},
    ]
}

SAMPLE_STATUS_RESPONSE = {
    "id": "dev-1",
    "name": "Heating",
    "mode": 1,
    "fanMode": 2,
    "relayStates": {"w1": True, "w2": False, "y1": False, "y2": False, "g": False},
    "currentTemperature": 22.2,
    "heatingSetpoint": 18,
    "coolingSetpoint": 22.5,
    "lastIngressUpdateDateTime": "2021-05-02T05:43:00.338408+00:00",
    "hubMacAddress": None,
    "locationId": "loc-1",
    "activeSchedule": {
        "scheduleId": "sched-1",
        "scheduleState": 2,
        "scheduleResumeTime": None,
        "isOnHold": True,
    },
    "powerMode": 3,
    "isOnline": True,
    "hasRequestedState": False,
    "isOnCWire": True,
    "provisionedDateTime": "2018-12-22T04:26:19.19+00:00",
    "deviceTags": [],
    "statusRefreshPeriod": 0,
}


class FakeZenCloud:
    """In-process stand-in for the Zen cloud API.

    Issues numbered token pairs, rejects requests carrying anything but the
    latest access token, and records every request it receives.
    """

    def __init__(self) -> None:
        self.access_token = "access-1"
        self.refresh_token = "refresh-1"
        self.issued = 1
        self.calls: list[dict[str, Any]] = []
        # Forces every API (non-token) response to this status when set
        self.api_status: int | None = None
        # Forces every refresh grant response to this status when set
        self.refresh_status: int | None = None
        # Raw bytes sent instead of the JSON error body on rejections when set
        self.error_body: bytes | None = None

    @property
    def api_calls(self) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["path"] != "/api/token"]

    @property
    def token_calls(self) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["path"] == "/api/token"]

    def expire_access_token(self) -> None:
        """Make the server stop accepting the current access token."""
        self.issued += 1
        self.access_token = f"access-{self.issued}-server-side"

    def _issue_tokens(self) -> web.Response:
        self.issued += 1
        self.access_token = f"access-{self.issued}"
        self.refresh_token = f"refresh-{self.issued}"
        return web.json_response(
            {
                "access_token": self.access_token,
                "token_type": "bearer",
                "expires_in": 1799,
                "refresh_token": self.refresh_token,
            }
        )

    async def _record(self, request: web.Request) -> dict[str, Any]:
        call: dict[str, Any] = {
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "authorization": request.headers.get("Authorization"),
            "content_type": request.content_type,
            "accept": request.headers.get("Accept"),
            "form": None,
            "json": None,
        }
        if request.can_read_body:
            if request.content_type == "application/x-www-form-urlencoded":
                call["form"] = dict(await request.post())
            elif request.content_type == "application/json":
                call["json"] = await request.json()
        self.calls.append(call)
        return call

    async def token(self, request: web.Request) -> web.Response:
        call = await self._record(request)
        invalid_grant = {"error": "invalid_grant"}

        if call["form"] is not None and call["form"].get("grant_type") == "password":
            if call["form"].get("username") == TEST_USERNAME and call["form"].get("password") == TEST_PASSWORD:
                return self._issue_tokens()
            invalid_grant["error_description"] = "The user name or password is incorrect."
            return web.json_response(invalid_grant, status=HTTPStatus.BAD_REQUEST)

        if call["json"] is not None and call["json"].get("grant_type") == "refresh_token":
            if self.refresh_status is not None:
                return self._error(invalid_grant, self.refresh_status)
            if call["json"].get("refresh_token") == self.refresh_token:
                return self._issue_tokens()
            return web.json_response(invalid_grant, status=HTTPStatus.BAD_REQUEST)

        return web.json_response({"error": "unsupported_grant_type"}, status=HTTPStatus.BAD_REQUEST)

    def _rejection(self, call: dict[str, Any]) -> web.Response | None:
        if self.api_status is not None:
            return self._error({"message": "Forced failure"}, self.api_status)
        if call["authorization"] != f"Bearer {self.access_token}":
            return self._error(
                {"message": "Authorization has been denied for this request."},
                HTTPStatus.UNAUTHORIZED,
            )
        return None

    def _error(self, data: dict[str, Any], status: int) -> web.Response:
        if self.error_body is not None:
            return web.Response(body=self.error_body, status=status, content_type="text/plain", charset="utf-8")
        return web.json_response(data, status=status)

    async def user_info(self, request: web.Request) -> web.Response:
        call = await self._record(request)
        rejection = self._rejection(call)
        if rejection is not None:
            return rejection
        return web.json_response({"consumerId": TEST_CONSUMER_ID, "email": TEST_USERNAME})

    async def device_list(self, request: web.Request) -> web.Response:
        call = await self._record(request)
        rejection = self._rejection(call)
        if rejection is not None:
            return rejection
        return web.json_response(SAMPLE_DEVICE_LIST)

    async def device_status(self, request: web.Request) -> web.Response:
        call = await self._record(request)
        rejection = self._rejection(call)
        if rejection is not None:
            return rejection
        return web.json_response({**SAMPLE_STATUS_RESPONSE, "id": request.query.get("deviceId")})

    async def set_mode(self, request: web.Request) -> web.Response:
        call = await self._record(request)
        rejection = self._rejection(call)
        if rejection is not None:
            return rejection
        return web.Response(status=HTTPStatus.OK)

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/token", self.token)
        app.router.add_get("/api/v1/account/userinfo", self.user_info)
        app.router.add_get("/api/v1/consumer/device/getall", self.device_list)
        app.router.add_get("/api/v1/device/status", self.device_status)
        app.router.add_post("/api/v1/device/heat", self.set_mode)
        app.router.add_post("/api/v1/device/emergency/heat", self.set_mode)
        app.router.add_post("/api/v1/device/cool", self.set_mode)
        app.router.add_post("/api/v1/device/off", self.set_mode)
        return app


@pytest.fixture
def cloud() -> FakeZenCloud:
    """Create a fake Zen cloud with a valid token pair already issued."""
    return FakeZenCloud()


@pytest.fixture
async def cloud_client(aiohttp_client: Callable[..., Awaitable[TestClient]], cloud: FakeZenCloud) -> TestClient:
    """Start the fake Zen cloud on a local test server."""
    return await aiohttp_client(cloud.build_app())


@pytest.fixture
def make_zen_client(cloud_client: TestClient) -> Callable[..., ZenClient]:
    """Build ZenClients bound to the fake cloud and its test session."""

    def factory(**kwargs: Any) -> ZenClient:
        kwargs.setdefault("api_host", str(cloud_client.make_url("")))
        kwargs.setdefault("session", cloud_client.session)
        return ZenClient(**kwargs)

    return factory


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def mock_response() -> MagicMock:
    """Create a mock aiohttp ClientResponse.

    Returns:
        Mock ClientResponse for testing.
    """
    response = MagicMock()
    response.status = 200
    response.headers = {}
    response.url = "https://wifi.zenhq.com/api/token"
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


@pytest.fixture
def mock_auth() -> AsyncMock:
    """Create mock authentication handler.

    Returns:
        Mock AuthenticationHandler that reports itself as authenticated.
    """
    auth = AsyncMock()
    auth.is_authenticated = MagicMock(return_value=True)
    auth.set_session = MagicMock()
    auth.__aenter__ = AsyncMock(return_value=auth)
    auth.__aexit__ = AsyncMock()
    return auth
