"""Low-level API client for Zen thermostat cloud endpoints.

This module provides direct HTTP communication with the Zen API. Every
authenticated call goes through ZenAPI.request, which refreshes the tokens
and retries once when the API rejects a request.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from pyzenwifi.const import DEVICE_LIST_ENDPOINT, DEVICE_STATUS_ENDPOINT, USER_INFO_ENDPOINT
from pyzenwifi.exceptions import AuthenticationError
from pyzenwifi.parsers import read_response_body
from pyzenwifi.serializers import build_mode_request


if TYPE_CHECKING:
    from types import TracebackType

    from pyzenwifi.auth import AuthenticationHandler

_LOGGER = logging.getLogger(__name__)


class ZenAPI:
    """Low-level API client for the Zen thermostat cloud.

    This class handles raw HTTP communication with the API: request
    construction, bearer authentication headers, and transparent token
    refresh. Methods return the decoded JSON body of a successful response.

    Example:
        ```python
        from aiohttp import ClientSession
        from pyzenwifi.api import ZenAPI
        from pyzenwifi.auth import AuthenticationHandler

        async with ClientSession() as session:
            auth = AuthenticationHandler(session=session)
            api = ZenAPI(auth_handler=auth, session=session)

            async with api:
                await auth.authenticate("user@example.com", "pass")
                user_info = await api.get_user_info()
                devices = await api.get_devices(user_info["consumerId"])
        ```
    """

    def __init__(
        self,
        *,
        auth_handler: AuthenticationHandler,
        session: ClientSession | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            auth_handler: AuthenticationHandler owning the tokens. Its config
                provides the host and timeout used for API requests.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
        """
        self._auth_handler = auth_handler
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        """Base URL requests are sent to."""
        return self._auth_handler.config.base_url

    async def __aenter__(self) -> ZenAPI:
        """Enter the context manager.

        Creates session if needed and shares it with the auth handler.

        Returns:
            Self for use in async with statements.
        """
        try:
            if self._session is None:
                self._session = ClientSession()
                self._owns_session = True

            self._auth_handler.set_session(self._session)
            await self._auth_handler.__aenter__()
        except Exception:
            if self._owns_session and self._session is not None:
                await self._session.close()
                self._session = None
            raise
        else:
            return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, closing the session if this client created it."""
        await self._auth_handler.__aexit__(exc_type, exc_val, exc_tb)

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_data: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        retry_auth: bool = True,
    ) -> Any:
        """Make an authenticated API request.

        This is the core method for all API communication. A response other
        than 200 is treated as an expired access token: the tokens are
        refreshed once and the request is sent again with the new access
        token. The retried request is never retried again.

        Args:
            method: HTTP method (GET, POST).
            endpoint: API endpoint path (e.g., "/api/v1/account/userinfo").
            json_data: Optional JSON data for request body.
            params: Optional query parameters.
            retry_auth: Whether to refresh tokens and retry on failure.

        Returns:
            Decoded JSON body of the 200 response (None if the body is empty).

        Raises:
            MissingTokensError: If no tokens are set. No request is sent.
            AuthenticationError: If the refresh grant fails, or the request
                still fails after a refresh.
            RuntimeError: If session is not initialized or is closed.
            TimeoutError: If request times out.
            ClientError: If connection fails.
        """
        tokens = self._auth_handler.get_tokens()

        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)

        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {tokens.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        timeout = ClientTimeout(total=self._auth_handler.config.timeout)

        _LOGGER.debug("%s %s", method, url)

        try:
            async with self._session.request(
                method,
                url,
                json=json_data,
                params=params,
                headers=headers,
                timeout=timeout,
            ) as response:
                status = response.status
                body = await read_response_body(response)

        except TimeoutError:
            _LOGGER.exception("Request to %s timed out", url)
            raise

        except ClientError:
            _LOGGER.exception("Connection error for %s", url)
            raise

        if status == HTTPStatus.OK:
            return body

        if retry_auth and self._auth_handler.should_retry_on_status(status):
            _LOGGER.debug("Received status %d, attempting token refresh", status)
            await self._auth_handler.refresh_after_failure(tokens.access_token)

            # Retry request with new token
            return await self.request(
                method,
                endpoint,
                json_data=json_data,
                params=params,
                retry_auth=False,  # Don't retry again
            )

        msg = "Access token invalid"
        raise AuthenticationError(msg, status, body)

    # -------------------------------------------------------------------------
    # Account Endpoints
    # -------------------------------------------------------------------------

    async def get_user_info(self) -> Any:
        """Get account details for the authenticated user.

        Returns:
            Response data with at least {"consumerId": str, ...}
        """
        return await self.request("GET", USER_INFO_ENDPOINT)

    # -------------------------------------------------------------------------
    # Device Endpoints
    # -------------------------------------------------------------------------

    async def get_devices(self, consumer_id: str) -> Any:
        """Get the thermostats registered to a consumer.

        Args:
            consumer_id: Consumer id from the userinfo endpoint.

        Returns:
            Response data in format {"devices": [{"id": str, "name": str, ...}]}
        """
        return await self.request("GET", DEVICE_LIST_ENDPOINT, params={"consumerId": consumer_id})

    async def get_device_status(self, device_id: str) -> Any:
        """Get the current state of a thermostat.

        Args:
            device_id: Thermostat identifier.

        Returns:
            Response data in format
            {"id": str, "mode": int, "relayStates": {...}, "currentTemperature": float, ...}
        """
        return await self.request("GET", DEVICE_STATUS_ENDPOINT, params={"deviceId": device_id})

    async def set_mode(
        self,
        device_id: str,
        mode: str,
        setpoint: float | None = None,
    ) -> Any:
        """Set a thermostat's mode and setpoint.

        Args:
            device_id: Thermostat identifier.
            mode: One of "heat", "emergency_heat", "cool" or "off".
            setpoint: Temperature in Celsius (not sent for "off").

        Returns:
            Decoded response body.

        Raises:
            InvalidParameterError: If the mode cannot be set. No request is sent.
        """
        endpoint, payload = build_mode_request(device_id, mode, setpoint)
        return await self.request("POST", endpoint, json_data=payload)
