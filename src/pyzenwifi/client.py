"""High-level client for Zen thermostats.

This module wires the token store, authentication handler and low-level API
together and converts API responses into data models.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import ClientSession  # noqa: TC002 - Used at runtime for session injection

from pyzenwifi.api import ZenAPI
from pyzenwifi.auth import AuthenticationHandler, TokenStore
from pyzenwifi.const import DEFAULT_API_HOST, DEFAULT_TIMEOUT
from pyzenwifi.exceptions import ZenError
from pyzenwifi.models import ClientConfig
from pyzenwifi.parsers import parse_device_list, parse_device_status, parse_user_info
from pyzenwifi.serializers import get_mode_as_string, get_url_for_mode


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from pyzenwifi.models import Device, DeviceStatus, TokenPair, UserInfo

_LOGGER = logging.getLogger(__name__)


class ZenClient:
    """Client for Zen Wi-Fi thermostats.

    Typical sequence:
        tokens = authenticate(username, password)
        consumer_id = get_consumer_id()
        devices = get_device_list(consumer_id)
        set_mode_and_temperature(device_id, mode, temperature)

    Tokens are kept in memory only. Persist them yourself (see
    on_tokens_updated) and hand them back with set_tokens() or the
    access_token/refresh_token arguments to skip the password login.

    Example:
        ```python
        from pyzenwifi import ZenClient

        async with ZenClient(username="user@example.com", password="password") as client:
            consumer_id = await client.get_consumer_id()
            for device in await client.get_device_list(consumer_id):
                status = await client.get_device_status(device.device_id)
                print(device.name, status.mode_name, status.current_temperature)

            await client.set_mode_and_temperature(device.device_id, "heat", 21)
        ```

    Attributes:
        api: Low-level ZenAPI instance for HTTP communication.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        api_host: str = DEFAULT_API_HOST,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        access_token: str | None = None,
        refresh_token: str | None = None,
        session: ClientSession | None = None,
        on_tokens_updated: Callable[[TokenPair], None] | None = None,
        auth_handler: AuthenticationHandler | None = None,
    ) -> None:
        """Initialize the Zen client.

        Args:
            username: Optional account email. With password, used to log in when
                entering the context manager if no tokens are set.
            password: Optional account password.
            api_host: API host name. Defaults to wifi.zenhq.com.
            timeout: Total timeout in seconds for each request.
            access_token: Optional previously persisted access token.
            refresh_token: Optional previously persisted refresh token.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            on_tokens_updated: Optional callback invoked with each newly issued
                token pair.
            auth_handler: Optional pre-configured AuthenticationHandler. If not
                provided, one will be created from the other arguments.
        """
        self._username = username
        self._password = password

        if auth_handler is not None:
            self._auth_handler = auth_handler
        else:
            self._auth_handler = AuthenticationHandler(
                ClientConfig(api_host=api_host, timeout=timeout),
                token_store=TokenStore(access_token, refresh_token),
                session=session,
                on_tokens_updated=on_tokens_updated,
            )

        self._api = ZenAPI(auth_handler=self._auth_handler, session=session)

    @property
    def api(self) -> ZenAPI:
        """Get the underlying API client for direct endpoint access."""
        return self._api

    @property
    def config(self) -> ClientConfig:
        """Get the host and timeout settings."""
        return self._auth_handler.config

    async def __aenter__(self) -> ZenClient:
        """Enter the context manager.

        Creates session if needed. Logs in with the configured credentials
        when no tokens have been set.

        Returns:
            Self for use in async with statements.
        """
        await self._api.__aenter__()
        try:
            if (
                self._username is not None
                and self._password is not None
                and not self._auth_handler.is_authenticated()
            ):
                await self.authenticate(self._username, self._password)
        except Exception:
            await self._api.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager and close the API client."""
        await self._api.__aexit__(exc_type, exc_val, exc_tb)

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def set_tokens(self, access_token: str | None, refresh_token: str | None) -> None:
        """Inject tokens persisted from an earlier session."""
        self._auth_handler.set_tokens(access_token, refresh_token)

    def get_tokens(self) -> TokenPair:
        """Return the current tokens so the caller can persist them.

        Raises:
            MissingTokensError: If no tokens are set.
        """
        return self._auth_handler.get_tokens()

    async def authenticate(self, username: str, password: str) -> TokenPair:
        """Log in with username and password and store the issued tokens."""
        return await self._auth_handler.authenticate(username, password)

    async def refresh_token_grant(self) -> TokenPair:
        """Exchange the stored refresh token for a new token pair."""
        return await self._auth_handler.refresh_token_grant()

    # -------------------------------------------------------------------------
    # Account and devices
    # -------------------------------------------------------------------------

    async def get_user_info(self) -> UserInfo:
        """Get account details for the authenticated user."""
        data = await self._api.get_user_info()
        return parse_user_info(data or {})

    async def get_consumer_id(self) -> str:
        """Get the consumer id used to scope device queries.

        Raises:
            ZenError: If the userinfo response has no consumer id.
        """
        user_info = await self.get_user_info()
        if not user_info.consumer_id:
            msg = "User info response does not contain a consumerId"
            raise ZenError(msg)
        return user_info.consumer_id

    async def get_device_list(self, consumer_id: str) -> list[Device]:
        """Get the thermostats registered to a consumer.

        Args:
            consumer_id: Consumer id, see get_consumer_id().

        Returns:
            List of Device entries.
        """
        data = await self._api.get_devices(consumer_id)
        devices = parse_device_list(data or {})
        _LOGGER.debug("Found %d device(s)", len(devices))
        return devices

    async def get_device_status(self, device_id: str) -> DeviceStatus:
        """Get the current state of a thermostat.

        Args:
            device_id: Thermostat identifier.

        Returns:
            DeviceStatus with the mode code already translated to its name.
        """
        data = await self._api.get_device_status(device_id)
        return parse_device_status(device_id, data or {})

    async def set_mode_and_temperature(
        self,
        device_id: str,
        mode: str,
        temperature: float | None = None,
    ) -> Any:
        """Set a thermostat's mode and setpoint.

        Args:
            device_id: Thermostat identifier.
            mode: One of "heat", "emergency_heat", "cool" or "off".
            temperature: Setpoint in Celsius. Not sent for "off".

        Returns:
            Decoded response body.

        Raises:
            InvalidParameterError: If the mode cannot be set, or no temperature
                is given for a mode other than "off".
        """
        _LOGGER.debug("Setting device %s to %s (%s)", device_id, mode, temperature)
        return await self._api.set_mode(device_id, mode, temperature)

    @staticmethod
    def get_mode_as_string(mode: int | str | None) -> str:
        """Translate a mode code (0-7) into its name, or "" if unknown."""
        return get_mode_as_string(mode)

    @staticmethod
    def get_url_for_mode(mode: str) -> str:
        """Return the control endpoint for a settable mode, or "" if unknown."""
        return get_url_for_mode(mode)
