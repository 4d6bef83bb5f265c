"""Python client library for Zen Wi-Fi thermostats.

This package provides an async client for the Zen Ecosystems cloud API
(wifi.zenhq.com).

The library is organized into three layers:
1. **Auth Layer** (pyzenwifi.auth): In-memory token store and OAuth2 password/refresh grants
2. **API Layer** (pyzenwifi.api): Authenticated HTTP requests with one refresh-and-retry
3. **Client Layer** (pyzenwifi.client): Typed account and thermostat operations

Example:
    Log in with a password and set a thermostat:

    ```python
    from pyzenwifi import ZenClient

    async with ZenClient(username="user@example.com", password="password") as client:
        consumer_id = await client.get_consumer_id()
        devices = await client.get_device_list(consumer_id)

        status = await client.get_device_status(devices[0].device_id)
        print(f"{status.name}: {status.mode_name}, {status.current_temperature}C")

        await client.set_mode_and_temperature(devices[0].device_id, "heat", 21)

        # Persist these yourself to skip the password login next time
        tokens = client.get_tokens()
    ```

    Resume with persisted tokens:

    ```python
    async with ZenClient(access_token=saved.access_token, refresh_token=saved.refresh_token) as client:
        user_info = await client.get_user_info()
    ```
"""

from __future__ import annotations

from pyzenwifi.api import ZenAPI
from pyzenwifi.auth import AuthenticationHandler, TokenStore
from pyzenwifi.client import ZenClient
from pyzenwifi.exceptions import (
    AuthenticationError,
    InvalidParameterError,
    MissingTokensError,
    ZenError,
)
from pyzenwifi.models import (
    ActiveSchedule,
    ClientConfig,
    Device,
    DeviceStatus,
    RelayStates,
    TokenPair,
    UserInfo,
)
from pyzenwifi.parsers import (
    parse_device_list,
    parse_device_status,
    parse_token_pair,
    parse_user_info,
)
from pyzenwifi.serializers import build_mode_request, get_mode_as_string, get_url_for_mode


__version__ = "0.1.0"

__all__ = [
    "ActiveSchedule",
    "AuthenticationError",
    "AuthenticationHandler",
    "ClientConfig",
    "Device",
    "DeviceStatus",
    "InvalidParameterError",
    "MissingTokensError",
    "RelayStates",
    "TokenPair",
    "TokenStore",
    "UserInfo",
    "ZenAPI",
    "ZenClient",
    "ZenError",
    "__version__",
    "build_mode_request",
    "get_mode_as_string",
    "get_url_for_mode",
    "parse_device_list",
    "parse_device_status",
    "parse_token_pair",
    "parse_user_info",
]
