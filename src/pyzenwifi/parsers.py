"""Parsing utilities for Zen thermostat API responses.

This module converts raw JSON responses into the data models used by
ZenClient and the authentication handler.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pyzenwifi.exceptions import AuthenticationError, ZenError
from pyzenwifi.models import ActiveSchedule, Device, DeviceStatus, RelayStates, TokenPair, UserInfo
from pyzenwifi.serializers import get_mode_as_string


if TYPE_CHECKING:
    from aiohttp import ClientResponse

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "parse_device_list",
    "parse_device_status",
    "parse_token_pair",
    "parse_user_info",
    "read_response_body",
]


def _require_object(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        msg = f"Invalid {what} response from API"
        raise ZenError(msg)


def parse_token_pair(data: Any) -> TokenPair:
    """Parse the token endpoint response.

    Args:
        data: Decoded JSON in format
              {"access_token": str, "refresh_token": str, "expires_in": int, ...}

    Returns:
        TokenPair with both tokens.

    Raises:
        AuthenticationError: If either token is missing from the response.
    """
    if not isinstance(data, dict):
        msg = "Invalid token response from API"
        raise AuthenticationError(msg, body=data)

    access_token = data.get("access_token")
    refresh_token = data.get("refresh_token")
    if not access_token or not refresh_token:
        msg = "Missing access or refresh token in token response"
        raise AuthenticationError(msg, body=data)

    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def parse_user_info(data: Any) -> UserInfo:
    """Parse the userinfo response.

    Args:
        data: Decoded JSON containing at least "consumerId".

    Returns:
        UserInfo instance.

    Raises:
        ZenError: If the response is not a JSON object.
    """
    _require_object(data, "userinfo")
    return UserInfo(consumer_id=data.get("consumerId"), raw_data=data)


def parse_device_list(data: Any) -> list[Device]:
    """Parse the consumer device list response.

    Args:
        data: Decoded JSON in format {"devices": [{"id": str, "name": str, ...}]}

    Returns:
        List of Device instances; entries without an id are skipped.

    Raises:
        ZenError: If the response is not a JSON object.
    """
    _require_object(data, "device list")
    devices = []
    for entry in data.get("devices") or []:
        if not isinstance(entry, dict):
            continue
        device_id = entry.get("id") or entry.get("deviceId")
        if not device_id:
            continue
        devices.append(Device(device_id=device_id, name=entry.get("name"), raw_data=entry))
    return devices


def _parse_relay_states(data: dict[str, Any] | None) -> RelayStates:
    data = data or {}
    return RelayStates(
        w1=data.get("w1"),
        w2=data.get("w2"),
        y1=data.get("y1"),
        y2=data.get("y2"),
        g=data.get("g"),
    )


def _parse_active_schedule(data: dict[str, Any] | None) -> ActiveSchedule | None:
    if not data:
        return None
    return ActiveSchedule(
        schedule_id=data.get("scheduleId"),
        schedule_state=data.get("scheduleState"),
        schedule_resume_time=data.get("scheduleResumeTime"),
        is_on_hold=data.get("isOnHold"),
    )


def parse_device_status(device_id: str, data: Any) -> DeviceStatus:
    """Parse the device status response.

    Args:
        device_id: Thermostat identifier the status was requested for. Used
            when the response does not echo an "id".
        data: Decoded JSON in format
              {"id": str, "name": str, "mode": int, "relayStates": {...},
               "currentTemperature": float, "heatingSetpoint": float, ...}

    Returns:
        DeviceStatus instance.

    Raises:
        ZenError: If the response is not a JSON object.
    """
    _require_object(data, "device status")
    mode = data.get("mode")

    return DeviceStatus(
        device_id=data.get("id") or device_id,
        name=data.get("name"),
        mode=mode,
        mode_name=get_mode_as_string(mode),
        fan_mode=data.get("fanMode"),
        relay_states=_parse_relay_states(data.get("relayStates")),
        current_temperature=data.get("currentTemperature"),
        heating_setpoint=data.get("heatingSetpoint"),
        cooling_setpoint=data.get("coolingSetpoint"),
        last_update=data.get("lastIngressUpdateDateTime"),
        location_id=data.get("locationId"),
        active_schedule=_parse_active_schedule(data.get("activeSchedule")),
        power_mode=data.get("powerMode"),
        is_online=bool(data.get("isOnline", False)),
        has_requested_state=data.get("hasRequestedState"),
        is_on_c_wire=data.get("isOnCWire"),
        raw_data=data,
    )


async def read_response_body(response: ClientResponse) -> Any:
    """Read and decode a response body.

    Args:
        response: aiohttp response whose body has not been consumed yet.

    Returns:
        Decoded JSON, None for an empty body, or the raw text when the body
        is not valid JSON.
    """
    text = await response.text(errors="replace")
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        _LOGGER.debug("Response body from %s is not JSON", response.url)
        return text
