"""Data models for Zen thermostat API requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from pyzenwifi.const import DEFAULT_API_HOST, DEFAULT_TIMEOUT, LOOPBACK_HOSTS
from pyzenwifi.exceptions import InvalidParameterError


__all__ = [
    "ActiveSchedule",
    "ClientConfig",
    "Device",
    "DeviceStatus",
    "RelayStates",
    "TokenPair",
    "UserInfo",
]


@dataclass(frozen=True)
class TokenPair:
    """OAuth2 bearer tokens issued by the token endpoint.

    Both values are opaque to the client.

    Attributes:
        access_token: Short-lived token sent with every API request.
        refresh_token: Longer-lived token used to obtain a new pair.
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings shared by the authentication and API layers.

    Attributes:
        api_host: Vendor API host name, always reached over HTTPS. A value that
            already contains a scheme is used as the base URL verbatim; plain
            ``http://`` is only accepted for loopback hosts (local test servers
            such as ``http://127.0.0.1:8080``).
        timeout: Total timeout in seconds for each HTTP request.

    Raises:
        InvalidParameterError: If api_host uses a scheme other than https,
            or http for a host that is not loopback.
    """

    api_host: str = DEFAULT_API_HOST
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Refuse to send bearer tokens over plaintext to a remote host."""
        if "://" not in self.api_host:
            return

        url = urlsplit(self.api_host)
        if url.scheme == "https":
            return
        if url.scheme == "http" and url.hostname in LOOPBACK_HOSTS:
            return

        msg = f"api_host {self.api_host!r} must use https (http is only allowed for loopback hosts)"
        raise InvalidParameterError(msg, parameter_name="api_host", value=self.api_host)

    @property
    def base_url(self) -> str:
        """Return the base URL for requests, without trailing slash."""
        if "://" in self.api_host:
            return self.api_host.rstrip("/")
        return f"https://{self.api_host}"


@dataclass
class UserInfo:
    """Account details from the userinfo endpoint.

    Attributes:
        consumer_id: Identifier used to scope device queries.
        raw_data: Original API response data.
    """

    consumer_id: str | None
    raw_data: dict[str, Any] = field(default_factory=dict)


@dataclass
class Device:
    """Entry from the consumer device list.

    Attributes:
        device_id: Unique thermostat identifier.
        name: User-assigned thermostat name.
        raw_data: Original API response data.
    """

    device_id: str
    name: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)


@dataclass
class RelayStates:
    """HVAC relay outputs (thermostat wire terminals)."""

    w1: bool | None = None
    w2: bool | None = None
    y1: bool | None = None
    y2: bool | None = None
    g: bool | None = None


@dataclass
class ActiveSchedule:
    """Schedule currently applied to a thermostat.

    Attributes:
        schedule_id: Schedule identifier.
        schedule_state: Vendor schedule state code.
        schedule_resume_time: When the schedule resumes after a hold, if set.
        is_on_hold: Whether the schedule is held by a manual change.
    """

    schedule_id: str | None = None
    schedule_state: int | None = None
    schedule_resume_time: str | None = None
    is_on_hold: bool | None = None


@dataclass
class DeviceStatus:
    """Thermostat state from the status endpoint.

    All fields except the identifier are optional as devices may not report
    every value.

    Attributes:
        device_id: Unique thermostat identifier.
        name: User-assigned thermostat name.
        mode: Raw mode code (0-7).
        mode_name: Mode code translated to its name ("" if unknown).
        fan_mode: Raw fan mode code.
        relay_states: Current relay outputs.
        current_temperature: Measured temperature in Celsius.
        heating_setpoint: Heating setpoint in Celsius.
        cooling_setpoint: Cooling setpoint in Celsius.
        last_update: Timestamp of the last report from the device (ISO 8601).
        location_id: Location the thermostat belongs to.
        active_schedule: Schedule currently applied, if any.
        power_mode: Raw power mode code.
        is_online: Whether the thermostat is connected.
        has_requested_state: Whether a requested change is still pending.
        is_on_c_wire: Whether the thermostat is powered from the C wire.
        raw_data: Original API response data for debugging.
    """

    device_id: str
    name: str | None = None
    mode: int | None = None
    mode_name: str = ""
    fan_mode: int | None = None
    relay_states: RelayStates = field(default_factory=RelayStates)
    current_temperature: float | None = None
    heating_setpoint: float | None = None
    cooling_setpoint: float | None = None
    last_update: str | None = None
    location_id: str | None = None
    active_schedule: ActiveSchedule | None = None
    power_mode: int | None = None
    is_online: bool = False
    has_requested_state: bool | None = None
    is_on_c_wire: bool | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_heating(self) -> bool:
        """Check if a heating stage relay is energised."""
        return bool(self.relay_states.w1 or self.relay_states.w2)

    @property
    def is_cooling(self) -> bool:
        """Check if a cooling stage relay is energised."""
        return bool(self.relay_states.y1 or self.relay_states.y2)
