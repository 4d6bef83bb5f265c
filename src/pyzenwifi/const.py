"""Constants for pyzenwifi library."""

from __future__ import annotations


# API Configuration
DEFAULT_API_HOST = "wifi.zenhq.com"
DEFAULT_TIMEOUT = 30  # seconds

# Hosts that may be reached over plain http (local test servers)
LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})

# Endpoints
TOKEN_ENDPOINT = "/api/token"
USER_INFO_ENDPOINT = "/api/v1/account/userinfo"
DEVICE_LIST_ENDPOINT = "/api/v1/consumer/device/getall"
DEVICE_STATUS_ENDPOINT = "/api/v1/device/status"

# OAuth2 grant types
GRANT_TYPE_PASSWORD = "password"
GRANT_TYPE_REFRESH_TOKEN = "refresh_token"

# Thermostat modes
MODE_HEAT = "heat"
MODE_EMERGENCY_HEAT = "emergency_heat"
MODE_COOL = "cool"
MODE_OFF = "off"

# Mode codes reported by the status endpoint
MODE_NAMES: dict[int, str] = {
    0: "unknown",
    1: MODE_HEAT,
    2: MODE_COOL,
    3: MODE_OFF,
    4: "auto",
    5: "eco",
    6: MODE_EMERGENCY_HEAT,
    7: "zen",
}

# Modes that can be set, and the endpoint each one posts to
MODE_ENDPOINTS: dict[str, str] = {
    MODE_HEAT: "/api/v1/device/heat",
    MODE_EMERGENCY_HEAT: "/api/v1/device/emergency/heat",
    MODE_COOL: "/api/v1/device/cool",
    MODE_OFF: "/api/v1/device/off",
}
