"""Request building and mode lookups for the Zen thermostat API.

Stateless functions that map thermostat modes to endpoints and build the
JSON bodies sent to the device control endpoints.
"""

from __future__ import annotations

from typing import Any

from pyzenwifi.const import MODE_ENDPOINTS, MODE_NAMES, MODE_OFF
from pyzenwifi.exceptions import InvalidParameterError


__all__ = [
    "build_mode_request",
    "get_mode_as_string",
    "get_url_for_mode",
]


def get_mode_as_string(mode: int | str | None) -> str:
    """Translate a mode code reported by the API into its name.

    Accepts integers or numeric strings, since the API is not consistent
    about which it returns.

    Args:
        mode: Mode code (0-7).

    Returns:
        The mode name, or an empty string for codes outside the table.

    Example:
        >>> get_mode_as_string(1)
        'heat'
        >>> get_mode_as_string("7")
        'zen'
        >>> get_mode_as_string(42)
        ''
    """
    if isinstance(mode, bool):
        return ""
    try:
        code = int(mode)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return ""
    return MODE_NAMES.get(code, "")


def get_url_for_mode(mode: str) -> str:
    """Return the control endpoint path for a settable mode.

    Args:
        mode: One of "heat", "emergency_heat", "cool" or "off".

    Returns:
        Endpoint path, or an empty string for modes that cannot be set.
    """
    return MODE_ENDPOINTS.get(mode, "")


def build_mode_request(
    device_id: str,
    mode: str,
    temperature: float | None = None,
) -> tuple[str, dict[str, Any]]:
    """Build the endpoint and body for a set-mode request.

    The "off" endpoint takes no setpoint, so the body is only the device id.

    Args:
        device_id: Thermostat identifier.
        mode: One of "heat", "emergency_heat", "cool" or "off".
        temperature: Setpoint in Celsius (ignored for "off").

    Returns:
        Tuple of (endpoint, payload).

    Raises:
        InvalidParameterError: If the mode cannot be set, or no temperature
            is given for a mode that needs one.
    """
    endpoint = get_url_for_mode(mode)
    if not endpoint:
        msg = f"Unsupported mode {mode!r}; expected one of {', '.join(MODE_ENDPOINTS)}"
        raise InvalidParameterError(msg, parameter_name="mode", value=mode)

    if mode == MODE_OFF:
        return endpoint, {"deviceid": device_id}

    if temperature is None:
        msg = f"A temperature is required for mode {mode!r}"
        raise InvalidParameterError(msg, parameter_name="temperature", value=temperature)

    return endpoint, {"deviceid": device_id, "setpoint": temperature}
