"""
Configuration constants for the pseudoserver link.

This module contains all tunable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Settings file location
CONF_FILE_ENV = "PSEUDOSERVER_CONF_FILE"
DEFAULT_CONF_FILE = "pseudoserver.conf"

# Spanning-tree protocol version announced in CAPAB START (InspIRCd 3)
PROTOCOL_VERSION = 1205

# Link deadlines (seconds). A value <= 0 disables the deadline.
LINK_CONNECT_TIMEOUT = _get_env_float(
    "LINK_CONNECT_TIMEOUT", 30.0
)  # TCP + TLS establishment
LINK_READ_TIMEOUT = _get_env_float(
    "LINK_READ_TIMEOUT", 0.0
)  # Wait for one inbound line; uplink pings keep an idle link busy
LINK_WRITE_TIMEOUT = _get_env_float(
    "LINK_WRITE_TIMEOUT", 30.0
)  # Drain of one outbound line

# Longest inbound line accepted from the uplink, in bytes
LINK_MAX_LINE_BYTES = _get_env_int("LINK_MAX_LINE_BYTES", 65536)
