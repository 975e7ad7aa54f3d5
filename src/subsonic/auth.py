"""Subsonic API authentication parameters.

Navidrome accepts the legacy static credential scheme: the username and
password travel as the ``u`` and ``p`` query parameters of every request,
next to the API version, client name and response format.

Example:
    >>> from src.subsonic.models import SubsonicConfig
    >>> from src.subsonic.auth import create_auth_params
    >>>
    >>> config = SubsonicConfig(
    ...     url="https://music.example.com",
    ...     username="admin",
    ...     password="sesame"
    ... )
    >>> create_auth_params(config)
    {'u': 'admin', 'p': 'sesame', 'v': '1.16.1', 'c': 'navitui', 'f': 'json'}
"""

from typing import Dict

from .models import SubsonicConfig


def create_auth_params(config: SubsonicConfig, response_format: str = "json") -> Dict[str, str]:
    """Create the fixed query parameters sent with every Subsonic request.

    Args:
        config: Subsonic configuration with credentials and client identity
        response_format: Response format, "json" or "xml" (default: "json")

    Returns:
        Dictionary of query parameters containing:
            - u: username
            - p: password
            - v: API version
            - c: client name
            - f: response format
    """
    return {
        "u": config.username,
        "p": config.password,
        "v": config.api_version,
        "c": config.client_name,
        "f": response_format,
    }
