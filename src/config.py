"""Configuration management for navitui.

All configuration is read from environment variables.
"""
import os
from dataclasses import dataclass

from src.catalog.loader import DEFAULT_LOAD_TIMEOUT
from src.errors import ConfigurationError
from src.mpv.client import DEFAULT_SOCKET_PATH
from src.subsonic.models import SubsonicConfig


@dataclass
class NavituiConfig:
    """Configuration for a navitui session (reads from environment)."""

    # Required: Navidrome
    navidrome_url: str
    navidrome_user: str
    navidrome_password: str

    # Optional: mpv control socket
    mpv_socket: str = DEFAULT_SOCKET_PATH

    # Optional: deadline for the startup catalog load, in seconds
    load_timeout: float = DEFAULT_LOAD_TIMEOUT

    @classmethod
    def from_environment(cls) -> 'NavituiConfig':
        """Load configuration from environment variables.

        Returns:
            NavituiConfig: Loaded configuration object

        Raises:
            ConfigurationError: If required environment variables are missing
                or NAVITUI_LOAD_TIMEOUT is not a positive number
        """
        required = {
            'NAVIDROME_URL': os.getenv('NAVIDROME_URL'),
            'NAVIDROME_USER': os.getenv('NAVIDROME_USER'),
            'NAVIDROME_PASSWORD': os.getenv('NAVIDROME_PASSWORD'),
        }

        missing = [var for var, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Required environment variables missing: {', '.join(missing)}\n"
                f"Example: export NAVIDROME_URL='https://your-server.com'"
            )

        raw_timeout = os.getenv('NAVITUI_LOAD_TIMEOUT', str(DEFAULT_LOAD_TIMEOUT))
        try:
            load_timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(f"NAVITUI_LOAD_TIMEOUT must be a number, got {raw_timeout!r}") from e
        if load_timeout <= 0:
            raise ConfigurationError(f"NAVITUI_LOAD_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(
            navidrome_url=required['NAVIDROME_URL'],
            navidrome_user=required['NAVIDROME_USER'],
            navidrome_password=required['NAVIDROME_PASSWORD'],
            mpv_socket=os.getenv('NAVITUI_MPV_SOCKET') or DEFAULT_SOCKET_PATH,
            load_timeout=load_timeout,
        )

    def subsonic_config(self) -> SubsonicConfig:
        """Build the Subsonic client configuration.

        Raises:
            ConfigurationError: If the URL or credentials are invalid
        """
        return SubsonicConfig(
            url=self.navidrome_url,
            username=self.navidrome_user,
            password=self.navidrome_password,
        )
