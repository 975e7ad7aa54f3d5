"""Subsonic API client module for music catalog access."""

__version__ = "1.0.0"

from .auth import create_auth_params
from .client import SubsonicClient
from .exceptions import (
    SubsonicAuthenticationError,
    SubsonicAuthorizationError,
    SubsonicError,
    SubsonicNotFoundError,
    SubsonicParameterError,
    SubsonicResponseError,
    SubsonicTransportError,
    SubsonicTrialError,
    SubsonicVersionError,
)
from .models import Album, Artist, Song, SubsonicConfig

__all__ = [
    # Client
    "SubsonicClient",
    # Models
    "SubsonicConfig",
    "Artist",
    "Album",
    "Song",
    # Authentication
    "create_auth_params",
    # Exceptions
    "SubsonicError",
    "SubsonicAuthenticationError",
    "SubsonicAuthorizationError",
    "SubsonicNotFoundError",
    "SubsonicParameterError",
    "SubsonicResponseError",
    "SubsonicTransportError",
    "SubsonicTrialError",
    "SubsonicVersionError",
]
