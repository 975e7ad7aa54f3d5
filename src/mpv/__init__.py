"""mpv JSON IPC client for controlling an external player process."""

from .client import DEFAULT_SOCKET_PATH, MpvClient
from .exceptions import MpvConnectionError, MpvDecodeError, MpvPropertyError
from .models import PlaybackStatus, TrackMetadata

__all__ = [
    "MpvClient",
    "DEFAULT_SOCKET_PATH",
    "PlaybackStatus",
    "TrackMetadata",
    "MpvConnectionError",
    "MpvDecodeError",
    "MpvPropertyError",
]
