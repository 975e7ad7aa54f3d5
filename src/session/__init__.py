"""Session orchestration and status polling."""

from .exceptions import UnknownTrackError
from .poller import StatusPoller
from .session import Session

__all__ = [
    "Session",
    "StatusPoller",
    "UnknownTrackError",
]
