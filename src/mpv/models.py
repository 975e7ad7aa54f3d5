"""Data models for mpv playback state."""

from dataclasses import dataclass, field
from datetime import timedelta


@dataclass(frozen=True)
class TrackMetadata:
    """Tags reported by the player for the loaded file.

    These come from the file itself and may differ from the catalog's
    display strings.
    """

    title: str = ""
    artist: str = ""
    album: str = ""


@dataclass(frozen=True)
class PlaybackStatus:
    """Snapshot of the player state, rebuilt on every poll.

    Attributes:
        position: Current playback position
        duration: Total duration of the loaded file (zero when nothing is loaded)
        paused: Whether playback is paused
        metadata: Title/artist/album tags reported by the player
    """

    position: timedelta = timedelta(0)
    duration: timedelta = timedelta(0)
    paused: bool = False
    metadata: TrackMetadata = field(default_factory=TrackMetadata)

    @property
    def playing(self) -> bool:
        """True when not paused and a file with a non-zero duration is loaded."""
        return not self.paused and self.duration > timedelta(0)
