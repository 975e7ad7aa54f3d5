"""Exception classes for the session orchestrator."""

from src.errors import NavituiError


class UnknownTrackError(NavituiError):
    """No track with the requested identifier exists in the loaded catalog."""

    def __init__(self, song_id: str):
        self.song_id = song_id
        super().__init__(f"no track with id {song_id!r} in catalog")
