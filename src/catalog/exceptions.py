"""Exception classes for catalog loading."""

from src.errors import NavituiError, TransportError


class CatalogLoadError(NavituiError):
    """Loading the catalog failed while fetching one artist's albums or songs.

    Attributes:
        artist: Display name of the artist being loaded
        cause: The first error raised by any fetch of the load
    """

    def __init__(self, artist: str, cause: Exception):
        self.artist = artist
        self.cause = cause
        super().__init__(f"failed to retrieve albums for artist {artist}: {cause}")


class CatalogTimeoutError(TransportError):
    """The whole catalog load did not finish before its deadline."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"catalog load did not finish within {timeout:g}s")
