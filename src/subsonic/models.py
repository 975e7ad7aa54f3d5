"""Data models for Subsonic API integration."""

from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from src.errors import ConfigurationError


@dataclass
class SubsonicConfig:
    """Configuration for connecting to a Subsonic-compatible server.

    Attributes:
        url: Base server URL (e.g., "https://music.example.com")
        username: Subsonic username
        password: Subsonic password (sent as the static ``p`` parameter)
        client_name: Client identifier for API requests
        api_version: Subsonic API version
    """

    url: str
    username: str
    password: str
    client_name: str = "navitui"
    api_version: str = "1.16.1"

    def __post_init__(self):
        """Validate configuration on initialization."""
        if not self.url:
            raise ConfigurationError("url is required")
        if not self.username:
            raise ConfigurationError("username is required")
        if not self.password:
            raise ConfigurationError("password is required")

        try:
            parsed = httpx.URL(self.url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(f"url is not a valid URL: {self.url!r}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConfigurationError(f"url must be an HTTP/HTTPS URL: {self.url!r}")


@dataclass(frozen=True)
class Song:
    """A playable track as exposed to the consumer.

    Attributes:
        id: Opaque track identifier
        title: Track title
        artist: Artist display name
        album: Album display name
        genre: Genre display string ("" when unknown)
        artist_id: Owning artist identifier (optional)
        album_id: Owning album identifier (optional)
    """

    id: str
    title: str
    artist: str = ""
    album: str = ""
    genre: str = ""
    artist_id: Optional[str] = None
    album_id: Optional[str] = None


@dataclass
class Album:
    """Album from getArtist/getAlbum/getAlbumList2.

    ``songs`` stays empty until the catalog loader attaches them.
    """

    id: str
    name: str
    artist_id: str = ""
    artist: str = ""
    genre: str = ""
    songs: List[Song] = field(default_factory=list)


@dataclass
class Artist:
    """Artist from getArtists. ``albums`` is filled by the catalog loader."""

    id: str
    name: str
    albums: List[Album] = field(default_factory=list)
