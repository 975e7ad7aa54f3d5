"""Async HTTP client for Subsonic API v1.16.1 (Navidrome)."""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx

from .auth import create_auth_params
from .exceptions import (
    ERROR_CODES,
    SubsonicError,
    SubsonicResponseError,
    SubsonicTransportError,
)
from .models import Album, Artist, Song, SubsonicConfig
from .transform import transform_album_songs, transform_albums, transform_artists

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SubsonicClient:
    """Asynchronous HTTP client for the Subsonic API.

    The client knows the wire schema of one catalog level per call
    (artists, albums of an artist, songs of an album) and how to build an
    authenticated stream URL. It holds no catalog state and runs no
    concurrency of its own; it is safe to share between concurrent tasks
    since all requests go through one pooled ``httpx.AsyncClient``.

    Attributes:
        config: SubsonicConfig with server connection details
        client: httpx.AsyncClient for HTTP requests

    Example:
        >>> config = SubsonicConfig(
        ...     url="https://music.example.com",
        ...     username="john",
        ...     password="secret"
        ... )
        >>> async with SubsonicClient(config) as client:
        ...     artists = await client.get_artists()
        ...     print(f"Found {len(artists)} artists")
    """

    def __init__(
        self,
        config: SubsonicConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Subsonic API client.

        Args:
            config: SubsonicConfig with server URL and credentials
            transport: Optional httpx transport (used by tests to mock the server)
        """
        self.config = config
        self._base_url = config.url.rstrip("/")

        if transport is None:
            transport = httpx.AsyncHTTPTransport(
                limits=httpx.Limits(
                    max_connections=100,  # Max total connections
                    max_keepalive_connections=20,  # Max persistent connections
                    keepalive_expiry=5.0,  # Keep connections alive for 5s
                ),
            )

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=10.0,
                read=30.0,
                write=10.0,
                pool=30.0,  # Loader fan-out may queue on the pool
            ),
            transport=transport,
            follow_redirects=True,
        )

        logger.info(f"Initialized Subsonic client for {self._base_url}")

    def _build_url(self, endpoint: str) -> str:
        """Build full URL for API endpoint.

        Args:
            endpoint: API endpoint name (e.g., "ping", "getAlbum")

        Returns:
            Full URL ``{base}/rest/{endpoint}.view``; a path prefix in the
            base URL is kept
        """
        return f"{self._base_url}/rest/{endpoint}.view"

    def _build_params(self, **kwargs: Any) -> Dict[str, str]:
        """Build query parameters with authentication and API version.

        Args:
            **kwargs: Additional endpoint-specific parameters

        Returns:
            Complete parameter dictionary for API request
        """
        params = create_auth_params(self.config)

        for key, value in kwargs.items():
            if value is not None:
                params[key] = str(value)

        return params

    def _handle_response(self, endpoint: str, response: httpx.Response) -> Dict[str, Any]:
        """Parse and validate a Subsonic API response envelope.

        Args:
            endpoint: Endpoint the request was sent to
            response: HTTP response from Subsonic server

        Returns:
            The ``subsonic-response`` object

        Raises:
            SubsonicResponseError: Non-200 status or undecodable envelope
            SubsonicError: Server reported ``status: failed`` (or a subclass
                chosen by error code)
        """
        if response.status_code != httpx.codes.OK:
            raise SubsonicResponseError(
                endpoint, f"unexpected response status: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SubsonicResponseError(endpoint, f"failed to decode response body: {e}") from e

        subsonic_response = data.get("subsonic-response") if isinstance(data, dict) else None
        if not isinstance(subsonic_response, dict):
            raise SubsonicResponseError(endpoint, "response has no subsonic-response envelope")

        status = subsonic_response.get("status")
        if status == "ok":
            return subsonic_response

        error = subsonic_response.get("error") or {}
        if not isinstance(error, dict):
            raise SubsonicResponseError(endpoint, f"malformed error object: {error!r}")
        code = error.get("code", 0)
        message = error.get("message") or f"status={status}"

        logger.error(f"Subsonic API error on {endpoint} ({code}): {message}")

        error_class = ERROR_CODES.get(code, SubsonicError) if isinstance(code, int) else SubsonicError
        raise error_class(code, message, endpoint=endpoint)

    async def _request(self, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        """Execute a GET request against an endpoint and validate the envelope.

        Raises:
            SubsonicTransportError: Connect, DNS, read or timeout failure
            SubsonicResponseError: Bad status or body
            SubsonicError: Server-reported failure
        """
        url = self._build_url(endpoint)
        params = self._build_params(**kwargs)

        try:
            response = await self.client.get(url, params=params)
        except httpx.RequestError as e:
            logger.debug(f"Request to {endpoint} failed: {e!r}")
            raise SubsonicTransportError(endpoint, e) from e

        return self._handle_response(endpoint, response)

    def _parse(self, endpoint: str, transform: Callable[..., T], *args: Any) -> T:
        """Run a transform, mapping shape errors in the data to a response error.

        Raises:
            SubsonicResponseError: Response data is not shaped as documented
        """
        try:
            return transform(*args)
        except (AttributeError, TypeError) as e:
            raise SubsonicResponseError(endpoint, f"malformed response: {e}") from e

    async def ping(self) -> bool:
        """Test server connectivity and authentication.

        Returns:
            True if ping successful

        Raises:
            SubsonicAuthenticationError: If credentials are invalid
            SubsonicTransportError: If the server cannot be reached
        """
        logger.debug(f"Pinging Subsonic server at {self._base_url}")
        await self._request("ping")
        logger.info("Subsonic ping successful")
        return True

    async def get_artists(self) -> List[Artist]:
        """Get all artists using ID3 browsing (getArtists endpoint).

        The server groups artists by index letter; the groups are flattened
        in server order.

        Returns:
            List of Artist objects with no albums attached
        """
        logger.debug("Fetching artists")
        data = await self._request("getArtists")

        artists = self._parse("getArtists", transform_artists, data.get("artists") or {})

        logger.info(f"Retrieved {len(artists)} artists")
        return artists

    async def get_artist_albums(self, artist_id: str) -> List[Album]:
        """Get the albums of an artist (getArtist endpoint).

        Args:
            artist_id: Artist ID from getArtists

        Returns:
            List of Album objects with no songs attached
        """
        logger.debug(f"Fetching albums for artist: {artist_id}")
        data = await self._request("getArtist", id=artist_id)

        albums = self._parse(
            "getArtist", lambda: transform_albums((data.get("artist") or {}).get("album"))
        )

        logger.debug(f"Retrieved {len(albums)} albums for artist {artist_id}")
        return albums

    async def get_album_songs(self, album_id: str) -> List[Song]:
        """Get album tracks (getAlbum endpoint).

        Args:
            album_id: Album ID from getArtist

        Returns:
            List of Song objects in album order
        """
        logger.debug(f"Fetching album: {album_id}")
        data = await self._request("getAlbum", id=album_id)

        songs = self._parse("getAlbum", transform_album_songs, data.get("album") or {})

        logger.debug(f"Retrieved {len(songs)} songs from album {album_id}")
        return songs

    async def get_album_list(
        self,
        offset: int = 0,
        size: int = 10,
        list_type: str = "alphabeticalByArtist",
    ) -> List[Album]:
        """Get one page of the album list (getAlbumList2 endpoint).

        Args:
            offset: Starting position in result set (0-based)
            size: Page size (default: 10, server max: 500)
            list_type: Sort type, e.g. "alphabeticalByArtist", "newest"

        Returns:
            List of Album objects with no songs attached
        """
        logger.debug(f"Fetching album list: type={list_type}, offset={offset}, size={size}")
        data = await self._request(
            "getAlbumList2", size=min(size, 500), type=list_type, offset=offset
        )

        albums = self._parse(
            "getAlbumList2", lambda: transform_albums((data.get("albumList2") or {}).get("album"))
        )

        logger.debug(f"Retrieved {len(albums)} albums")
        return albums

    def build_stream_url(self, song_id: str) -> str:
        """Build the authenticated streaming URL for a song.

        The URL is handed to the media player, which fetches it directly.
        No request is made here and the result depends only on the client
        configuration and the id.

        Args:
            song_id: Opaque song identifier

        Returns:
            Complete streaming URL with authentication

        Example:
            >>> client.build_stream_url("abc")
            'https://music.example.com/rest/stream.view?u=john&p=secret&v=1.16.1&c=navitui&f=json&id=abc'
        """
        url = httpx.URL(self._build_url("stream"), params=self._build_params(id=song_id))
        return str(url)

    async def close(self):
        """Close HTTP client and release resources."""
        await self.client.aclose()
        logger.info("Closed Subsonic client")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit - automatically close client."""
        await self.close()
