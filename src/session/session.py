"""Session orchestration: load the catalog, then control the player.

A Session owns everything the consumer needs: the flattened track list,
the catalog client used to build stream URLs, and the player client. The
consumer gets two operations bound to it, ``play_by_id`` and
``get_status``, and calls ``get_status`` on its own schedule (or through
a StatusPoller).
"""

import logging
from typing import Dict, List, Optional, Tuple

import httpx

from src.catalog.loader import Catalog, CatalogLoader
from src.config import NavituiConfig
from src.mpv.client import MpvClient
from src.mpv.models import PlaybackStatus
from src.subsonic.client import SubsonicClient
from src.subsonic.models import Song

from .exceptions import UnknownTrackError
from .poller import DEFAULT_POLL_INTERVAL, StatusPoller

logger = logging.getLogger(__name__)


class Session:
    """A loaded catalog bound to a catalog client and a player client.

    Use ``Session.start()`` to build one from configuration.

    Example:
        >>> async with await Session.start(NavituiConfig.from_environment()) as session:
        ...     await session.play_by_id(session.tracks[0].id)
        ...     status = await session.get_status()
    """

    def __init__(self, catalog: Catalog, catalog_client: SubsonicClient, player: MpvClient):
        self.catalog = catalog
        self.catalog_client = catalog_client
        self.player = player
        self._tracks_by_id: Dict[str, Song] = {}
        for song in catalog.tracks:
            self._tracks_by_id.setdefault(song.id, song)
        self._pollers: List[StatusPoller] = []

    @classmethod
    async def start(
        cls,
        config: NavituiConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "Session":
        """Build the clients and load the catalog, in that order.

        Args:
            config: Session configuration
            transport: Optional httpx transport for the catalog client

        Raises:
            ConfigurationError: Invalid server address or credentials
            CatalogLoadError: A catalog fetch failed
            CatalogTimeoutError: The load did not finish in time
            NavituiError: The artist list could not be fetched
        """
        # Fails before any network activity on bad configuration
        catalog_client = SubsonicClient(config.subsonic_config(), transport=transport)
        try:
            catalog = await CatalogLoader(catalog_client, timeout=config.load_timeout).load()
        except BaseException:
            await catalog_client.close()
            raise

        player = MpvClient(config.mpv_socket)
        logger.info(f"Session ready: {catalog.total} tracks, player socket {config.mpv_socket}")
        return cls(catalog, catalog_client, player)

    @property
    def tracks(self) -> Tuple[Song, ...]:
        """Every track in artist, album, song order."""
        return self.catalog.tracks

    def track(self, song_id: str) -> Song:
        """Look up a track by id.

        Raises:
            UnknownTrackError: If the id is not in the catalog
        """
        try:
            return self._tracks_by_id[song_id]
        except KeyError:
            raise UnknownTrackError(song_id) from None

    async def play_by_id(self, song_id: str) -> Song:
        """Play the track with ``song_id``.

        Returns:
            The track that was sent to the player

        Raises:
            UnknownTrackError: If the id is not in the catalog
            MpvConnectionError: If the player is not reachable
        """
        song = self.track(song_id)
        url = self.catalog_client.build_stream_url(song.id)
        await self.player.play(url)
        logger.info(f"Playing {song.artist} - {song.title}")
        return song

    async def get_status(self) -> PlaybackStatus:
        """Read the current playback status from the player."""
        return await self.player.get_status()

    def poller(self, interval: float = DEFAULT_POLL_INTERVAL) -> StatusPoller:
        """Create a StatusPoller bound to this session's player.

        The session stops it on close.
        """
        poller = StatusPoller(self.get_status, interval=interval)
        self._pollers.append(poller)
        return poller

    async def close(self) -> None:
        """Stop pollers and close the catalog client."""
        for poller in self._pollers:
            await poller.stop()
        self._pollers.clear()
        await self.catalog_client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
