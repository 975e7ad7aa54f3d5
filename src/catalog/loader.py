"""Bounded concurrent loader for the artist -> album -> song catalog.

The loader fetches the artist list once, then fans out over artists (at
most MAX_ARTISTS_IN_FLIGHT at a time). Each artist task fetches its albums
and fans out again over those albums (at most MAX_ALBUMS_IN_FLIGHT per
artist) to fetch songs. Every result is written into a slot of a list that
was sized before the fan-out, so the final order never depends on which
request finished first.

The load is all-or-nothing: the first failure cancels the remaining work
and no catalog is returned.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, Tuple

from src.errors import NavituiError
from src.subsonic.models import Album, Artist, Song

from .exceptions import CatalogLoadError, CatalogTimeoutError

logger = logging.getLogger(__name__)

# The server publishes no rate-limit signal, so these are fixed
MAX_ARTISTS_IN_FLIGHT = 8
MAX_ALBUMS_IN_FLIGHT = 32

DEFAULT_LOAD_TIMEOUT = 60.0


class CatalogSource(Protocol):
    """The three catalog reads the loader needs (SubsonicClient provides them)."""

    async def get_artists(self) -> List[Artist]:
        ...

    async def get_artist_albums(self, artist_id: str) -> List[Album]:
        ...

    async def get_album_songs(self, album_id: str) -> List[Song]:
        ...


@dataclass
class Catalog:
    """A fully loaded catalog.

    Attributes:
        artists: The artist -> album -> song tree
        tracks: Every song in artist, album, song order
        total: Number of songs counted while fetching
    """

    artists: List[Artist] = field(default_factory=list)
    tracks: Tuple[Song, ...] = ()
    total: int = 0


async def run_bounded(jobs: Sequence[Callable[[], Awaitable[None]]], limit: int) -> None:
    """Run ``jobs`` concurrently with at most ``limit`` of them in flight.

    The first job to fail cancels every other job of this call; once they
    have all finished, that first error is raised. If the caller is
    cancelled, the jobs are cancelled too.
    """
    if not jobs:
        return

    semaphore = asyncio.Semaphore(limit)
    failures: List[Exception] = []

    async def guarded(job: Callable[[], Awaitable[None]]) -> None:
        async with semaphore:
            try:
                await job()
            except Exception as e:
                if not failures:
                    failures.append(e)
                raise

    tasks = [asyncio.ensure_future(guarded(job)) for job in jobs]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    if failures:
        raise failures[0]


def flatten(artists: Sequence[Artist]) -> Tuple[Song, ...]:
    """Return every song of the tree in artist, album, song order."""
    tracks: List[Song] = []
    for artist in artists:
        for album in artist.albums:
            for song in album.songs:
                tracks.append(song)
                logger.debug(f"ARTIST: {artist.name} ALBUM: {album.name} SONG: {song.title}")
    return tuple(tracks)


class CatalogLoader:
    """Materialize the full catalog from a CatalogSource.

    Example:
        >>> async with SubsonicClient(config) as client:
        ...     catalog = await CatalogLoader(client).load()
        ...     print(f"Loaded {catalog.total} songs")
    """

    def __init__(self, source: CatalogSource, timeout: Optional[float] = DEFAULT_LOAD_TIMEOUT):
        """Initialize the loader.

        Args:
            source: Object providing the three catalog reads
            timeout: Deadline in seconds for the whole load; None disables it
        """
        self.source = source
        self.timeout = timeout

    async def load(self) -> Catalog:
        """Load the whole catalog.

        Returns:
            Catalog with the tree, flattened tracks and song count

        Raises:
            CatalogLoadError: Any album or song fetch failed
            CatalogTimeoutError: The deadline expired
            NavituiError: Fetching the artist list failed
        """
        try:
            return await asyncio.wait_for(self._load(), self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Catalog load timed out after {self.timeout}s")
            raise CatalogTimeoutError(self.timeout) from e

    async def _load(self) -> Catalog:
        # Fan-out width is only known once this succeeds
        artists = await self.source.get_artists()
        total = 0

        async def load_album(albums: List[Album], index: int) -> None:
            nonlocal total
            album = albums[index]
            album.songs = await self.source.get_album_songs(album.id)
            # Only the event loop thread touches this counter
            total += len(album.songs)

        async def load_artist(index: int) -> None:
            artist = artists[index]
            try:
                albums = await self.source.get_artist_albums(artist.id)
                await run_bounded(
                    [partial(load_album, albums, i) for i in range(len(albums))],
                    MAX_ALBUMS_IN_FLIGHT,
                )
            except NavituiError as e:
                raise CatalogLoadError(artist.name, e) from e
            artist.albums = albums

        logger.info(f"Loading albums and songs for {len(artists)} artists")
        await run_bounded(
            [partial(load_artist, i) for i in range(len(artists))],
            MAX_ARTISTS_IN_FLIGHT,
        )

        tracks = flatten(artists)
        if len(tracks) != total:
            logger.warning(f"Song count mismatch: counted {total}, flattened {len(tracks)}")

        logger.info(f"Successfully loaded {total} songs")
        return Catalog(artists=artists, tracks=tracks, total=total)
