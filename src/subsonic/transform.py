"""Transform raw Subsonic JSON entries into catalog models."""

import logging
from typing import Any, Dict, List, Optional

from .models import Album, Artist, Song

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Normalise an optional display field to a string.

    Examples:
        >>> _text(None)
        ''
        >>> _text(" Rock ")
        'Rock'
        >>> _text(1999)
        '1999'
    """
    if value is None:
        return ""
    return str(value).strip()


def _identifier(entry: Dict[str, Any]) -> str:
    """Return the entry id as an opaque string.

    Raises:
        KeyError: If the entry has no id
    """
    # Some servers send numeric ids; they are still opaque identifiers
    return str(entry["id"])


def transform_artists(artists_container: Dict[str, Any]) -> List[Artist]:
    """Flatten the getArtists ``index`` letter groups into one artist list.

    The grouping letter is discarded. Groups are concatenated in server
    order and artists keep their order within each group.

    Args:
        artists_container: The ``artists`` object of a getArtists response

    Returns:
        List of Artist objects with no albums attached
    """
    artists: List[Artist] = []
    for index in artists_container.get("index") or []:
        for entry in index.get("artist") or []:
            try:
                artists.append(Artist(id=_identifier(entry), name=_text(entry.get("name"))))
            except KeyError as e:
                logger.warning(f"Skipping artist with missing field: {e}")
    return artists


def transform_album(entry: Dict[str, Any]) -> Album:
    """Convert an album entry (getArtist, getAlbumList2) to an Album.

    Raises:
        KeyError: If the entry has no id
    """
    return Album(
        id=_identifier(entry),
        name=_text(entry.get("name") or entry.get("title")),
        artist_id=_text(entry.get("artistId")),
        artist=_text(entry.get("artist")),
        genre=_text(entry.get("genre")),
    )


def transform_albums(entries: Optional[List[Dict[str, Any]]]) -> List[Album]:
    """Convert a list of album entries, skipping entries without an id."""
    albums: List[Album] = []
    for entry in entries or []:
        try:
            albums.append(transform_album(entry))
        except KeyError as e:
            logger.warning(f"Skipping album with missing field: {e}")
    return albums


def transform_song(entry: Dict[str, Any], album: Optional[Album] = None) -> Song:
    """Convert a song entry to a Song.

    Display strings prefer the song's own fields and fall back to the
    owning album's context, so a song is never re-fetched to fill them in.

    Args:
        entry: Song entry from a getAlbum response
        album: Owning album, used as context for missing display fields

    Returns:
        Song object

    Raises:
        KeyError: If the entry has no id
    """
    context = album or Album(id="", name="")
    return Song(
        id=_identifier(entry),
        title=_text(entry.get("title")),
        artist=_text(entry.get("artist")) or context.artist,
        album=_text(entry.get("album")) or context.name,
        genre=_text(entry.get("genre")) or context.genre,
        artist_id=entry.get("artistId") or context.artist_id or None,
        album_id=entry.get("albumId") or context.id or None,
    )


def transform_album_songs(album_data: Dict[str, Any]) -> List[Song]:
    """Convert the ``album`` object of a getAlbum response into its songs.

    Video entries are filtered out.
    """
    album = transform_album(album_data) if "id" in album_data else None

    songs: List[Song] = []
    for entry in album_data.get("song") or []:
        if entry.get("isVideo", False):
            logger.debug(f"Skipping video: {entry.get('title', 'Unknown')}")
            continue
        try:
            songs.append(transform_song(entry, album))
        except KeyError as e:
            logger.warning(f"Skipping song with missing required field: {e}")
    return songs
