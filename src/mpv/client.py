"""Client for the mpv JSON IPC control socket.

Every call opens a fresh connection to the socket, writes one JSON command
line, optionally reads one reply line, and closes. No connection or other
state is kept between calls, so concurrent callers never share anything
but the socket path.
"""

import asyncio
import json
import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Type, TypeVar

from src.errors import ConfigurationError

from .exceptions import MpvConnectionError, MpvDecodeError, MpvPropertyError
from .models import PlaybackStatus, TrackMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_SOCKET_PATH = "/tmp/navitui-mpv.sock"


def _convert(name: str, data: Any, kind: Type[T]) -> T:
    """Convert a reply ``data`` field to the caller's expected type.

    A null value reads as the zero value of ``kind`` (0.0, False, {}, "").

    Raises:
        MpvDecodeError: If the value does not have the expected shape
    """
    if data is None:
        return kind()

    if kind is float:
        # bool is an int subclass but never a valid number here
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise MpvDecodeError(f"mpv: property {name}: expected number, got {data!r}")
        return float(data)  # type: ignore[return-value]

    if not isinstance(data, kind):
        raise MpvDecodeError(
            f"mpv: property {name}: expected {kind.__name__}, got {type(data).__name__}"
        )
    return data


class MpvClient:
    """Stateless request/response client for a running mpv process.

    Attributes:
        socket_path: Filesystem path of mpv's ``--input-ipc-server`` socket
        timeout: Upper bound in seconds for one call (connect, write, read)

    Example:
        >>> player = MpvClient("/tmp/navitui-mpv.sock")
        >>> await player.play(url)
        >>> status = await player.get_status()
        >>> print(status.playing, status.position)
    """

    def __init__(self, socket_path: str = DEFAULT_SOCKET_PATH, timeout: float = 2.0):
        if not socket_path:
            raise ConfigurationError("mpv socket path is required")
        self.socket_path = socket_path
        self.timeout = timeout

    async def _send(
        self,
        command: Dict[str, Any],
        on_reply: Callable[[asyncio.StreamReader], Awaitable[R]],
    ) -> R:
        """Send one command and hand the connection's reader to ``on_reply``.

        Raises:
            MpvConnectionError: Socket unreachable, reset, or call timed out
            MpvDecodeError: Reply empty, truncated or not a JSON object
        """
        try:
            return await asyncio.wait_for(self._exchange(command, on_reply), self.timeout)
        except asyncio.TimeoutError as e:
            raise MpvConnectionError(self.socket_path, e) from e

    async def _exchange(
        self,
        command: Dict[str, Any],
        on_reply: Callable[[asyncio.StreamReader], Awaitable[R]],
    ) -> R:
        try:
            reader, writer = await asyncio.open_unix_connection(self.socket_path)
        except OSError as e:
            raise MpvConnectionError(self.socket_path, e) from e

        try:
            writer.write(json.dumps(command).encode("utf-8") + b"\n")
            await writer.drain()

            return await on_reply(reader)
        except OSError as e:
            raise MpvConnectionError(self.socket_path, e) from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error closing mpv socket: {e!r}")

    async def _no_reply(self, reader: asyncio.StreamReader) -> None:
        """Fire-and-forget commands close without reading."""
        return None

    async def _read_reply(self, reader: asyncio.StreamReader) -> Dict[str, Any]:
        """Read lines until the command reply arrives.

        mpv may push event messages to any connected client; those carry an
        ``event`` key and are skipped.
        """
        while True:
            try:
                line = await reader.readline()
            except ValueError as e:
                # Line longer than the stream limit
                raise MpvDecodeError(f"mpv: reply too long: {e}") from e

            if not line:
                raise MpvDecodeError("mpv: connection closed before a reply was received")
            if not line.endswith(b"\n"):
                raise MpvDecodeError(f"mpv: truncated reply: {line[:80]!r}")

            try:
                message = json.loads(line)
            except ValueError as e:
                raise MpvDecodeError(f"mpv: failed to decode reply: {e}") from e

            if not isinstance(message, dict):
                raise MpvDecodeError(f"mpv: reply is not an object: {message!r}")
            if "event" in message:
                logger.debug(f"Skipping mpv event: {message['event']}")
                continue
            return message

    async def play(self, url: str) -> None:
        """Replace the current media with ``url`` and start playing it.

        No reply is read. A file mpv cannot play shows up on the next status
        read as zero duration and position.
        """
        logger.debug(f"Loading file in mpv: {url}")
        await self._send({"command": ["loadfile", url, "replace"]}, self._no_reply)

    async def get_property(self, name: str, kind: Type[T]) -> T:
        """Read a named property and convert it to ``kind``.

        Args:
            name: mpv property name, e.g. "time-pos"
            kind: Expected Python type: float, bool, dict or str

        Raises:
            MpvConnectionError: Player not reachable
            MpvDecodeError: Malformed reply or unexpected data shape
            MpvPropertyError: mpv reported an error for the property
        """
        reply = await self._send({"command": ["get_property", name]}, self._read_reply)

        error = reply.get("error")
        if error and error != "success":
            raise MpvPropertyError(name, str(error))

        return _convert(name, reply.get("data"), kind)

    async def get_metadata(self) -> TrackMetadata:
        """Read the ``metadata`` property and project title/artist/album."""
        tags = await self.get_property("metadata", dict)
        return TrackMetadata(
            title=str(tags.get("title", "")),
            artist=str(tags.get("artist", "")),
            album=str(tags.get("album", "")),
        )

    async def get_status(self) -> PlaybackStatus:
        """Compose position, duration, metadata and pause into one snapshot.

        Any failing read aborts the whole status; no partial snapshot is
        returned.
        """
        position = await self.get_property("time-pos", float)
        duration = await self.get_property("duration", float)
        metadata = await self.get_metadata()
        paused = await self.get_property("pause", bool)

        return PlaybackStatus(
            position=timedelta(seconds=position),
            duration=timedelta(seconds=duration),
            paused=paused,
            metadata=metadata,
        )
