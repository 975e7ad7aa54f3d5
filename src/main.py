"""
navitui - Command Line Interface

Loads the Navidrome catalog and controls an mpv process that was started
with ``--input-ipc-server`` pointing at NAVITUI_MPV_SOCKET.

Commands:
    tracks          Load the catalog and print every track
    play SONG_ID    Load the catalog and play a track
    status          Print the current playback status once
    watch           Print the playback status every second

Environment:
    NAVIDROME_URL, NAVIDROME_USER, NAVIDROME_PASSWORD (required)
    NAVITUI_MPV_SOCKET, NAVITUI_LOAD_TIMEOUT, NAVITUI_LOG_LEVEL, NAVITUI_LOG_FILE
"""

import argparse
import asyncio
import logging
import sys
from datetime import timedelta
from typing import List, Optional

from src.config import NavituiConfig
from src.errors import ConfigurationError, NavituiError, TransportError
from src.logger import setup_logging
from src.mpv.client import MpvClient
from src.mpv.models import PlaybackStatus
from src.session.poller import StatusPoller
from src.session.session import Session

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="navitui",
        description="Browse a Navidrome catalog and control mpv",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("tracks", help="Load the catalog and print every track")
    play = subparsers.add_parser("play", help="Load the catalog and play a track")
    play.add_argument("song_id", help="Opaque track identifier (see 'tracks')")
    subparsers.add_parser("status", help="Print the current playback status")
    watch = subparsers.add_parser("watch", help="Print the playback status periodically")
    watch.add_argument(
        "--interval",
        type=float,
        default=1.0,
        metavar="SECONDS",
        help="Seconds between polls (default: 1.0)",
    )

    return parser


def format_duration(value: timedelta) -> str:
    """Format a duration as M:SS (or H:MM:SS).

    Examples:
        >>> format_duration(timedelta(seconds=125.4))
        '2:05'
        >>> format_duration(timedelta(hours=1, seconds=3))
        '1:00:03'
    """
    seconds = int(value.total_seconds())
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_status(status: PlaybackStatus) -> str:
    """Render a status snapshot as one line."""
    state = "playing" if status.playing else ("paused" if status.paused else "stopped")
    meta = status.metadata
    title = " - ".join(part for part in (meta.artist, meta.title) if part) or "(no metadata)"
    album = f" [{meta.album}]" if meta.album else ""
    return (
        f"{state:<8} {format_duration(status.position)} / {format_duration(status.duration)}"
        f"  {title}{album}"
    )


def display_error(error: Exception) -> None:
    """
    Display error message with appropriate context.

    Args:
        error: Exception that occurred
    """
    if isinstance(error, ConfigurationError):
        print(f"Configuration error: {error}", file=sys.stderr)
        print("Please check NAVIDROME_URL, NAVIDROME_USER and NAVIDROME_PASSWORD.", file=sys.stderr)
    elif isinstance(error, TransportError):
        print(f"Connection error: {error}", file=sys.stderr)
        print("Is the server reachable and is mpv running with --input-ipc-server?", file=sys.stderr)
    else:
        print(f"Error: {error}", file=sys.stderr)


async def print_tracks(config: NavituiConfig) -> int:
    async with await Session.start(config) as session:
        for song in session.tracks:
            print(f"{song.id}\t{song.artist}\t{song.album}\t{song.title}\t{song.genre}")
        print(f"Successfully loaded {session.catalog.total} songs")
    return 0


async def play_track(config: NavituiConfig, song_id: str) -> int:
    async with await Session.start(config) as session:
        song = await session.play_by_id(song_id)
        print(f"Playing {song.artist} - {song.title}")
    return 0


async def print_status(config: NavituiConfig) -> int:
    status = await MpvClient(config.mpv_socket).get_status()
    print(format_status(status))
    return 0


async def watch_status(config: NavituiConfig, interval: float) -> int:
    """Print the status every ``interval`` seconds until cancelled."""
    player = MpvClient(config.mpv_socket)
    async with StatusPoller(player.get_status, interval=interval) as poller:
        while True:
            await asyncio.sleep(interval)
            try:
                status = poller.current()
            except NavituiError as e:
                print(f"status unavailable: {e}", file=sys.stderr)
                continue
            if status is not None:
                print(format_status(status))


async def async_main(args: argparse.Namespace) -> int:
    """
    Async main function.

    Args:
        args: Parsed CLI arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = NavituiConfig.from_environment()

        if args.command == "tracks":
            return await print_tracks(config)
        if args.command == "play":
            return await play_track(config, args.song_id)
        if args.command == "status":
            return await print_status(config)
        return await watch_status(config, args.interval)

    except NavituiError as e:
        display_error(e)
        if args.verbose:
            logger.exception("Detailed error traceback:")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        print()
        return 0 if args.command == "watch" else 1


if __name__ == "__main__":
    sys.exit(main())
