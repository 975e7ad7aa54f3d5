"""Periodic playback status polling."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from src.errors import NavituiError
from src.mpv.models import PlaybackStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


class StatusPoller:
    """Read the playback status on a fixed interval and keep the latest one.

    A failed tick does not stop the poller; it is logged and the next tick
    tries again. While the most recent tick has failed, ``current()`` raises
    that failure instead of handing out the previous snapshot.

    Example:
        >>> poller = StatusPoller(player.get_status)
        >>> poller.start()
        >>> ...
        >>> status = poller.current()
        >>> await poller.stop()
    """

    def __init__(
        self,
        read_status: Callable[[], Awaitable[PlaybackStatus]],
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self._read_status = read_status
        self.interval = interval
        self._status: Optional[PlaybackStatus] = None
        self._error: Optional[Exception] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def current(self) -> Optional[PlaybackStatus]:
        """Return the latest snapshot, or None if no poll has completed yet.

        Raises:
            Exception: The most recent poll failed (normally a NavituiError)
        """
        if self._error is not None:
            raise self._error
        return self._status

    async def poll_once(self) -> PlaybackStatus:
        """Read the status now and record the outcome."""
        try:
            status = await self._read_status()
        except Exception as e:
            self._status = None
            self._error = e
            raise
        self._status = status
        self._error = None
        return status

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except NavituiError as e:
                logger.debug(f"Status poll failed: {e}")
            except Exception:
                logger.exception("Unexpected error while polling status")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start polling in a background task of the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(f"Started status poller every {self.interval}s")

    async def stop(self) -> None:
        """Stop polling and wait for the background task to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Stopped status poller")

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
