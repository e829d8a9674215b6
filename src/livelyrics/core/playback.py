"""Extrapolate the live playback position from player snapshots."""

import asyncio
import time
from typing import Callable, Optional

from ..config import POLL_INTERVAL_MS
from ..utils.logging import get_logger
from .models import PlaybackSnapshot

logger = get_logger(__name__)


def now_ms() -> int:
    """Wall clock in milliseconds."""
    return int(time.time() * 1000)


class PlaybackTracker:
    """Turns playback snapshots into a stream of positions.

    While playing, a polling task reports the extrapolated position every
    ``poll_interval_ms``. Each iteration re-reads the latest snapshot, so
    seeks and speed changes apply without restarting. When paused, the
    snapshot's position is reported once. Every new snapshot cancels the
    running poll before deciding what to do next.
    """

    def __init__(
        self,
        on_position: Callable[[int], None],
        on_playing: Callable[[bool], None],
        *,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self._on_position = on_position
        self._on_playing = on_playing
        self._poll_interval = poll_interval_ms / 1000.0
        self._clock = clock
        self._latest: Optional[PlaybackSnapshot] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def latest(self) -> Optional[PlaybackSnapshot]:
        return self._latest

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    def current_position(self) -> Optional[int]:
        """Position implied by the latest snapshot right now, if any."""
        if self._latest is None:
            return None
        return self._latest.position_at(self._clock())

    def feed(self, snapshot: Optional[PlaybackSnapshot]) -> None:
        """Handle a new snapshot from the player; None stops tracking."""
        self.cancel()
        self._latest = snapshot
        if snapshot is None:
            return

        self._on_playing(snapshot.is_playing)
        if snapshot.is_playing:
            self._task = asyncio.create_task(self._poll())
        else:
            self._on_position(snapshot.base_position_ms)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _poll(self) -> None:
        while True:
            snapshot = self._latest
            if snapshot is None or not snapshot.is_playing:
                break
            self._on_position(snapshot.position_at(self._clock()))
            await asyncio.sleep(self._poll_interval)
