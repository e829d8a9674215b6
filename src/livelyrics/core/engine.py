"""Live lyrics engine.

Listens to two independent event streams, song changes and playback
snapshots, and keeps a single EngineState up to date for the presentation
layer. Each stream supervises one task of its own (the lyrics fetch and the
position poll) and replaces it whenever a new event arrives: the old task is
cancelled, never awaited.

All state changes happen on the event loop thread, so updates are serialized
without locks.
"""

import asyncio
from typing import List, Optional, Tuple

from ..config import OFFSET_STEP_MS, POLL_INTERVAL_MS, SEARCHING_STATUS
from ..exceptions import LookupFailed, LyricsError, LyricsUnavailable
from ..utils.logging import get_logger
from ..utils.validation import validate_offset, validate_title
from .line_matcher import match_line_index
from .lrc import parse_lyrics
from .lyrics_fetch import LyricsFetchPipeline, Tokenizer
from .models import EngineState, PlaybackSnapshot, Provider, SearchStrategy, SongChange
from .observable import ObservableValue
from .playback import PlaybackTracker, now_ms
from .providers import LyricsProviderService
from .settings import SettingsStore

logger = get_logger(__name__)


def format_offset(offset_ms: int) -> str:
    """Render an offset the way the offset control shows it, e.g. "+300ms"."""
    return f"{'+' if offset_ms >= 0 else ''}{offset_ms}ms"


class LiveLyricsEngine:
    """Keeps lyrics for the playing song aligned with playback.

    Args:
        service: Remote lyrics search/fetch.
        settings_store: Persisted provider choice and feature toggles.
        song_source: Now-playing song changes (None when nothing plays).
        playback_source: Playback snapshots (None when unavailable).
        tokenizer: Splits raw lyrics into (timestamp, text) pairs.
        poll_interval_ms: Position polling period while playing.
        clock: Wall clock in milliseconds.
    """

    def __init__(
        self,
        service: LyricsProviderService,
        settings_store: SettingsStore,
        song_source: Optional[ObservableValue[SongChange]] = None,
        playback_source: Optional[ObservableValue[PlaybackSnapshot]] = None,
        *,
        tokenizer: Tokenizer = parse_lyrics,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        clock=now_ms,
    ):
        self.service = service
        self.settings_store = settings_store
        self.song_source = song_source
        self.playback_source = playback_source
        self.tokenizer = tokenizer
        self.states: ObservableValue[EngineState] = ObservableValue(EngineState())

        self._tracker = PlaybackTracker(
            self._update_current_line,
            self._set_playing,
            poll_interval_ms=poll_interval_ms,
            clock=clock,
        )
        self._fetch_task: Optional[asyncio.Task] = None
        self._subscriptions: List[asyncio.Task] = []

        self._query_offset = 0
        # Raw pair of the current song or manual query
        self._seed: Optional[Tuple[str, str]] = None
        # Query that located the song on the last fetch, used for paging
        self._located_query: Optional[Tuple[str, str]] = None
        self._last_failure: Optional[LyricsError] = None

    # ----------------------
    # State
    # ----------------------
    @property
    def state(self) -> EngineState:
        return self.states.value  # type: ignore[return-value]

    @property
    def query_offset(self) -> int:
        return self._query_offset

    @property
    def is_fetching(self) -> bool:
        return self._fetch_task is not None and not self._fetch_task.done()

    def _update(self, **changes) -> None:
        self.states.set(self.state.copy(**changes))

    # ----------------------
    # Lifecycle
    # ----------------------
    async def start(self) -> None:
        """Subscribe to the injected song and playback sources."""
        if self.song_source is not None:
            self._subscriptions.append(asyncio.create_task(self._watch_songs()))
        if self.playback_source is not None:
            self._subscriptions.append(asyncio.create_task(self._watch_playback()))

    async def stop(self) -> None:
        """Cancel subscriptions and any outstanding work."""
        tasks = list(self._subscriptions)
        if self._fetch_task is not None:
            tasks.append(self._fetch_task)
        for task in tasks:
            task.cancel()
        self._tracker.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._subscriptions.clear()
        self._fetch_task = None

    async def __aenter__(self) -> "LiveLyricsEngine":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def _watch_songs(self) -> None:
        async for song in self.song_source.subscribe():  # type: ignore[union-attr]
            self.on_song_changed(song)

    async def _watch_playback(self) -> None:
        async for snapshot in self.playback_source.subscribe():  # type: ignore[union-attr]
            self.on_playback_info(snapshot)

    # ----------------------
    # Commands
    # ----------------------
    def on_song_changed(self, song: Optional[SongChange]) -> None:
        """Start over for a new song; None clears everything."""
        self._cancel_fetch()
        self._query_offset = 0
        self._located_query = None
        self._last_failure = None

        if song is None:
            logger.debug("No song playing; resetting state")
            self._seed = None
            self.states.set(EngineState())
            return

        logger.info(f"Song changed: '{song.title}' by '{song.artist}'")
        self._seed = (song.title, song.artist)
        self._update(
            song_title=song.title,
            song_artist=song.artist,
            cover_art=song.cover_art,
            lrc_offset_ms=0,
        )
        self._start_fetch(song.title, song.artist)

    def on_playback_info(self, snapshot: Optional[PlaybackSnapshot]) -> None:
        """Feed a playback snapshot; None stops position tracking."""
        self._tracker.feed(snapshot)

    def set_provider(self, provider: Provider) -> None:
        """Switch provider and search again from the first result."""
        # Always offset 0 from the seed, unlike force_refresh which pages after a success
        self.settings_store.update_selected_provider(provider)
        self._query_offset = 0
        if self._seed is None:
            return
        logger.info(f"Provider changed to {provider.display_name}")
        self._located_query = None
        self._start_fetch(*self._seed)

    def force_refresh(self) -> None:
        """Try again: start over after "not found", otherwise page to the next result."""
        if self._seed is None:
            return

        if isinstance(self._last_failure, LookupFailed):
            self._query_offset = 0
            title, artist = self._seed
        else:
            self._query_offset += 1
            title, artist = self._located_query or self._seed
        logger.debug(f"Refreshing '{title}' by '{artist}' at offset {self._query_offset}")
        self._start_fetch(title, artist)

    def set_manual_query(self, title: str, artist: str) -> None:
        """Search for a user-supplied pair instead of the player's metadata."""
        title = validate_title(title)
        artist = (artist or "").strip()
        self._query_offset = 0
        self._seed = (title, artist)
        self._located_query = None
        self._update(song_title=title, song_artist=artist)
        self._start_fetch(title, artist)

    def set_offset(self, offset_ms: int) -> None:
        """Store a new lyrics offset; a paused song is re-matched at once."""
        offset_ms = validate_offset(offset_ms)
        self._update(lrc_offset_ms=offset_ms)
        if not self._tracker.is_polling:
            self._update_current_line(self.state.current_position_ms)

    def nudge_offset(self, delta_ms: int = OFFSET_STEP_MS) -> None:
        self.set_offset(self.state.lrc_offset_ms + delta_ms)

    # ----------------------
    # Fetching
    # ----------------------
    def _cancel_fetch(self) -> None:
        if self._fetch_task is not None and not self._fetch_task.done():
            logger.debug("Cancelling lyrics fetch in flight")
            self._fetch_task.cancel()
        self._fetch_task = None

    def _start_fetch(self, title: str, artist: str) -> None:
        self._cancel_fetch()
        self._last_failure = None
        self._update(
            is_loading=True,
            lines=(),
            current_line_index=-1,
            status_text=SEARCHING_STATUS,
        )
        self._fetch_task = asyncio.create_task(
            self._run_fetch(title, artist, self._query_offset)
        )

    async def _run_fetch(self, title: str, artist: str, offset: int) -> None:
        pipeline = LyricsFetchPipeline(
            self.service,
            self.settings_store.settings,
            tokenizer=self.tokenizer,
            on_progress=self._show_strategy,
        )
        try:
            result = await pipeline.run(title, artist, offset)
        except LyricsError as e:
            logger.info(f"Lyrics fetch for '{title}' by '{artist}' failed: {e}")
            self._last_failure = e
            if isinstance(e, LyricsUnavailable):
                self._located_query = (e.title, e.artist)
            self._update(is_loading=False, status_text=str(e))
            return

        self._located_query = result.strategy.key
        self._update(
            song_title=result.title,
            song_artist=result.artist,
            lines=result.lines,
            current_line_index=-1,
            is_loading=False,
            status_text="",
        )
        position = self._tracker.current_position()
        if position is None:
            position = self.state.current_position_ms
        self._update_current_line(position)

    def _show_strategy(self, strategy: SearchStrategy) -> None:
        self._update(
            song_title=strategy.title,
            song_artist=strategy.artist,
            status_text=f"[{strategy.label}] {SEARCHING_STATUS}",
        )

    # ----------------------
    # Playback
    # ----------------------
    def _set_playing(self, is_playing: bool) -> None:
        if self.state.is_playing != is_playing:
            self._update(is_playing=is_playing)

    def _update_current_line(self, position_ms: int) -> None:
        state = self.state
        changes = {"current_position_ms": position_ms}
        if state.lines:
            index = match_line_index(state.lines, position_ms, state.lrc_offset_ms)
            if index != -1 and index != state.current_line_index:
                changes["current_line_index"] = index
        self.states.set(state.copy(**changes))
