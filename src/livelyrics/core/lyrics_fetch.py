"""Lyrics fetch pipeline: try each search strategy until synced lyrics turn up."""

from typing import Callable, List, Optional, Sequence, Tuple

from ..exceptions import LookupFailed, LyricsUnavailable, TransientProviderError
from ..utils.logging import get_logger
from .lrc import build_lyric_lines, parse_lyrics
from .models import FetchPhase, FetchResult, SearchStrategy, SongInfo
from .providers import LyricsProviderService
from .search_strategy import plan_search_strategies
from .settings import UserSettings

logger = get_logger(__name__)

Tokenizer = Callable[[str], Sequence[Tuple[str, str]]]


class LyricsFetchPipeline:
    """One fetch run for a (title, artist) pair.

    Moves from IDLE through SEARCHING (one strategy at a time) to SUCCEEDED
    or FAILED. A provider error only ends the current strategy. With a
    positive pagination offset only the first strategy is tried, so paging
    stays within the original query.

    Cancellation is left to the caller: cancelling the task awaiting
    ``run`` stops it at the current provider call.
    """

    def __init__(
        self,
        service: LyricsProviderService,
        settings: UserSettings,
        *,
        tokenizer: Tokenizer = parse_lyrics,
        on_progress: Optional[Callable[[SearchStrategy], None]] = None,
    ):
        self.service = service
        self.settings = settings
        self.tokenizer = tokenizer
        self.on_progress = on_progress
        self.phase = FetchPhase.IDLE
        self.strategy_index = -1

    async def run(self, title: str, artist: str, offset: int = 0) -> FetchResult:
        """Find synced lyrics for the pair.

        Raises:
            LookupFailed: No strategy located the song.
            LyricsUnavailable: A strategy located the song but none yielded
                synced lyrics. Its title/artist are those of the first
                strategy that located the song.
        """
        strategies: List[SearchStrategy] = plan_search_strategies(title, artist)
        if offset > 0:
            strategies = strategies[:1]

        provider = self.settings.selected_provider
        located: Optional[SearchStrategy] = None
        self.phase = FetchPhase.SEARCHING

        for index, strategy in enumerate(strategies):
            self.strategy_index = index
            logger.debug(
                f"[{strategy.label}] Searching {provider.display_name} for "
                f"'{strategy.title}' by '{strategy.artist}' (offset {offset})"
            )
            if self.on_progress:
                self.on_progress(strategy)

            try:
                info = await self._lookup(strategy, offset)
            except TransientProviderError as e:
                logger.debug(f"[{strategy.label}] lookup failed: {e}")
                continue
            if info is None:
                continue
            if located is None:
                located = strategy

            resolved_title = info.song_name or strategy.title
            resolved_artist = info.artist_name or strategy.artist
            try:
                raw = await self._fetch(resolved_title, resolved_artist)
            except TransientProviderError as e:
                logger.debug(f"[{strategy.label}] lyrics fetch failed: {e}")
                continue
            if not raw:
                logger.debug(f"[{strategy.label}] no lyrics for '{resolved_title}'")
                continue

            lines = build_lyric_lines(self.tokenizer(raw))
            if not lines:
                logger.debug(f"[{strategy.label}] lyrics for '{resolved_title}' have no synced lines")
                continue

            self.phase = FetchPhase.SUCCEEDED
            logger.info(
                f"Found {len(lines)} lines for '{resolved_title}' by '{resolved_artist}' "
                f"via [{strategy.label}]"
            )
            return FetchResult(
                title=resolved_title, artist=resolved_artist, lines=lines, strategy=strategy
            )

        self.phase = FetchPhase.FAILED
        if located is not None:
            raise LyricsUnavailable(located.title, located.artist, offset)
        raise LookupFailed(title, artist, offset)

    async def _lookup(self, strategy: SearchStrategy, offset: int) -> Optional[SongInfo]:
        try:
            return await self.service.lookup_song(
                SongInfo(strategy.title, strategy.artist),
                offset,
                self.settings.selected_provider,
            )
        except Exception as e:
            raise TransientProviderError(str(e)) from e

    async def _fetch(self, title: str, artist: str) -> Optional[str]:
        settings = self.settings
        try:
            return await self.service.fetch_synced_lyrics(
                title,
                artist,
                settings.selected_provider,
                settings.include_translation,
                settings.include_romanization,
                settings.multi_person_word_by_word,
                settings.unsynced_fallback,
            )
        except Exception as e:
            raise TransientProviderError(str(e)) from e
