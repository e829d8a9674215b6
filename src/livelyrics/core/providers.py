"""Lyrics provider service used by the fetch pipeline.

LRCLib is queried with aiohttp, so cancelling the awaiting task aborts the
request. syncedlyrics has no async API and runs in a worker thread.
"""

import asyncio
from typing import Any, Optional, Protocol

import aiohttp
import syncedlyrics

from ..config import HTTP_TIMEOUT, LRCLIB_SEARCH_LIMIT, LRCLIB_URL, USER_AGENT
from ..utils.logging import get_logger
from .models import Provider, SongInfo

logger = get_logger(__name__)

# Names syncedlyrics uses for each provider
SYNCEDLYRICS_NAMES = {
    Provider.MUSIXMATCH: "Musixmatch",
    Provider.NETEASE: "NetEase",
    Provider.MEGALOBIZ: "Megalobiz",
}


class LyricsProviderService(Protocol):
    """Remote lyrics search and fetch, as seen by the engine."""

    async def lookup_song(
        self, query: SongInfo, offset: int, provider: Provider
    ) -> Optional[SongInfo]: ...

    async def fetch_synced_lyrics(
        self,
        title: str,
        artist: str,
        provider: Provider,
        include_translation: bool = False,
        include_romanization: bool = False,
        word_by_word: bool = False,
        unsynced_fallback: bool = False,
    ) -> Optional[str]: ...


class DefaultProviderService:
    """LRCLib over its HTTP API, other providers through syncedlyrics.

    Only LRCLib has a separate search step, so pagination offsets only
    apply there; other providers answer offset 0 with the query itself.

    Pass ``session`` to reuse one ``aiohttp.ClientSession``; otherwise each
    request opens and closes its own.
    """

    def __init__(
        self,
        base_url: str = LRCLIB_URL,
        timeout: float = HTTP_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
        translation_language: str = "en",
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session
        self.headers = {"User-Agent": USER_AGENT}
        self.translation_language = translation_language

    async def lookup_song(
        self, query: SongInfo, offset: int, provider: Provider
    ) -> Optional[SongInfo]:
        if provider != Provider.LRCLIB:
            if offset > 0:
                logger.debug(f"{provider.display_name} has no result paging")
                return None
            return query

        items = await self._lrclib_search(query.song_name or "", query.artist_name or "")
        if offset >= len(items):
            logger.debug(f"LRCLib returned {len(items)} results, none at offset {offset}")
            return None
        item = items[offset]
        return SongInfo(song_name=item.get("trackName"), artist_name=item.get("artistName"))

    async def fetch_synced_lyrics(
        self,
        title: str,
        artist: str,
        provider: Provider,
        include_translation: bool = False,
        include_romanization: bool = False,
        word_by_word: bool = False,
        unsynced_fallback: bool = False,
    ) -> Optional[str]:
        if include_romanization:
            logger.debug(f"{provider.display_name} does not offer romanization; ignoring")

        if provider == Provider.LRCLIB:
            data = await self._lrclib_get(title, artist)
            if not data:
                return None
            synced = (data.get("syncedLyrics") or "").strip() or None
            if synced or not unsynced_fallback:
                return synced
            return (data.get("plainLyrics") or "").strip() or None

        lang = self.translation_language if include_translation else None
        return await asyncio.to_thread(
            syncedlyrics.search,
            f"{title} {artist}".strip(),
            providers=[SYNCEDLYRICS_NAMES[provider]],
            synced_only=not unsynced_fallback,
            enhanced=word_by_word,
            lang=lang,
        )

    # ----------------------
    # LRCLib HTTP
    # ----------------------
    async def _lrclib_search(self, title: str, artist: str) -> list[dict]:
        # GET /api/search?track_name=...&artist_name=...
        params = {"track_name": title}
        if artist:
            params["artist_name"] = artist
        data = await self._get_json("/api/search", params)
        return data[:LRCLIB_SEARCH_LIMIT] if isinstance(data, list) else []

    async def _lrclib_get(self, title: str, artist: str) -> Optional[dict]:
        # GET /api/get?track_name=...&artist_name=...
        data = await self._get_json("/api/get", {"track_name": title, "artist_name": artist})
        return data if isinstance(data, dict) else None

    async def _get_json(self, path: str, params: dict) -> Any:
        """GET a LRCLib endpoint; 404 is None, other HTTP errors raise."""
        if self.session is not None:
            return await self._request(self.session, path, params)
        async with aiohttp.ClientSession() as session:
            return await self._request(session, path, params)

    async def _request(self, session, path: str, params: dict) -> Any:
        async with session.get(
            f"{self.base_url}{path}",
            params=params,
            headers=self.headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as response:
            if response.status == 404:
                return None
            response.raise_for_status()
            return await response.json(content_type=None)
