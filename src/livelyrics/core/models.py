"""Data models for the live lyrics engine."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple

from ..config import NO_SONG_TITLE


class Provider(str, Enum):
    """Lyrics provider the engine searches."""

    LRCLIB = "lrclib"
    MUSIXMATCH = "musixmatch"
    NETEASE = "netease"
    MEGALOBIZ = "megalobiz"

    @property
    def display_name(self) -> str:
        return {
            Provider.LRCLIB: "LRCLib",
            Provider.MUSIXMATCH: "Musixmatch",
            Provider.NETEASE: "NetEase",
            Provider.MEGALOBIZ: "Megalobiz",
        }[self]

    @classmethod
    def parse(cls, name: str) -> "Provider":
        """Look up a provider by value or display name, case-insensitively."""
        key = name.strip().lower()
        for provider in cls:
            if key in (provider.value, provider.display_name.lower()):
                return provider
        raise ValueError(f"Unknown provider: {name}")


class FetchPhase(str, Enum):
    """States of one lyrics fetch pipeline run."""

    IDLE = "idle"
    SEARCHING = "searching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class LyricLine:
    """One synced lyric line.

    ``offset_ms`` is None when the timestamp could not be converted; such a
    line is displayed but never selected.
    """

    timestamp: str
    text: str
    offset_ms: Optional[int] = None


@dataclass(frozen=True)
class SearchStrategy:
    """A candidate (title, artist) query tried by the fetch pipeline."""

    label: str
    title: str
    artist: str

    @property
    def key(self) -> Tuple[str, str]:
        return (self.title, self.artist)


@dataclass(frozen=True)
class SongInfo:
    """Song identity as queried or as resolved by a provider."""

    song_name: Optional[str] = None
    artist_name: Optional[str] = None


@dataclass(frozen=True)
class SongChange:
    """A now-playing change reported by the playback source."""

    title: str
    artist: str
    cover_art: Any = None


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Playback position reported by the player at wall-clock ``base_time_ms``."""

    is_playing: bool
    base_position_ms: int
    base_time_ms: int
    speed: float = 1.0

    def position_at(self, now_ms: int) -> int:
        """Extrapolate the playback position at wall-clock ``now_ms``."""
        if not self.is_playing:
            return self.base_position_ms
        return self.base_position_ms + int((now_ms - self.base_time_ms) * self.speed)


@dataclass(frozen=True)
class FetchResult:
    """Successful outcome of a fetch pipeline run."""

    title: str
    artist: str
    lines: Tuple[LyricLine, ...]
    strategy: SearchStrategy


@dataclass(frozen=True)
class EngineState:
    """Snapshot of everything the presentation layer displays.

    Replaced as a whole on every update; use ``copy`` to derive a new one.
    """

    song_title: str = NO_SONG_TITLE
    song_artist: str = ""
    cover_art: Any = None
    lines: Tuple[LyricLine, ...] = field(default_factory=tuple)
    status_text: str = ""
    current_line_index: int = -1
    is_loading: bool = False
    is_playing: bool = False
    current_position_ms: int = 0
    lrc_offset_ms: int = 0

    def copy(self, **changes: Any) -> "EngineState":
        return replace(self, **changes)

    @property
    def has_song(self) -> bool:
        return self.song_title != NO_SONG_TITLE

    @property
    def current_line(self) -> Optional[LyricLine]:
        if 0 <= self.current_line_index < len(self.lines):
            return self.lines[self.current_line_index]
        return None
