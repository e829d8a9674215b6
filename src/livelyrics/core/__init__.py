"""Core functionality modules."""

from .engine import LiveLyricsEngine
from .models import EngineState, LyricLine, PlaybackSnapshot, Provider, SearchStrategy, SongChange

__all__ = [
    "LiveLyricsEngine",
    "EngineState",
    "LyricLine",
    "PlaybackSnapshot",
    "Provider",
    "SearchStrategy",
    "SongChange",
]
