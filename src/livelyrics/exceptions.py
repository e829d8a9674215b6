"""Custom exceptions for livelyrics."""

from typing import Optional


class LiveLyricsError(Exception):
    """Base exception for livelyrics."""
    pass

class ConfigError(LiveLyricsError):
    """Invalid configuration value."""
    pass

class ValidationError(LiveLyricsError):
    """Invalid input parameters."""
    pass

class MalformedTimestamp(LiveLyricsError):
    """A lyric timestamp could not be converted to milliseconds."""
    pass

class TransientProviderError(LiveLyricsError):
    """A provider call raised; treated as a negative result for one strategy."""
    pass


class LyricsError(LiveLyricsError):
    """Error fetching lyrics for a title/artist pair."""

    def __init__(self, message: str, title: str = "", artist: str = "", offset: int = 0):
        super().__init__(message)
        self.title = title
        self.artist = artist
        self.offset = offset


class LookupFailed(LyricsError):
    """No search strategy located the song."""

    def __init__(self, title: str = "", artist: str = "", offset: int = 0):
        if offset > 0:
            message = f"Song not found at result #{offset + 1}."
        else:
            message = "Song not found."
        super().__init__(message, title, artist, offset)


class LyricsUnavailable(LyricsError):
    """The song was located but no strategy produced synced lyrics."""

    def __init__(self, title: str = "", artist: str = "", offset: int = 0,
                 message: Optional[str] = None):
        super().__init__(message or "No synced lyrics found.", title, artist, offset)
