"""Configuration settings for livelyrics."""

import os
from pathlib import Path

from .exceptions import ConfigError

# Directories
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "livelyrics"
SETTINGS_FILENAME = "settings.json"

# Playback tracking (can be overridden via environment variables)
POLL_INTERVAL_MS = int(os.getenv("LIVELYRICS_POLL_INTERVAL_MS", "200"))

# Provider settings
DEFAULT_PROVIDER = os.getenv("LIVELYRICS_PROVIDER", "lrclib")
LRCLIB_URL = os.getenv("LIVELYRICS_LRCLIB_URL", "https://lrclib.net")
HTTP_TIMEOUT = float(os.getenv("LIVELYRICS_HTTP_TIMEOUT", "10"))
USER_AGENT = "livelyrics/0.1 (https://github.com/livelyrics/livelyrics)"
LRCLIB_SEARCH_LIMIT = 20

# Display text
NO_SONG_TITLE = "Listening for music..."
SEARCHING_STATUS = "Searching..."

# Offset tuning
OFFSET_STEP_MS = 100
# Offsets are signed 32-bit; larger values are clamped
OFFSET_MIN_MS = -(2**31)
OFFSET_MAX_MS = 2**31 - 1

# Artist strings that mean the player did not know the artist
PLACEHOLDER_ARTISTS = {"<unknown>", "n/a", "null"}

# Bracketed spans starting with one of these words are promotional/technical junk
JUNK_KEYWORDS = [
    "official",
    "video",
    "lyrics",
    "lyric",
    "visualizer",
    "audio",
    "music video",
    "mv",
    "topic",
    "hd",
    "hq",
    "4k",
    "1080p",
    "remastered",
    "remaster",
    "live",
    "session",
    "performance",
    "concert",
    "cover",
    "remix",
    "mix",
    "edit",
    "extended",
    "radio",
    "instrumental",
    "karaoke",
    "version",
    "clean",
    "explicit",
]


def validate_config() -> None:
    """Validate configuration values."""
    if POLL_INTERVAL_MS <= 0:
        raise ConfigError("Poll interval must be positive")

    if HTTP_TIMEOUT <= 0:
        raise ConfigError("Invalid HTTP timeout")

    if not LRCLIB_URL.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid LRCLIB URL: {LRCLIB_URL}")


def get_config_dir() -> Path:
    """Get config directory from environment or default."""
    config_dir = os.getenv("LIVELYRICS_CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return DEFAULT_CONFIG_DIR


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


# Validate config on import
validate_config()
