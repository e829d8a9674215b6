"""Metadata cleanup for noisy now-playing titles and artists.

Players often report "Unknown Artist", put the artist inside the title
("Artist - Title"), or append promotional tags like "(Official Video)".
These helpers are pure and total: input they cannot improve comes back
unchanged.
"""

import re
from typing import Optional, Tuple

from ..config import JUNK_KEYWORDS, PLACEHOLDER_ARTISTS

# ----------------------
# Patterns
# ----------------------
_SEPARATOR_RE = re.compile(r"\s+[-–]\s+")

_JUNK_TAG_RE = re.compile(
    r"[(\[]\s*(?:"
    + "|".join(re.escape(k) for k in sorted(JUNK_KEYWORDS, key=len, reverse=True))
    + r").*?[)\]]",
    re.IGNORECASE,
)

# "(feat. Someone)" / "[ft. Someone]"
_BRACKETED_FEAT_RE = re.compile(
    r"[(\[]\s*(?:feat\.?|ft\.?|featuring)\s[^)\]]*[)\]]", re.IGNORECASE
)

# Trailing "feat. Someone" clause
_FEAT_RE = re.compile(r"\s(?:feat\.?|ft\.?|featuring)\s.*", re.IGNORECASE)

_ANY_BRACKET_RE = re.compile(r"[(\[].*?[)\]]")


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def is_artist_suspicious(artist: Optional[str]) -> bool:
    """Return True when the artist looks like a player placeholder."""
    if artist is None:
        return True
    lower = artist.strip().lower()
    return (
        not lower
        or lower in PLACEHOLDER_ARTISTS
        or "unknown" in lower
        or "various" in lower
    )


def split_artist_from_title(title: str) -> Tuple[str, Optional[str]]:
    """Split an "Artist - Title" string.

    Supports hyphen and en-dash separators surrounded by whitespace. Further
    separators stay in the title, rejoined with " - ".

    Returns:
        (title, artist), with artist None when no separator was found.
    """
    if not isinstance(title, str):
        return title, None

    parts = _SEPARATOR_RE.split(title)
    if len(parts) < 2:
        return title, None

    artist = parts[0].strip()
    new_title = " - ".join(parts[1:]).strip()
    if not artist or not new_title:
        return title, None
    return new_title, artist


def strip_junk_tags(text: str) -> str:
    """Remove promotional/technical bracketed tags and a trailing "feat." clause."""
    if not isinstance(text, str) or not text:
        return text

    cleaned = _JUNK_TAG_RE.sub(" ", text)
    cleaned = _BRACKETED_FEAT_RE.sub(" ", cleaned)
    cleaned = _FEAT_RE.sub("", cleaned)
    return _collapse(cleaned)


def strip_all_brackets(text: str) -> str:
    """Remove every bracketed or parenthesized span, whatever it contains."""
    if not isinstance(text, str) or not text:
        return text
    return _collapse(_ANY_BRACKET_RE.sub(" ", text))
