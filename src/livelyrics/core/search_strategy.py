"""Ordered search strategies for repairing noisy song metadata."""

from typing import List

from ..utils.logging import get_logger
from .models import SearchStrategy
from .sanitizer import (
    is_artist_suspicious,
    split_artist_from_title,
    strip_all_brackets,
    strip_junk_tags,
)

logger = get_logger(__name__)

ORIGINAL = "Original"
FIX_SUSPICIOUS_ARTIST = "Fixing 'Unknown' Artist"
CLEANED = "Removing Junk Text"
CLEANED_AND_SPLIT = "Cleaning & Fixing Artist"
AGGRESSIVE_FILTER = "Aggressive Filtering"


def plan_search_strategies(title: str, artist: str) -> List[SearchStrategy]:
    """Build the list of (title, artist) queries to try for a song.

    Least destructive first: the raw pair, then the artist fix, then junk
    removal, then cleanup plus artist fix, and finally stripping every
    bracket. A candidate identical to an earlier one is not repeated.
    """
    strategies: List[SearchStrategy] = []
    seen = set()

    def add(label: str, new_title: str, new_artist: str) -> None:
        key = (new_title, new_artist)
        if key in seen:
            return
        seen.add(key)
        strategies.append(SearchStrategy(label, new_title, new_artist))

    add(ORIGINAL, title, artist)

    if is_artist_suspicious(artist):
        split_title, split_artist = split_artist_from_title(title)
        if split_artist is not None:
            add(FIX_SUSPICIOUS_ARTIST, split_title, split_artist)

    cleaned_title = strip_junk_tags(title)
    cleaned_artist = strip_junk_tags(artist)
    if cleaned_title != title or cleaned_artist != artist:
        add(CLEANED, cleaned_title, cleaned_artist)

    if is_artist_suspicious(cleaned_artist):
        split_title, split_artist = split_artist_from_title(cleaned_title)
        if split_artist is not None:
            add(CLEANED_AND_SPLIT, split_title, split_artist)

    bare_title = strip_all_brackets(title)
    if bare_title != cleaned_title and bare_title.strip():
        add(AGGRESSIVE_FILTER, bare_title, cleaned_artist)

    logger.debug(
        f"Planned {len(strategies)} strategies for '{title}' / '{artist}': "
        + ", ".join(s.label for s in strategies)
    )
    return strategies
