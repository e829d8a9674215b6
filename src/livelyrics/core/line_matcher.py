"""Map a playback position onto the active lyric line."""

from typing import Sequence

from .models import LyricLine


def match_line_index(lines: Sequence[LyricLine], position_ms: int, offset_ms: int = 0) -> int:
    """Return the index of the line playing at ``position_ms``.

    A positive ``offset_ms`` delays the lyrics. The result is the last line
    whose timestamp is at or before ``position_ms - offset_ms``, or -1 when
    no line qualifies. Lines without a usable timestamp never qualify.
    """
    effective_ms = position_ms - offset_ms
    for index in range(len(lines) - 1, -1, -1):
        line_ms = lines[index].offset_ms
        if line_ms is not None and line_ms <= effective_ms:
            return index
    return -1
