"""LRC tokenizing and timestamp conversion.

This module handles:
- Splitting raw LRC text into (timestamp, text) pairs
- Normalizing timestamps to ``mm:ss.xxx``
- Converting timestamps to milliseconds
- Building LyricLine objects for the engine
"""

import re
from typing import Iterable, List, Tuple

from ..exceptions import MalformedTimestamp
from ..utils.logging import get_logger
from .models import LyricLine

logger = get_logger(__name__)

# ----------------------
# LRC timestamp regex
# ----------------------
_LRC_TS_RE = re.compile(
    r"""
    \[                        # opening bracket
    (?P<min>\d+)              # minutes
    :
    (?P<sec>[0-5]?\d)         # seconds
    (?:[.:](?P<frac>\d{1,3}))?  # optional fractional seconds
    \]                        # closing bracket
    """,
    re.VERBOSE,
)

# Metadata tags such as [ar:Artist] or [offset:+200]
_LRC_META_RE = re.compile(r"^\[[a-zA-Z#]+:.*\]\s*$")

_TIMESTAMP_RE = re.compile(r"^(\d+):(\d{1,2})\.(\d{1,3})$")


def _normalize_timestamp(minutes: str, seconds: str, frac: str) -> str:
    # ".5" means 500 ms and ".05" means 50 ms, so pad on the right
    millis = (frac or "0").ljust(3, "0")
    return f"{int(minutes):02d}:{int(seconds):02d}.{millis}"


def parse_lyrics(lrc_text: str) -> List[Tuple[str, str]]:
    """Split raw LRC text into ``(timestamp, text)`` pairs sorted by time.

    Lines carrying several timestamps expand to one pair per timestamp.
    Metadata tags and untimed lines are dropped.
    """
    if not lrc_text:
        return []

    entries: List[Tuple[int, int, str, str]] = []
    for order, raw_line in enumerate(lrc_text.splitlines()):
        line = raw_line.strip()
        if not line or _LRC_META_RE.match(line):
            continue

        stamps = []
        pos = 0
        while True:
            match = _LRC_TS_RE.match(line, pos)
            if not match:
                break
            stamps.append(
                _normalize_timestamp(match.group("min"), match.group("sec"), match.group("frac"))
            )
            pos = match.end()
        if not stamps:
            continue

        text = line[pos:].strip()
        for stamp in stamps:
            entries.append((timestamp_to_millis(stamp), order, stamp, text))

    entries.sort(key=lambda e: (e[0], e[1]))
    return [(stamp, text) for _, _, stamp, text in entries]


def timestamp_to_millis(timestamp: str) -> int:
    """Convert ``minutes:seconds.milliseconds`` to milliseconds.

    Raises:
        MalformedTimestamp: If the string does not have that shape.
    """
    match = _TIMESTAMP_RE.match(timestamp.strip()) if isinstance(timestamp, str) else None
    if not match:
        raise MalformedTimestamp(f"Malformed timestamp: {timestamp!r}")
    minutes, seconds, millis = (int(g) for g in match.groups())
    return minutes * 60000 + seconds * 1000 + millis


def build_lyric_lines(pairs: Iterable[Tuple[str, str]]) -> Tuple[LyricLine, ...]:
    """Turn tokenizer output into LyricLine objects, keeping the given order.

    A line whose timestamp cannot be converted is kept with ``offset_ms=None``.
    """
    lines = []
    for timestamp, text in pairs:
        try:
            offset_ms = timestamp_to_millis(timestamp)
        except MalformedTimestamp as e:
            logger.debug(f"Skipping timing for line {text!r}: {e}")
            offset_ms = None
        lines.append(LyricLine(timestamp=timestamp, text=text, offset_ms=offset_ms))
    return tuple(lines)
