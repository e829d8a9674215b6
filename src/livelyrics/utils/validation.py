"""Validation utilities."""

import logging

from ..config import OFFSET_MAX_MS, OFFSET_MIN_MS
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_offset(offset_ms: int) -> int:
    """Validate a lyric timing offset in milliseconds, clamping it to 32 bits."""
    if isinstance(offset_ms, bool) or not isinstance(offset_ms, int):
        raise ValidationError(f"Lyrics offset must be an integer, got {offset_ms!r}")
    clamped = max(OFFSET_MIN_MS, min(OFFSET_MAX_MS, offset_ms))
    if clamped != offset_ms:
        logger.debug(f"Clamped lyrics offset {offset_ms} to {clamped}")
    return clamped


def validate_title(title: str) -> str:
    """Validate a manually entered song title."""
    if not title or not title.strip():
        raise ValidationError("Title cannot be empty")
    return title.strip()
