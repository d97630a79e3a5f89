"""
Track Solo - Track Namer

Derives the label used in each variant's file name: the text of the track's
first track-name meta event, or ``track-<index>`` when there is none.

mido decodes meta text with the file's charset (latin-1 unless told
otherwise), which never fails.  To tell real text from binary junk the
original bytes are recovered through that charset and decoded as UTF-8.
"""

from __future__ import annotations

from typing import Iterable

import mido
from loguru import logger

from tracksolo.errors import TextDecodeError

DEFAULT_CHARSET = "latin1"


def fallback_name(index: int) -> str:
    """Positional label for tracks without a usable name."""
    return f"track-{index}"


def decode_meta_text(text: str, charset: str = DEFAULT_CHARSET) -> str:
    """
    Re-decode meta text that mido read with *charset* as UTF-8.

    Raises
    ------
    TextDecodeError
        If the underlying bytes are not valid UTF-8.
    """
    try:
        raw = text.encode(charset)
    except UnicodeEncodeError:
        # Already proper text (document was read with a unicode charset)
        return text
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextDecodeError(f"Track name is not valid UTF-8: {raw!r}") from e


def find_track_name(track: Iterable[mido.Message]) -> str | None:
    """Return the text of the first track-name meta event, or None."""
    for msg in track:
        if msg.type == "track_name":
            return msg.name
    return None


def name_for(
    track: Iterable[mido.Message],
    index: int,
    charset: str = DEFAULT_CHARSET,
) -> str:
    """
    Return the display name for the track at *index*.

    Only the first track-name event counts; later ones are ignored even if
    the first one cannot be decoded.
    """
    raw_name = find_track_name(track)
    if raw_name is None:
        return fallback_name(index)

    try:
        return decode_meta_text(raw_name, charset)
    except TextDecodeError as e:
        logger.debug("🏷️ Track {}: {} — using positional name", index, e)
        return fallback_name(index)
