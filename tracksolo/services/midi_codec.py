"""
Track Solo - SMF Codec

Thin wrapper around ``mido`` that turns raw Standard MIDI File bytes into a
``mido.MidiFile`` and back again, translating every library failure into a
``FormatError`` so the rest of the pipeline only has one error to care about.

mido writes a canonical form (running status where possible, an explicit
end-of-track on every track), so files written by other tools do not survive
``encode(decode(x))`` byte for byte.  Tracks that must stay untouched are
therefore carried over as raw chunks: ``split_track_chunks`` cuts a file into
its header and ``MTrk`` chunks and ``join_track_chunks`` puts them back.

Dependencies: ``mido`` (pure-Python MIDI parser, no C dependencies).
"""

from __future__ import annotations

import io
import struct
from typing import Iterable

import mido
from loguru import logger
from mido.midifiles.meta import KeySignatureError

from tracksolo.errors import FormatError

# Exceptions mido raises for malformed input:
#   OSError           - missing MThd, data byte > 127, bad chunk
#   EOFError          - truncated header or track data
#   struct.error      - short header fields
#   KeySignatureError - key signature meta with no matching key
#   ValueError / KeyError / IndexError - malformed message or meta payloads
_PARSE_ERRORS = (
    OSError,
    EOFError,
    struct.error,
    KeySignatureError,
    ValueError,
    KeyError,
    IndexError,
    TypeError,
)

# SMF format types mido can write back
SUPPORTED_FORMATS = (0, 1, 2)

_CHUNK_HEADER = struct.Struct(">4sL")


def decode(data: bytes) -> mido.MidiFile:
    """
    Parse SMF bytes into a ``mido.MidiFile``.

    Raises
    ------
    FormatError
        If the bytes are not a well-formed SMF stream, or declare a format
        type other than 0, 1 or 2.
    """
    if not data:
        raise FormatError("Failed to parse MIDI file: no data")

    try:
        midi = mido.MidiFile(file=io.BytesIO(data))
    except _PARSE_ERRORS as e:
        raise FormatError(f"Failed to parse MIDI file: {e}") from e

    if midi.type not in SUPPORTED_FORMATS:
        raise FormatError(
            f"Failed to parse MIDI file: unsupported format type {midi.type}"
        )

    logger.debug(
        "🎹 Decoded MIDI file: type={} ticks_per_beat={} tracks={}",
        midi.type,
        midi.ticks_per_beat,
        len(midi.tracks),
    )
    return midi


def encode(midi: mido.MidiFile) -> bytes:
    """
    Serialize a ``mido.MidiFile`` to SMF bytes.

    Raises
    ------
    FormatError
        If mido refuses to write the document.
    """
    buffer = io.BytesIO()
    try:
        midi.save(file=buffer)
    except (ValueError, TypeError, KeyError, OSError) as e:
        raise FormatError(f"Failed to write MIDI file: {e}") from e
    return buffer.getvalue()


def copy_track(track: Iterable[mido.Message]) -> mido.MidiTrack:
    """Return a new track holding copies of every message in *track*."""
    return mido.MidiTrack(msg.copy() for msg in track)


def clone_document(
    midi: mido.MidiFile,
    tracks: Iterable[mido.MidiTrack] | None = None,
) -> mido.MidiFile:
    """
    Build a new document with the same header as *midi*.

    Without *tracks* every track is copied message by message.  With
    *tracks* those are used as the new document's tracks as-is.  The source
    document is never modified.
    """
    clone = mido.MidiFile(
        type=midi.type,
        ticks_per_beat=midi.ticks_per_beat,
        charset=midi.charset,
    )
    if tracks is None:
        tracks = (copy_track(track) for track in midi.tracks)
    clone.tracks.extend(tracks)
    return clone


def split_track_chunks(data: bytes) -> tuple[bytes, list[bytes]]:
    """
    Cut SMF bytes into the raw ``MThd`` chunk and the raw ``MTrk`` chunks.

    Only as many ``MTrk`` chunks as the header announces are returned;
    chunks of any other type are skipped.

    Raises
    ------
    FormatError
        If the header or a track chunk is cut short.
    """
    if len(data) < _CHUNK_HEADER.size:
        raise FormatError("Failed to split MIDI file: missing header chunk")

    name, size = _CHUNK_HEADER.unpack_from(data, 0)
    header_end = _CHUNK_HEADER.size + size
    if name != b"MThd" or size < 6 or len(data) < header_end:
        raise FormatError("Failed to split MIDI file: bad header chunk")

    header = data[:header_end]
    (num_tracks,) = struct.unpack_from(">h", data, _CHUNK_HEADER.size + 2)

    chunks: list[bytes] = []
    pos = header_end
    while len(chunks) < num_tracks:
        if len(data) - pos < _CHUNK_HEADER.size:
            raise FormatError(
                f"Failed to split MIDI file: expected {num_tracks} tracks, "
                f"found {len(chunks)}"
            )
        name, size = _CHUNK_HEADER.unpack_from(data, pos)
        end = pos + _CHUNK_HEADER.size + size
        if end > len(data):
            raise FormatError("Failed to split MIDI file: truncated chunk")
        if name == b"MTrk":
            chunks.append(data[pos:end])
        pos = end

    return header, chunks


def join_track_chunks(header: bytes, chunks: Iterable[bytes]) -> bytes:
    """Inverse of ``split_track_chunks``."""
    return header + b"".join(chunks)
