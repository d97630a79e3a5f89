"""
Track Solo - Processing Service

Entry points used by the web and command-line front ends:

- ``process_file``      input file → ZIP archive + manifest
- ``get_midi_summary``  input file → JSON-serialisable preview for the UI

Both are synchronous and keep everything in memory.  Errors from the
pipeline (``MissingExtensionError``, ``FormatError``, ``ArchiveError``)
propagate unchanged; no partial archive is ever returned.
"""

from __future__ import annotations

from typing import Any

import mido
from loguru import logger

from tracksolo.config import ALL_TRACKS_LABEL
from tracksolo.models import ArchiveResult, InputFile, TrackSummary
from tracksolo.services.archive_builder import build_archive
from tracksolo.services.midi_codec import decode
from tracksolo.services.track_namer import find_track_name, name_for
from tracksolo.services.variant_generator import (
    generate_variants,
    split_file_name,
    variant_name,
)


def process_file(input_file: InputFile, amount: int) -> ArchiveResult:
    """
    Reduce note velocities for every track but one, once per track.

    Parameters
    ----------
    input_file : InputFile
        File name and raw SMF bytes.
    amount : int
        Velocity reduction (0-127) applied to the non-soloed tracks.

    Returns
    -------
    ArchiveResult
        ZIP bytes, the ordered entry names, and the archive base name.
    """
    logger.info(
        "🎹 Processing {} ({} bytes, reduction={})",
        input_file.name,
        len(input_file.data),
        amount,
    )

    stem, _ = split_file_name(input_file.name)
    variants = generate_variants(input_file, amount)
    result = build_archive(variants, stem)

    logger.success(
        "✅ {} ready: {} files, {} bytes",
        result.download_name,
        len(result.entry_names),
        len(result.archive_bytes),
    )
    return result


def summarize_tracks(midi: mido.MidiFile) -> list[TrackSummary]:
    """Describe each track of a decoded document."""
    summaries = []
    for index, track in enumerate(midi.tracks):
        channels = sorted(
            {msg.channel for msg in track if not msg.is_meta and hasattr(msg, "channel")}
        )
        summaries.append(
            TrackSummary(
                index=index,
                name=find_track_name(track) or "",
                display_name=name_for(track, index, charset=midi.charset),
                note_count=sum(
                    1 for msg in track if msg.type == "note_on" and msg.velocity > 0
                ),
                channels=channels,
            )
        )
    return summaries


def get_midi_summary(input_file: InputFile) -> dict[str, Any]:
    """
    Describe an uploaded file without building the archive.

    Used by the API to show the tracks and the files that would be created
    before the user commits to processing.
    """
    stem, extension = split_file_name(input_file.name)
    midi = decode(input_file.data)
    tracks = summarize_tracks(midi)

    entry_names = [variant_name(stem, t.display_name, extension) for t in tracks]
    entry_names.append(variant_name(stem, ALL_TRACKS_LABEL, extension))

    return {
        "file_name": input_file.name,
        "base_name": stem,
        "format": midi.type,
        "ticks_per_beat": midi.ticks_per_beat,
        "duration": round(_safe_length(midi), 2),
        "tracks": [
            {
                "index": t.index,
                "name": t.name,
                "display_name": t.display_name,
                "notes": t.note_count,
                "channels": t.channels,
            }
            for t in tracks
        ],
        "total_notes": sum(t.note_count for t in tracks),
        "entry_names": entry_names,
    }


def _safe_length(midi: mido.MidiFile) -> float:
    # mido cannot compute a length for asynchronous (type 2) files
    try:
        return midi.length
    except ValueError:
        return 0.0
