"""
Track Solo - Variant Generator

For every track in the input file, builds a copy of the song where that track
keeps its original velocities and every other track is attenuated.  One extra
copy with nothing changed is appended at the end.

Output names follow a fixed scheme:

    <stem>_<track name>.<ext>    one per track, in track order
    <stem>_All.<ext>             the untouched file, always last

Variants are assembled from raw track chunks: the soloed track's chunk is
copied straight from the input, and the attenuated chunks come from encoding
one fully attenuated document.  Every attenuated track is therefore computed
once and shared between the variants, the soloed track stays byte-identical
to the input, and the "All" variant is the input itself.
"""

from __future__ import annotations

from loguru import logger

from tracksolo.config import ALL_TRACKS_LABEL
from tracksolo.errors import MissingExtensionError
from tracksolo.models import InputFile, Variant
from tracksolo.services.midi_codec import (
    clone_document,
    decode,
    encode,
    join_track_chunks,
    split_track_chunks,
)
from tracksolo.services.track_namer import name_for
from tracksolo.services.velocity import attenuate
from tracksolo.utils import sanitize_entry_label


def split_file_name(name: str) -> tuple[str, str]:
    """Split *name* on its last ``.`` into (stem, extension)."""
    stem, sep, extension = name.rpartition(".")
    if not sep:
        raise MissingExtensionError(name)
    return stem, extension


def variant_name(stem: str, label: str, extension: str) -> str:
    return f"{stem}_{sanitize_entry_label(label)}.{extension}"


def build_solo_bytes(
    header: bytes,
    original_chunks: list[bytes],
    attenuated_chunks: list[bytes],
    solo_index: int,
) -> bytes:
    """File where track *solo_index* is original and the rest attenuated."""
    chunks = [
        original if index == solo_index else attenuated_chunks[index]
        for index, original in enumerate(original_chunks)
    ]
    return join_track_chunks(header, chunks)


def generate_variants(input_file: InputFile, amount: int) -> list[Variant]:
    """
    Produce one variant per track plus the untouched "All" variant.

    Parameters
    ----------
    input_file : InputFile
        The uploaded file.  Its name must have an extension.
    amount : int
        Velocity reduction for the non-soloed tracks (0-127, validated by
        the caller).

    Returns
    -------
    list[Variant]
        Per-track variants in track order, followed by the "All" variant.

    Raises
    ------
    MissingExtensionError
        If the file name has no ``.``.
    FormatError
        If the file cannot be decoded or a variant cannot be encoded.
    """
    stem, extension = split_file_name(input_file.name)
    midi = decode(input_file.data)

    header, original_chunks = split_track_chunks(input_file.data)
    attenuated = clone_document(
        midi, [attenuate(track, amount) for track in midi.tracks]
    )
    _, attenuated_chunks = split_track_chunks(encode(attenuated))

    variants: list[Variant] = []
    for index, track in enumerate(midi.tracks):
        label = name_for(track, index, charset=midi.charset)
        name = variant_name(stem, label, extension)
        data = build_solo_bytes(header, original_chunks, attenuated_chunks, index)
        variants.append(Variant(name=name, data=data, track_index=index))
        logger.debug("🎚️ Built variant {} (solo track {})", name, index)

    variants.append(
        Variant(
            name=variant_name(stem, ALL_TRACKS_LABEL, extension),
            data=input_file.data,
        )
    )

    logger.info(
        "🎼 Generated {} variants from {} (reduction={})",
        len(variants),
        input_file.name,
        amount,
    )
    return variants
