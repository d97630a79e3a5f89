"""
Track Solo - Data classes shared by the pipeline and its front ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class InputFile:
    """A fully buffered upload: original file name plus its raw bytes."""

    name: str
    data: bytes

    def __repr__(self) -> str:
        return f"InputFile(name={self.name!r}, size={len(self.data)} bytes)"


@dataclass(frozen=True)
class Variant:
    """One serialized output file and the name it is stored under."""

    name: str
    data: bytes
    # Index of the soloed track (None for the untouched "All" copy)
    track_index: int | None = None

    @property
    def is_full_mix(self) -> bool:
        return self.track_index is None

    def __repr__(self) -> str:
        return (
            f"Variant(name={self.name!r}, track_index={self.track_index}, "
            f"size={len(self.data)} bytes)"
        )


@dataclass(frozen=True)
class ArchiveResult:
    """The finished ZIP archive plus the manifest shown to the user."""

    archive_bytes: bytes
    entry_names: tuple[str, ...] = ()
    # Input file stem; the archive is offered as "<base_name>.zip"
    base_name: str = ""

    @property
    def download_name(self) -> str:
        return f"{self.base_name}.zip"


@dataclass
class TrackSummary:
    """Metadata about a single track, used for the upload preview."""

    index: int
    # Raw track name meta text (empty when the track has none)
    name: str
    # Label used in the output file name
    display_name: str
    note_count: int
    channels: list[int] = field(default_factory=list)
