"""
Track Solo - Pytest Configuration & Shared Fixtures

Provides reusable fixtures for:
- Building Standard MIDI File bytes in memory with mido
- The three-track "demo" song (Drums / unnamed / Lead)
- Tracks with missing, repeated, or non-UTF-8 track names
- Hand-written SMF bytes that do not use running status
- Malformed and truncated MIDI data
"""

import io
import struct
from typing import Iterable, List, Optional, Sequence, Tuple

import mido
import pytest

from tracksolo.models import InputFile

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

# (note, velocity) pairs
NoteSpec = Tuple[int, int]

DEMO_DRUM_NOTES: List[NoteSpec] = [(36, 100), (38, 10), (42, 127), (36, 0)]
DEMO_BASS_NOTES: List[NoteSpec] = [(40, 80), (43, 15), (45, 20)]
DEMO_LEAD_NOTES: List[NoteSpec] = [(72, 64), (74, 20), (76, 127)]


def make_track(
    name: Optional[str] = None,
    notes: Sequence[NoteSpec] = (),
    channel: int = 0,
    extra_names: Iterable[str] = (),
    program: Optional[int] = None,
) -> mido.MidiTrack:
    """Build a track: optional track name(s), program change, then notes."""
    track = mido.MidiTrack()
    if name is not None:
        track.append(mido.MetaMessage("track_name", name=name, time=0))
    if program is not None:
        track.append(
            mido.Message("program_change", channel=channel, program=program, time=0)
        )
    track.append(
        mido.Message("control_change", channel=channel, control=7, value=100, time=0)
    )
    for extra in extra_names:
        track.append(mido.MetaMessage("track_name", name=extra, time=0))
    for note, velocity in notes:
        track.append(
            mido.Message(
                "note_on", channel=channel, note=note, velocity=velocity, time=120
            )
        )
        track.append(
            mido.Message("note_off", channel=channel, note=note, velocity=64, time=240)
        )
    track.append(mido.MetaMessage("end_of_track", time=0))
    return track


def make_midi(tracks: Iterable[mido.MidiTrack], ticks_per_beat: int = 480) -> mido.MidiFile:
    midi = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)
    midi.tracks.extend(tracks)
    return midi


def midi_bytes(midi: mido.MidiFile) -> bytes:
    """Serialize a mido document to SMF bytes."""
    buffer = io.BytesIO()
    midi.save(file=buffer)
    return buffer.getvalue()


def read_midi(data: bytes) -> mido.MidiFile:
    return mido.MidiFile(file=io.BytesIO(data))


def utf8_as_meta_text(text: str) -> str:
    """Spell *text* the way mido stores UTF-8 meta bytes read as latin-1."""
    return text.encode("utf-8").decode("latin1")


def raw_smf(
    track_bodies: Sequence[bytes],
    fmt: int = 1,
    ticks_per_beat: int = 96,
    num_tracks: Optional[int] = None,
) -> bytes:
    """Assemble SMF bytes by hand from raw MTrk chunk bodies."""
    if num_tracks is None:
        num_tracks = len(track_bodies)
    data = b"MThd" + struct.pack(">LHHH", 6, fmt, num_tracks, ticks_per_beat)
    for body in track_bodies:
        data += b"MTrk" + struct.pack(">L", len(body)) + body
    return data


# Every event spells out its status byte (no running status), which mido
# would not write back this way.
KEYS_BODY = bytes.fromhex("00FF03044B657973" "00903C64" "60903C00" "00FF2F00")
BASS_BODY = bytes.fromhex("00FF030442617373" "00913050" "60913000" "00FF2F00")


def build_demo_midi() -> mido.MidiFile:
    drums = make_track("Drums", DEMO_DRUM_NOTES, channel=9)
    drums.insert(1, mido.MetaMessage("set_tempo", tempo=500000, time=0))
    drums.insert(2, mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0))
    return make_midi(
        [
            drums,
            make_track(None, DEMO_BASS_NOTES, channel=1, program=33),
            make_track("Lead", DEMO_LEAD_NOTES, channel=2, program=81),
        ]
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def demo_midi() -> mido.MidiFile:
    """Three tracks: "Drums", an unnamed bass track, and "Lead"."""
    return build_demo_midi()


@pytest.fixture
def demo_bytes(demo_midi: mido.MidiFile) -> bytes:
    return midi_bytes(demo_midi)


@pytest.fixture
def demo_file(demo_bytes: bytes) -> InputFile:
    return InputFile(name="demo.mid", data=demo_bytes)


@pytest.fixture
def single_track_file() -> InputFile:
    midi = make_midi([make_track("Piano", [(60, 90), (64, 5)])])
    return InputFile(name="solo.midi", data=midi_bytes(midi))


@pytest.fixture
def duplicate_names_file() -> InputFile:
    """Two tracks with the same name, so their entry names collide."""
    midi = make_midi(
        [
            make_track("Guitar", [(60, 90)]),
            make_track("Guitar", [(62, 90)], channel=1),
        ]
    )
    return InputFile(name="dupes.mid", data=midi_bytes(midi))


@pytest.fixture
def bad_utf8_name_file() -> InputFile:
    """Track 0's name bytes are not valid UTF-8."""
    midi = make_midi(
        [
            make_track("\xff\xfeJunk", [(60, 90)]),
            make_track("Keys", [(62, 90)], channel=1),
        ]
    )
    return InputFile(name="broken.mid", data=midi_bytes(midi))


@pytest.fixture
def no_running_status_file() -> InputFile:
    """Two tracks ("Keys", "Bass") written without running status."""
    return InputFile(name="plain.mid", data=raw_smf([KEYS_BODY, BASS_BODY]))


@pytest.fixture
def slash_name_file() -> InputFile:
    """Track names containing path separators."""
    midi = make_midi(
        [
            make_track("AC/DC", [(60, 90)]),
            make_track("..\\up", [(62, 90)], channel=1),
        ]
    )
    return InputFile(name="rock.mid", data=midi_bytes(midi))


@pytest.fixture
def truncated_bytes(demo_bytes: bytes) -> bytes:
    """The demo file cut off in the middle of its last track."""
    return demo_bytes[:-7]


@pytest.fixture
def not_midi_bytes() -> bytes:
    return b"RIFF\x00\x00\x00\x00WAVEfmt this is not a midi file"
