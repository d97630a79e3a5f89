"""
Track Solo - Velocity Attenuator Tests

Tests for tracksolo.services.velocity. Validates:
- Saturating subtraction (never negative, never wraps)
- Only note-on velocities change; everything else is copied as-is
- The input track is not modified
- validate_amount() accepts 0-127 and rejects everything else
"""

import mido
import pytest

from tests.conftest import make_track
from tracksolo.errors import InvalidAmountError
from tracksolo.services.velocity import attenuate, reduce_velocity, validate_amount

# ---------------------------------------------------------------------------
# reduce_velocity
# ---------------------------------------------------------------------------


class TestReduceVelocity:
    @pytest.mark.parametrize(
        "velocity,amount,expected",
        [
            (10, 30, 0),
            (127, 0, 127),
            (100, 20, 80),
            (20, 20, 0),
            (0, 127, 0),
            (127, 127, 0),
        ],
    )
    def test_saturating(self, velocity, amount, expected):
        assert reduce_velocity(velocity, amount) == expected


# ---------------------------------------------------------------------------
# attenuate
# ---------------------------------------------------------------------------


class TestAttenuate:
    def test_note_on_velocities_reduced(self):
        track = make_track("Lead", [(60, 100), (62, 10), (64, 127)])
        result = attenuate(track, 30)
        velocities = [m.velocity for m in result if m.type == "note_on"]
        assert velocities == [70, 0, 97]

    def test_note_off_untouched(self):
        track = make_track("Lead", [(60, 100)])
        result = attenuate(track, 30)
        note_offs = [m for m in result if m.type == "note_off"]
        assert [m.velocity for m in note_offs] == [64]

    def test_other_fields_unchanged(self):
        track = make_track("Lead", [(60, 100), (67, 45)], channel=5)
        result = attenuate(track, 20)
        assert len(result) == len(track)
        for original, reduced in zip(track, result):
            if original.type == "note_on":
                assert reduced.channel == original.channel
                assert reduced.note == original.note
                assert reduced.time == original.time
                assert reduced.copy(velocity=original.velocity) == original
            else:
                assert reduced == original

    def test_input_not_mutated(self):
        track = make_track("Lead", [(60, 100)])
        before = [m.copy() for m in track]
        attenuate(track, 50)
        assert list(track) == before

    def test_returns_new_messages(self):
        track = make_track("Lead", [(60, 100)])
        result = attenuate(track, 0)
        assert isinstance(result, mido.MidiTrack)
        assert all(a is not b for a, b in zip(track, result))
        assert list(result) == list(track)

    def test_zero_velocity_note_on_stays_zero(self):
        track = mido.MidiTrack([mido.Message("note_on", note=60, velocity=0)])
        assert attenuate(track, 10)[0].velocity == 0


# ---------------------------------------------------------------------------
# validate_amount
# ---------------------------------------------------------------------------


class TestValidateAmount:
    @pytest.mark.parametrize("value,expected", [(0, 0), (127, 127), ("30", 30), (" 5 ", 5)])
    def test_valid(self, value, expected):
        assert validate_amount(value) == expected

    @pytest.mark.parametrize("value", [-1, 128, "200", "-3"])
    def test_out_of_range(self, value):
        with pytest.raises(InvalidAmountError, match="out of range"):
            validate_amount(value)

    @pytest.mark.parametrize("value", ["abc", "", "1.5", None, True])
    def test_not_a_number(self, value):
        with pytest.raises(InvalidAmountError, match="Invalid number"):
            validate_amount(value)
