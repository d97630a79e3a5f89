"""
Track Solo - Velocity Attenuator

Lowers the note-on velocities of a track by a fixed amount.  Subtraction
saturates at zero so a quiet note never wraps around to a loud one.
"""

from __future__ import annotations

from typing import Any, Iterable

import mido

from tracksolo.config import MAX_VELOCITY, MIN_VELOCITY
from tracksolo.errors import InvalidAmountError


def reduce_velocity(velocity: int, amount: int) -> int:
    """Saturating subtraction within the 7-bit velocity range."""
    return min(MAX_VELOCITY, max(MIN_VELOCITY, velocity - amount))


def attenuate(track: Iterable[mido.Message], amount: int) -> mido.MidiTrack:
    """
    Return a new track with every note-on velocity reduced by *amount*.

    All other messages, and the note-on's channel, note and delta time, are
    copied unchanged.  The input track is not modified.
    """
    result = mido.MidiTrack()
    for msg in track:
        if msg.type == "note_on":
            result.append(msg.copy(velocity=reduce_velocity(msg.velocity, amount)))
        else:
            result.append(msg.copy())
    return result


def validate_amount(value: Any) -> int:
    """
    Parse a user-supplied reduction amount.

    Accepts ints and numeric strings in the closed range 0-127.  Used by the
    HTTP and command-line front ends before the pipeline is invoked.
    """
    if isinstance(value, bool):
        raise InvalidAmountError("Invalid number entered for note velocity reduction")
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise InvalidAmountError(
            "Invalid number entered for note velocity reduction"
        ) from None

    if not MIN_VELOCITY <= amount <= MAX_VELOCITY:
        raise InvalidAmountError(
            f"The number entered is out of range. Must be between "
            f"{MIN_VELOCITY} and {MAX_VELOCITY}"
        )
    return amount
