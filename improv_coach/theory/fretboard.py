"""Guitar fretboard position inference.

Positions are inferred from pitch alone: a note name maps to every
(string, fret) pair in standard tuning that produces it, and the most
playable one is chosen from context.
"""

from dataclasses import dataclass
from typing import List, Optional

from librosa.util.exceptions import ParameterError

from ..core.constants import MAX_FRET, PREFERRED_FRET
from .pitch import note_name_to_midi

# String 1 is the high E, string 6 the low E
STANDARD_TUNING = ("E4", "B3", "G3", "D3", "A2", "E2")


@dataclass(frozen=True)
class FretPosition:
    """A playable position on the neck."""

    string: int  # 1-6 (high E to low E)
    fret: int  # 0-24
    note: str

    def distance_to(self, other: "FretPosition") -> int:
        """Manhattan distance in string/fret space."""
        return abs(self.string - other.string) + abs(self.fret - other.fret)


def note_to_fret_positions(note: str, tuning=STANDARD_TUNING) -> List[FretPosition]:
    """
    Find every position that produces exactly this pitch.

    Args:
        note: Note name with octave (e.g., "A3")
        tuning: Open-string notes, string 1 first

    Returns:
        Positions ordered by string number (empty for unparsable names)
    """
    try:
        midi = note_name_to_midi(note)
    except ParameterError:
        return []

    positions = []
    for index, open_note in enumerate(tuning):
        fret = midi - note_name_to_midi(open_note)
        if 0 <= fret <= MAX_FRET:
            positions.append(FretPosition(string=index + 1, fret=fret, note=note))
    return positions


def most_likely_fret_position(
    note: str,
    previous: Optional[FretPosition] = None,
) -> Optional[FretPosition]:
    """
    Choose the most playable position for a note.

    Prefers the position closest to the previous one when given,
    otherwise the one nearest the middle of the neck.
    """
    positions = note_to_fret_positions(note)
    if not positions:
        return None
    if previous is not None:
        return min(positions, key=lambda p: p.distance_to(previous))
    return min(positions, key=lambda p: abs(p.fret - PREFERRED_FRET))


class FretboardTracker:
    """Follow the hand across the neck as notes are played."""

    def __init__(self):
        self.position: Optional[FretPosition] = None

    def update(self, note: str) -> Optional[FretPosition]:
        """Infer the position of the next note from the current one."""
        position = most_likely_fret_position(note, self.position)
        if position is not None:
            self.position = position
        return position

    def reset(self) -> None:
        self.position = None
