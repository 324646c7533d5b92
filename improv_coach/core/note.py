"""NoteEvent data class - one stabilized note onset detected from live audio."""

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .constants import PITCH_NAMES

_NOTE_RE = re.compile(r"^([A-G]#?)(-?\d+)$")


@dataclass(frozen=True)
class NoteEvent:
    """A detected note onset.

    Timestamps are milliseconds since the session started listening.
    """

    note: str  # Pitch class + octave, e.g. "A3"
    frequency: float  # Estimated fundamental in Hz
    timestamp: float  # ms since listening start
    confidence: float  # Periodicity strength (0-1)
    cents: int  # Deviation from nearest semitone (-50..50)
    velocity: float  # Normalized input level (0-1)

    @property
    def pitch_class(self) -> str:
        """Note name without octave (e.g., 'A#')."""
        return self.note.rstrip("-0123456789")

    @property
    def octave(self) -> int:
        match = _NOTE_RE.match(self.note)
        return int(match.group(2)) if match else 4

    @property
    def midi(self) -> Optional[int]:
        """MIDI pitch of the note name, or None if the name is malformed."""
        match = _NOTE_RE.match(self.note)
        if match is None:
            return None
        return PITCH_NAMES.index(match.group(1)) + (int(match.group(2)) + 1) * 12

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary of all fields."""
        return asdict(self)

    def to_payload(self) -> Dict[str, Any]:
        """Reduced form sent to the assessment service."""
        return {
            "note": self.note,
            "timestamp": self.timestamp,
            "cents": self.cents,
            "velocity": self.velocity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoteEvent":
        return cls(
            note=data["note"],
            frequency=float(data.get("frequency", 0.0)),
            timestamp=float(data["timestamp"]),
            confidence=float(data.get("confidence", 1.0)),
            cents=int(data.get("cents", 0)),
            velocity=float(data.get("velocity", 0.0)),
        )
