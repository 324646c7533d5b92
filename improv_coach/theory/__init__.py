"""Music theory layer - pure functions over notes, scales and the fretboard.

- Frequency / MIDI / note-name conversion with cent deviation
- Scale tables and per-style in-scale membership
- Guitar fret position inference
"""

from .pitch import (
    frequency_to_midi,
    midi_to_frequency,
    midi_to_note_name,
    note_name_to_midi,
    pitch_class_of,
    frequency_to_note,
)
from .scales import (
    SCALE_PATTERNS,
    STYLE_SCALES,
    get_scale_notes,
    get_style_notes,
    is_note_in_scale,
)
from .fretboard import (
    STANDARD_TUNING,
    FretPosition,
    FretboardTracker,
    note_to_fret_positions,
    most_likely_fret_position,
)

__all__ = [
    "frequency_to_midi",
    "midi_to_frequency",
    "midi_to_note_name",
    "note_name_to_midi",
    "pitch_class_of",
    "frequency_to_note",
    "SCALE_PATTERNS",
    "STYLE_SCALES",
    "get_scale_notes",
    "get_style_notes",
    "is_note_in_scale",
    "STANDARD_TUNING",
    "FretPosition",
    "FretboardTracker",
    "note_to_fret_positions",
    "most_likely_fret_position",
]
