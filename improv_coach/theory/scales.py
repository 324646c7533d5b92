"""Scale tables and in-scale membership for each playing style."""

from typing import Dict, List, Set, Tuple, Union

from ..core.constants import PITCH_NAMES
from ..core.settings import Style
from .pitch import pitch_class_of

# Semitone intervals from the root
SCALE_PATTERNS: Dict[str, Tuple[int, ...]] = {
    "major": (0, 2, 4, 5, 7, 9, 11),
    "minor": (0, 2, 3, 5, 7, 8, 10),
    "pentatonic_minor": (0, 3, 5, 7, 10),
    "pentatonic_major": (0, 2, 4, 7, 9),
    "blues": (0, 3, 5, 6, 7, 10),
    "dorian": (0, 2, 3, 5, 7, 9, 10),
    "mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "phrygian_dominant": (0, 1, 4, 5, 7, 8, 10),
}

# Scales that sound idiomatic for each style, most characteristic first
STYLE_SCALES: Dict[Style, Tuple[str, ...]] = {
    Style.ROCK: ("pentatonic_minor", "blues", "dorian", "mixolydian"),
    Style.BLUES: ("blues", "pentatonic_minor", "mixolydian"),
    Style.METAL: ("pentatonic_minor", "phrygian_dominant", "minor", "blues"),
}


def _as_style(style: Union[Style, str]) -> Style:
    return style if isinstance(style, Style) else Style(style)


def get_scale_notes(key: str, scale: str) -> List[str]:
    """
    Get the pitch classes of a scale.

    Args:
        key: Root pitch class (e.g., "A")
        scale: Name from SCALE_PATTERNS

    Returns:
        Pitch classes in scale order
    """
    if key not in PITCH_NAMES:
        raise ValueError(f"Unknown key: {key}")
    if scale not in SCALE_PATTERNS:
        raise ValueError(f"Unknown scale: {scale}")
    root = PITCH_NAMES.index(key)
    return [PITCH_NAMES[(root + interval) % 12] for interval in SCALE_PATTERNS[scale]]


def get_style_notes(style: Union[Style, str], key: str) -> Set[str]:
    """All pitch classes allowed for a style in a key (union of its scales)."""
    notes: Set[str] = set()
    for scale in STYLE_SCALES[_as_style(style)]:
        notes.update(get_scale_notes(key, scale))
    return notes


def is_note_in_scale(note: str, style: Union[Style, str], key: str) -> bool:
    """Check whether a note (with or without octave) is allowed for style and key."""
    return pitch_class_of(note) in get_style_notes(style, key)
