"""Frequency, MIDI and note-name conversions."""

import math
from typing import Tuple

import numpy as np
import librosa

from ..core.constants import PITCH_NAMES, A4_FREQ, A4_MIDI


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def frequency_to_midi(frequency: float) -> float:
    """Convert frequency (Hz) to a fractional MIDI pitch."""
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")
    return float(12 * np.log2(frequency / A4_FREQ) + A4_MIDI)


def midi_to_frequency(midi: float) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return float(A4_FREQ * (2 ** ((midi - A4_MIDI) / 12.0)))


def midi_to_note_name(midi: float) -> str:
    """Get note name with octave (e.g., 'C4', 'A#3') for the nearest MIDI pitch."""
    rounded = _round_half_up(midi)
    return f"{PITCH_NAMES[rounded % 12]}{rounded // 12 - 1}"


def note_name_to_midi(note: str) -> int:
    """Parse a note name such as 'E2' or 'A#4' into a MIDI pitch."""
    return int(librosa.note_to_midi(note))


def pitch_class_of(note: str) -> str:
    """Strip the octave from a note name ('A#4' -> 'A#')."""
    return note.rstrip("-0123456789")


def frequency_to_note(frequency: float) -> Tuple[str, int]:
    """
    Convert a frequency to its nearest equal-tempered note.

    Args:
        frequency: Frequency in Hz (must be positive)

    Returns:
        Tuple of (note name with octave, cents deviation from that note)
    """
    midi = frequency_to_midi(frequency)
    rounded = _round_half_up(midi)
    cents = _round_half_up((midi - rounded) * 100)
    return midi_to_note_name(rounded), cents
