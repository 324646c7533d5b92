"""Tests for note conversion, scales and fretboard inference."""

import numpy as np
import pytest
import librosa

from improv_coach.core import PITCH_NAMES, Style
from improv_coach.theory import (
    frequency_to_midi,
    midi_to_frequency,
    midi_to_note_name,
    note_name_to_midi,
    pitch_class_of,
    frequency_to_note,
    get_scale_notes,
    get_style_notes,
    is_note_in_scale,
    note_to_fret_positions,
    most_likely_fret_position,
    FretPosition,
    FretboardTracker,
)


class TestFrequencyToNote:
    """Tests for frequency/note conversion."""

    def test_a4_reference(self):
        assert frequency_to_note(440.0) == ("A4", 0)

    def test_a_sharp_4(self):
        note, cents = frequency_to_note(466.16)
        assert note == "A#4"
        assert abs(cents) <= 1

    def test_low_e_string(self):
        note, cents = frequency_to_note(82.41)
        assert note == "E2"
        assert abs(cents) <= 1

    def test_sharp_deviation(self):
        # 20 cents above A4
        note, cents = frequency_to_note(440.0 * 2 ** (20 / 1200))
        assert note == "A4"
        assert cents == 20

    def test_flat_deviation_rounds_to_nearest(self):
        # 40 cents below A4 is still closest to A4
        note, cents = frequency_to_note(440.0 * 2 ** (-40 / 1200))
        assert note == "A4"
        assert cents == -40

    def test_cents_always_within_half_semitone(self):
        for freq in np.geomspace(70.0, 1400.0, 2000):
            _, cents = frequency_to_note(float(freq))
            assert -50 <= cents <= 50

    def test_non_positive_frequency_rejected(self):
        with pytest.raises(ValueError):
            frequency_to_note(0.0)

    def test_round_trip_every_note_in_guitar_range(self):
        for midi in range(40, 89):  # E2 .. E6
            name = midi_to_note_name(midi)
            note, cents = frequency_to_note(midi_to_frequency(midi))
            assert note == name
            assert abs(cents) <= 1

    def test_midi_to_frequency_matches_librosa(self):
        for midi in (40, 57, 69, 88):
            assert midi_to_frequency(midi) == pytest.approx(float(librosa.midi_to_hz(midi)))

    def test_frequency_to_midi(self):
        assert frequency_to_midi(440.0) == pytest.approx(69.0)
        assert frequency_to_midi(880.0) == pytest.approx(81.0)

    def test_note_names(self):
        assert midi_to_note_name(60) == "C4"
        assert midi_to_note_name(61) == "C#4"
        assert midi_to_note_name(40) == "E2"
        assert note_name_to_midi("A#4") == 70
        assert pitch_class_of("C#4") == "C#"


class TestScales:
    """Tests for scale tables and style membership."""

    def test_a_blues_scale(self):
        assert get_scale_notes("A", "blues") == ["A", "C", "D", "D#", "E", "G"]

    def test_e_pentatonic_minor(self):
        assert get_scale_notes("E", "pentatonic_minor") == ["E", "G", "A", "B", "D"]

    def test_wraps_around_octave(self):
        assert get_scale_notes("B", "major") == ["B", "C#", "D#", "E", "F#", "G#", "A#"]

    def test_unknown_scale(self):
        with pytest.raises(ValueError):
            get_scale_notes("A", "lydian")

    def test_blues_style_is_union_of_its_scales(self):
        notes = get_style_notes(Style.BLUES, "A")
        # blues + pentatonic minor + mixolydian
        assert notes == {"A", "B", "C", "C#", "D", "D#", "E", "F#", "G"}

    def test_style_accepts_string(self):
        assert get_style_notes("metal", "E") == get_style_notes(Style.METAL, "E")

    def test_metal_includes_phrygian_dominant_second(self):
        assert "F" in get_style_notes(Style.METAL, "E")

    def test_is_note_in_scale_ignores_octave(self):
        assert is_note_in_scale("A3", Style.BLUES, "A")
        assert is_note_in_scale("D#5", Style.BLUES, "A")
        assert not is_note_in_scale("A#3", Style.BLUES, "A")

    def test_root_always_in_scale(self):
        for style in Style:
            for key in PITCH_NAMES:
                assert is_note_in_scale(f"{key}4", style, key)


class TestFretboard:
    """Tests for fret position inference."""

    def test_open_low_e(self):
        assert note_to_fret_positions("E2") == [FretPosition(string=6, fret=0, note="E2")]

    def test_all_positions_of_e4(self):
        positions = note_to_fret_positions("E4")
        assert [(p.string, p.fret) for p in positions] == [
            (1, 0), (2, 5), (3, 9), (4, 14), (5, 19), (6, 24),
        ]

    def test_out_of_range_notes(self):
        assert note_to_fret_positions("C2") == []
        assert note_to_fret_positions("F6") == []

    def test_invalid_note_name(self):
        assert note_to_fret_positions("H4") == []
        assert most_likely_fret_position("H4") is None

    def test_prefers_middle_of_neck(self):
        position = most_likely_fret_position("A3")
        assert (position.string, position.fret) == (4, 7)

    def test_prefers_position_near_previous(self):
        previous = FretPosition(string=4, fret=14, note="E4")
        position = most_likely_fret_position("E4", previous)
        assert (position.string, position.fret) == (4, 14)

    def test_single_position_returned_directly(self):
        position = most_likely_fret_position("E2", FretPosition(string=1, fret=20, note="C6"))
        assert (position.string, position.fret) == (6, 0)

    def test_tracker_follows_hand(self):
        tracker = FretboardTracker()
        first = tracker.update("A3")
        assert (first.string, first.fret) == (4, 7)
        # B3 next to the previous position rather than the open B string
        second = tracker.update("B3")
        assert (second.string, second.fret) == (4, 9)
        tracker.reset()
        assert tracker.position is None
