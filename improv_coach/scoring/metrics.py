"""Local performance metrics over a note event sequence.

Every metric is a pure function returning an integer 0-100 and has an
explicit score for empty or very short input, where there is nothing
to penalize.
"""

import math
from typing import List, Sequence, Union

import numpy as np

from ..core import NoteEvent, ScoreMetrics, SessionSettings, Style
from ..theory import get_style_notes

# Style match needs a listener with taste; it is neutral until assessed externally
DEFAULT_STYLE_MATCH = 70

# Pitch control bands (cents)
PITCH_TOLERANCE_CENTS = 35
PITCH_MINOR_DEVIATION_CENTS = 50
PITCH_MINOR_DEVIATION_SCORE = 90
PITCH_PENALTY_PER_CENT = 2

# Timing: deviation fraction is doubled before subtracting from a perfect score
TIMING_DEVIATION_WEIGHT = 2.0

# Phrase consistency bands: (relative stddev upper bound, score)
PHRASE_BANDS = ((0.3, 100), (0.5, 90), (0.8, 75), (1.2, 60))
PHRASE_FLOOR = 40
PHRASE_SLOPE = 30
PHRASE_MIN_EVENTS = 4


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _inter_onset_intervals(events: Sequence[NoteEvent]) -> np.ndarray:
    timestamps = np.array([event.timestamp for event in events], dtype=np.float64)
    return np.diff(timestamps)


def beat_subdivisions(tempo: float) -> List[float]:
    """Whole beat, half, quarter and triplet durations in ms."""
    beat = 60000.0 / tempo
    return [beat, beat / 2, beat / 4, beat / 3]


def calculate_scale_adherence(
    events: Sequence[NoteEvent],
    style: Union[Style, str],
    key: str,
) -> int:
    """Percentage of notes inside the style's scales for the key."""
    if not events:
        return 100
    allowed = get_style_notes(style, key)
    in_scale = sum(1 for event in events if event.pitch_class in allowed)
    return _round(in_scale / len(events) * 100)


def calculate_timing_accuracy(events: Sequence[NoteEvent], tempo: float) -> int:
    """
    Score how well note onsets sit on a rhythmic grid.

    Each inter-onset interval is compared with the nearest multiple of
    every subdivision; the smallest deviation (as a fraction of that
    subdivision) counts for the interval.
    """
    if len(events) < 2:
        return 100

    subdivisions = beat_subdivisions(tempo)
    deviations = []
    for interval in _inter_onset_intervals(events):
        best = math.inf
        for sub in subdivisions:
            remainder = math.fmod(interval, sub)
            deviation = min(abs(remainder), sub - abs(remainder)) / sub
            best = min(best, deviation)
        deviations.append(best)

    avg_deviation = float(np.mean(deviations))
    return _round(max(0.0, 1 - avg_deviation * TIMING_DEVIATION_WEIGHT) * 100)


def pitch_score(cents: float) -> float:
    """Score of a single note from its cents deviation."""
    abs_cents = abs(cents)
    if abs_cents <= PITCH_TOLERANCE_CENTS:
        return 100.0
    if abs_cents <= PITCH_MINOR_DEVIATION_CENTS:
        return float(PITCH_MINOR_DEVIATION_SCORE)
    return max(0.0, 100.0 - (abs_cents - PITCH_TOLERANCE_CENTS) * PITCH_PENALTY_PER_CENT)


def calculate_pitch_control(events: Sequence[NoteEvent]) -> int:
    """Average intonation score; bends and vibrato within 35 cents are free."""
    if not events:
        return 100
    return _round(sum(pitch_score(event.cents) for event in events) / len(events))


def calculate_phrase_consistency(events: Sequence[NoteEvent]) -> int:
    """Score the regularity of gaps between notes by relative standard deviation."""
    if len(events) < PHRASE_MIN_EVENTS:
        return 100

    gaps = _inter_onset_intervals(events)
    mean_gap = float(np.mean(gaps))
    if mean_gap <= 0:
        return 100
    relative_std = float(np.std(gaps)) / mean_gap

    for upper_bound, score in PHRASE_BANDS:
        if relative_std < upper_bound:
            return score
    return max(PHRASE_FLOOR, _round(100 - relative_std * PHRASE_SLOPE))


def compute_local_metrics(
    events: Sequence[NoteEvent],
    settings: SessionSettings,
) -> ScoreMetrics:
    """All locally computable metrics; style match takes its neutral default."""
    return ScoreMetrics(
        scale_adherence=calculate_scale_adherence(events, settings.style, settings.key),
        timing_accuracy=calculate_timing_accuracy(events, settings.tempo),
        pitch_control=calculate_pitch_control(events),
        phrase_consistency=calculate_phrase_consistency(events),
        style_match=DEFAULT_STYLE_MATCH,
    )
