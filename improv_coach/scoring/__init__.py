"""Scoring layer - Deterministic metrics over a note event sequence."""

from .metrics import (
    DEFAULT_STYLE_MATCH,
    beat_subdivisions,
    calculate_scale_adherence,
    calculate_timing_accuracy,
    calculate_pitch_control,
    calculate_phrase_consistency,
    compute_local_metrics,
    pitch_score,
)

__all__ = [
    "DEFAULT_STYLE_MATCH",
    "beat_subdivisions",
    "calculate_scale_adherence",
    "calculate_timing_accuracy",
    "calculate_pitch_control",
    "calculate_phrase_consistency",
    "compute_local_metrics",
    "pitch_score",
]
