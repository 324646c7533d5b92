"""Core types and constants for Improv Coach."""

from .note import NoteEvent
from .settings import SessionSettings, Style
from .results import ScoreMetrics, SessionResult
from .errors import ImprovCoachError, MicrophonePermissionError, AssessmentError
from .timing import Clock, MonotonicClock, ManualClock, FrameScheduler
from .constants import (
    PITCH_NAMES,
    DEFAULT_SR,
    DEFAULT_WINDOW_SIZE,
    DEFAULT_TEMPO,
)

__all__ = [
    "NoteEvent",
    "SessionSettings",
    "Style",
    "ScoreMetrics",
    "SessionResult",
    "ImprovCoachError",
    "MicrophonePermissionError",
    "AssessmentError",
    "Clock",
    "MonotonicClock",
    "ManualClock",
    "FrameScheduler",
    "PITCH_NAMES",
    "DEFAULT_SR",
    "DEFAULT_WINDOW_SIZE",
    "DEFAULT_TEMPO",
]
