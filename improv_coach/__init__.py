"""Improv Coach - Guitar improvisation practice with real-time scoring.

Architecture Layers:
    1. core/          - Note events, settings, results, clocks and scheduler
    2. theory/        - Note conversion, scales, fretboard positions
    3. input/         - Microphone capture and audio files
    4. analysis/      - Autocorrelation pitch detection
    5. transcription/ - Debounced note event extraction
    6. scoring/       - Local performance metrics
    7. session/       - Practice flow, metronome, assessment and feedback
    8. output/        - Export (MIDI, JSON)
"""

__version__ = "0.1.0"

# Core types
from .core import NoteEvent, SessionSettings, Style, ScoreMetrics, SessionResult

# Music theory
from .theory import frequency_to_note, is_note_in_scale, most_likely_fret_position

# Input layer
from .input import AudioLoader, MicrophoneSource

# Analysis layer
from .analysis import PitchDetector

# Transcription layer
from .transcription import NoteEventStreamBuilder, StreamTranscriber

# Scoring layer
from .scoring import compute_local_metrics

# Session layer
from .session import SessionAnalyzer, PracticeSession, Metronome

# Output layer
from .output import MIDIExporter, JSONExporter

__all__ = [
    # Core
    "NoteEvent",
    "SessionSettings",
    "Style",
    "ScoreMetrics",
    "SessionResult",
    # Theory
    "frequency_to_note",
    "is_note_in_scale",
    "most_likely_fret_position",
    # Input
    "AudioLoader",
    "MicrophoneSource",
    # Analysis
    "PitchDetector",
    # Transcription
    "NoteEventStreamBuilder",
    "StreamTranscriber",
    # Scoring
    "compute_local_metrics",
    # Session
    "SessionAnalyzer",
    "PracticeSession",
    "Metronome",
    # Output
    "MIDIExporter",
    "JSONExporter",
]
