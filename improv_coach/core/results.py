"""Score and result containers produced by session analysis."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .note import NoteEvent


@dataclass(frozen=True)
class ScoreMetrics:
    """Five independent 0-100 performance metrics."""

    scale_adherence: int
    timing_accuracy: int
    pitch_control: int
    phrase_consistency: int
    style_match: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "scaleAdherence": self.scale_adherence,
            "timingAccuracy": self.timing_accuracy,
            "pitchControl": self.pitch_control,
            "phraseConsistency": self.phrase_consistency,
            "styleMatch": self.style_match,
        }


@dataclass
class SessionResult:
    """Final analysis of a practice session."""

    overall_score: int
    metrics: ScoreMetrics
    feedback: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    note_events: Tuple[NoteEvent, ...] = ()
    duration: float = 0.0  # ms between first and last event
    source: str = "local"  # "external" when the assessment service contributed

    @property
    def note_count(self) -> int:
        return len(self.note_events)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "overallScore": self.overall_score,
            "metrics": self.metrics.as_dict(),
            "feedback": list(self.feedback),
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "suggestions": list(self.suggestions),
            "noteEvents": [event.to_dict() for event in self.note_events],
            "duration": self.duration,
            "source": self.source,
        }
