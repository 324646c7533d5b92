"""Rule tables for feedback when only local metrics are available."""

from dataclasses import dataclass
from typing import List

from ..core import ScoreMetrics, SessionSettings, Style

LOCAL_FEEDBACK = "Analysis completed using local metrics."


@dataclass(frozen=True)
class FeedbackThresholds:
    """Score bands that trigger feedback rules.

    Attributes:
        strength: A metric at or above this is called out as a strength
        weakness: A metric below this is called out as a weakness
        suggestion: A metric below this gets a practice suggestion
    """

    strength: int = 80
    weakness: int = 60
    suggestion: int = 70


STRENGTH_MESSAGES = {
    "scale_adherence": "Excellent scale awareness - staying within the key",
    "timing_accuracy": "Strong rhythmic sense with good timing",
    "pitch_control": "Great intonation and pitch stability",
    "phrase_consistency": "Consistent phrasing with musical flow",
}
DEFAULT_STRENGTH = "Keep practicing - improvement takes time"

WEAKNESS_MESSAGES = {
    "scale_adherence": "Many notes outside the scale/key",
    "timing_accuracy": "Timing could be tighter",
    "pitch_control": "Pitch accuracy needs work",
    "phrase_consistency": "Phrasing feels inconsistent",
}
DEFAULT_WEAKNESS = "Minor areas to refine for even better playing"

SUGGESTION_MESSAGES = {
    "scale_adherence": "Practice the {scale} scale in {key}",
    "timing_accuracy": "Use a metronome at {tempo} BPM for timing practice",
    "pitch_control": "Focus on clean fretting and controlled bends",
    "phrase_consistency": "Try playing shorter, more deliberate phrases",
}
DEFAULT_SUGGESTION = "Continue exploring and developing your unique voice"

# Metrics covered by the rules, in reporting order
RULE_METRICS = ("scale_adherence", "timing_accuracy", "pitch_control", "phrase_consistency")


def strengths_for(
    metrics: ScoreMetrics,
    thresholds: FeedbackThresholds = FeedbackThresholds(),
) -> List[str]:
    strengths = [
        STRENGTH_MESSAGES[name]
        for name in RULE_METRICS
        if getattr(metrics, name) >= thresholds.strength
    ]
    return strengths or [DEFAULT_STRENGTH]


def weaknesses_for(
    metrics: ScoreMetrics,
    thresholds: FeedbackThresholds = FeedbackThresholds(),
) -> List[str]:
    weaknesses = [
        WEAKNESS_MESSAGES[name]
        for name in RULE_METRICS
        if getattr(metrics, name) < thresholds.weakness
    ]
    return weaknesses or [DEFAULT_WEAKNESS]


def suggestions_for(
    metrics: ScoreMetrics,
    settings: SessionSettings,
    thresholds: FeedbackThresholds = FeedbackThresholds(),
) -> List[str]:
    """Practice suggestions parameterized by the session's style, key and tempo."""
    scale = "blues" if settings.style is Style.BLUES else "pentatonic minor"
    suggestions = [
        SUGGESTION_MESSAGES[name].format(scale=scale, key=settings.key, tempo=settings.tempo)
        for name in RULE_METRICS
        if getattr(metrics, name) < thresholds.suggestion
    ]
    return suggestions or [DEFAULT_SUGGESTION]
