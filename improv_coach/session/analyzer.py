"""Session analysis - local metrics blended with an optional external assessment."""

import math
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core import NoteEvent, ScoreMetrics, SessionResult, SessionSettings
from ..scoring import compute_local_metrics
from .assessment import AssessmentClient, AssessmentResponse
from .feedback import (
    FeedbackThresholds,
    LOCAL_FEEDBACK,
    strengths_for,
    weaknesses_for,
    suggestions_for,
)


@dataclass(frozen=True)
class BlendWeights:
    """Share of each blended metric taken from the local score.

    The remainder comes from the assessment. Style match is taken from
    the assessment alone.
    """

    scale_adherence: float = 0.7
    timing_accuracy: float = 0.7
    pitch_control: float = 0.7
    phrase_consistency: float = 0.6


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def session_duration(events: Sequence[NoteEvent]) -> float:
    """Milliseconds between the first and last event (0 with fewer than 2)."""
    if len(events) < 2:
        return 0.0
    return events[-1].timestamp - events[0].timestamp


def blend_metrics(
    local: ScoreMetrics,
    external: ScoreMetrics,
    weights: BlendWeights = BlendWeights(),
) -> ScoreMetrics:
    """Weighted average of local and external metrics."""

    def mix(name: str) -> int:
        weight = getattr(weights, name)
        return _round(getattr(local, name) * weight + getattr(external, name) * (1 - weight))

    return ScoreMetrics(
        scale_adherence=mix("scale_adherence"),
        timing_accuracy=mix("timing_accuracy"),
        pitch_control=mix("pitch_control"),
        phrase_consistency=mix("phrase_consistency"),
        style_match=external.style_match,
    )


def overall_score(metrics: ScoreMetrics, include_style_match: bool = True) -> int:
    """Unweighted mean of the metrics."""
    values = [
        metrics.scale_adherence,
        metrics.timing_accuracy,
        metrics.pitch_control,
        metrics.phrase_consistency,
    ]
    if include_style_match:
        values.append(metrics.style_match)
    return _round(sum(values) / len(values))


def _external_metrics(response: AssessmentResponse) -> ScoreMetrics:
    m = response.metrics
    return ScoreMetrics(
        scale_adherence=_round(m.scaleAdherence),
        timing_accuracy=_round(m.timingAccuracy),
        pitch_control=_round(m.pitchControl),
        phrase_consistency=_round(m.phraseConsistency),
        style_match=_round(m.styleMatch),
    )


class SessionAnalyzer:
    """Produce the final result of a practice session.

    Local metrics are always computed. When an assessment client is
    configured its result is blended in; if it fails for any reason the
    result is built from local metrics and rule-based feedback instead.
    """

    def __init__(
        self,
        client: Optional[AssessmentClient] = None,
        weights: BlendWeights = BlendWeights(),
        thresholds: FeedbackThresholds = FeedbackThresholds(),
    ):
        self.client = client
        self.weights = weights
        self.thresholds = thresholds

    def analyze(
        self,
        events: Sequence[NoteEvent],
        settings: SessionSettings,
    ) -> SessionResult:
        """
        Analyze a frozen note event sequence.

        Args:
            events: Note events of the finished session
            settings: Settings the session was played with

        Returns:
            SessionResult (never fails because of the assessment service)
        """
        events = tuple(events)
        local = compute_local_metrics(events, settings)

        if self.client is not None:
            try:
                response = self.client.assess(events, settings)
            except Exception as e:
                warnings.warn(f"Assessment failed, using local fallback: {e}")
            else:
                return self._blended_result(events, local, response)

        return self._local_result(events, local, settings)

    def _blended_result(
        self,
        events: Sequence[NoteEvent],
        local: ScoreMetrics,
        response: AssessmentResponse,
    ) -> SessionResult:
        metrics = blend_metrics(local, _external_metrics(response), self.weights)
        return SessionResult(
            overall_score=overall_score(metrics),
            metrics=metrics,
            feedback=list(response.feedback),
            strengths=list(response.strengths),
            weaknesses=list(response.weaknesses),
            suggestions=list(response.suggestions),
            note_events=tuple(events),
            duration=session_duration(events),
            source="external",
        )

    def _local_result(
        self,
        events: Sequence[NoteEvent],
        local: ScoreMetrics,
        settings: SessionSettings,
    ) -> SessionResult:
        return SessionResult(
            # Style match is only a placeholder locally, so it stays out of the average
            overall_score=overall_score(local, include_style_match=False),
            metrics=local,
            feedback=[LOCAL_FEEDBACK],
            strengths=strengths_for(local, self.thresholds),
            weaknesses=weaknesses_for(local, self.thresholds),
            suggestions=suggestions_for(local, settings, self.thresholds),
            note_events=tuple(events),
            duration=session_duration(events),
            source="local",
        )
