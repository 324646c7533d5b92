"""Session layer - Running a practice session and analyzing the result.

- Practice flow with minimum/maximum durations and cancellation
- Metronome
- Local metrics blended with the external assessment service
- Rule-based feedback when the service is unavailable
"""

from .analyzer import SessionAnalyzer, BlendWeights, blend_metrics, overall_score
from .assessment import (
    AssessmentClient,
    AssessmentConfig,
    AssessmentResponse,
    HttpAssessmentClient,
    build_payload,
    parse_response,
)
from .feedback import FeedbackThresholds, LOCAL_FEEDBACK
from .metronome import Metronome, generate_click
from .controller import PracticeSession, SessionView

__all__ = [
    "SessionAnalyzer",
    "BlendWeights",
    "blend_metrics",
    "overall_score",
    "AssessmentClient",
    "AssessmentConfig",
    "AssessmentResponse",
    "HttpAssessmentClient",
    "build_payload",
    "parse_response",
    "FeedbackThresholds",
    "LOCAL_FEEDBACK",
    "Metronome",
    "generate_click",
    "PracticeSession",
    "SessionView",
]
