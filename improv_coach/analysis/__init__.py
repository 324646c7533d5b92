"""Analysis layer - Low-level signal analysis.

Turns a window of raw samples into a fundamental frequency estimate
with a confidence score.
"""

from .pitch import PitchDetector, PitchResult, DetectorConfig, rms

__all__ = [
    "PitchDetector",
    "PitchResult",
    "DetectorConfig",
    "rms",
]
