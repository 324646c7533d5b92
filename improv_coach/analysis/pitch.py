"""Autocorrelation pitch detection for single analysis windows."""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.signal import correlate

from ..core.constants import (
    SILENCE_RMS_THRESHOLD,
    DETECTOR_CONFIDENCE_THRESHOLD,
    GUITAR_MIN_FREQ,
    GUITAR_MAX_FREQ,
    INPUT_LEVEL_GAIN,
)


@dataclass
class DetectorConfig:
    """Configuration for the pitch detector.

    Attributes:
        silence_threshold: RMS below which a window is treated as silence
        confidence_threshold: Minimum peak/zero-lag correlation ratio
        min_freq: Lowest frequency accepted (Hz)
        max_freq: Highest frequency accepted (Hz)
        peak_drop_ratio: A peak is closed once correlation falls below this fraction of it
    """

    silence_threshold: float = SILENCE_RMS_THRESHOLD
    confidence_threshold: float = DETECTOR_CONFIDENCE_THRESHOLD
    min_freq: float = GUITAR_MIN_FREQ
    max_freq: float = GUITAR_MAX_FREQ
    peak_drop_ratio: float = 0.9


@dataclass(frozen=True)
class PitchResult:
    """A detected fundamental frequency."""

    frequency: float  # Hz
    confidence: float  # 0.0 - 1.0


def rms(buffer: np.ndarray) -> float:
    """Root-mean-square energy of a window."""
    if len(buffer) == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(buffer, dtype=np.float64))))


class PitchDetector:
    """Estimate the fundamental of a monophonic window by autocorrelation.

    The integer period found in the correlation is refined by parabolic
    interpolation.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()

    def detect(self, buffer: np.ndarray, sample_rate: int) -> Optional[PitchResult]:
        """
        Detect the pitch of one window.

        Args:
            buffer: Time-domain samples (mono)
            sample_rate: Sample rate in Hz

        Returns:
            PitchResult, or None when no confident pitch is present
        """
        buffer = np.asarray(buffer, dtype=np.float64).ravel()
        size = len(buffer)

        if size < 4 or rms(buffer) < self.config.silence_threshold:
            return None

        corr = self.autocorrelate(buffer)
        half = size // 2

        # End of the zero-lag lobe: first local minimum after lag 0
        min_lag = 0
        min_value = corr[0]
        for i in range(1, half):
            if corr[i] < min_value:
                min_value = corr[i]
                min_lag = i
            if corr[i] > corr[i - 1] and min_lag > 0:
                break

        # First period peak after that minimum
        found_peak = False
        peak_lag = 0
        peak_value = 0.0
        for i in range(min_lag, half):
            if corr[i] > peak_value:
                peak_value = corr[i]
                peak_lag = i
                found_peak = True
            if found_peak and corr[i] < peak_value * self.config.peak_drop_ratio:
                break

        if not found_peak or peak_lag == 0:
            return None

        confidence = float(peak_value / corr[0])
        if confidence < self.config.confidence_threshold:
            return None

        refined_lag = self._refine_lag(corr, peak_lag)
        if refined_lag <= 0:
            return None

        frequency = sample_rate / refined_lag
        if frequency < self.config.min_freq or frequency > self.config.max_freq:
            return None

        return PitchResult(frequency=float(frequency), confidence=min(confidence, 1.0))

    @staticmethod
    def autocorrelate(buffer: np.ndarray) -> np.ndarray:
        """corr[lag] = sum(buffer[i] * buffer[i + lag]) for lag in 0..N-1."""
        size = len(buffer)
        return correlate(buffer, buffer, mode="full")[size - 1:]

    @staticmethod
    def _refine_lag(corr: np.ndarray, peak_lag: int) -> float:
        """Sub-sample peak position by parabolic interpolation."""
        y1 = corr[peak_lag - 1]
        y2 = corr[peak_lag]
        y3 = corr[peak_lag + 1] if peak_lag + 1 < len(corr) else 0.0
        denominator = 2 * (y1 - 2 * y2 + y3)
        if denominator == 0:
            denominator = 1.0
        return peak_lag + (y1 - y3) / denominator

    @staticmethod
    def input_level(buffer: np.ndarray, gain: float = INPUT_LEVEL_GAIN) -> float:
        """Scaled RMS level (0-1) for level meters and note velocity."""
        return min(1.0, rms(np.asarray(buffer)) * gain)
