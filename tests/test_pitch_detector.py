"""Tests for the autocorrelation pitch detector."""

import numpy as np
import pytest

from improv_coach.analysis import PitchDetector, DetectorConfig, rms
from improv_coach.core.constants import EMISSION_CONFIDENCE_THRESHOLD

from generate_test_audio import sine_wave, harmonic_tone

SR = 44100
WINDOW = 4096


def window_of(audio: np.ndarray) -> np.ndarray:
    return audio[:WINDOW]


@pytest.fixture
def detector():
    return PitchDetector()


class TestSilenceAndNoise:
    """Windows without a usable pitch must yield None."""

    def test_silence(self, detector):
        assert detector.detect(np.zeros(WINDOW, dtype=np.float32), SR) is None

    def test_below_silence_threshold(self, detector):
        quiet = sine_wave(440.0, 0.2, SR, amplitude=0.005)
        assert detector.detect(window_of(quiet), SR) is None

    def test_low_level_noise(self, detector):
        rng = np.random.default_rng(0)
        noise = (rng.standard_normal(WINDOW) * 0.005).astype(np.float32)
        assert detector.detect(noise, SR) is None

    def test_dc_offset_has_no_pitch(self, detector):
        assert detector.detect(np.full(WINDOW, 0.5, dtype=np.float32), SR) is None

    def test_empty_window(self, detector):
        assert detector.detect(np.array([], dtype=np.float32), SR) is None


class TestSineDetection:
    """Pure tones across the guitar range."""

    @pytest.mark.parametrize("freq", [82.41, 110.0, 196.0, 246.94, 440.0, 659.25, 880.0, 1318.5])
    def test_sine_within_one_percent(self, detector, freq):
        result = detector.detect(window_of(sine_wave(freq, 0.2, SR)), SR)
        assert result is not None
        assert result.frequency == pytest.approx(freq, rel=0.01)
        assert result.confidence > EMISSION_CONFIDENCE_THRESHOLD

    @pytest.mark.parametrize("freq", [110.0, 220.0, 329.63])
    def test_harmonic_tone_finds_fundamental(self, detector, freq):
        result = detector.detect(window_of(harmonic_tone(freq, 0.2, SR)), SR)
        assert result is not None
        assert result.frequency == pytest.approx(freq, rel=0.01)

    def test_other_sample_rate(self, detector):
        sr = 22050
        result = detector.detect(sine_wave(220.0, 0.2, sr)[:2048], sr)
        assert result is not None
        assert result.frequency == pytest.approx(220.0, rel=0.01)

    def test_confidence_bounded(self, detector):
        result = detector.detect(window_of(sine_wave(440.0, 0.2, SR)), SR)
        assert 0.0 < result.confidence <= 1.0

    def test_below_guitar_range_rejected(self, detector):
        assert detector.detect(window_of(sine_wave(50.0, 0.2, SR)), SR) is None

    def test_above_guitar_range_rejected(self, detector):
        assert detector.detect(window_of(sine_wave(2000.0, 0.2, SR)), SR) is None

    def test_custom_range(self):
        detector = PitchDetector(DetectorConfig(min_freq=30.0))
        result = detector.detect(window_of(sine_wave(50.0, 0.2, SR)), SR)
        assert result is not None
        assert result.frequency == pytest.approx(50.0, rel=0.02)

    def test_strict_confidence_threshold_rejects(self):
        detector = PitchDetector(DetectorConfig(confidence_threshold=1.01))
        assert detector.detect(window_of(sine_wave(440.0, 0.2, SR)), SR) is None


class TestHelpers:
    """Tests for autocorrelation and level helpers."""

    def test_autocorrelation_definition(self):
        rng = np.random.default_rng(1)
        buffer = rng.standard_normal(64)
        corr = PitchDetector.autocorrelate(buffer)
        assert len(corr) == 64
        for lag in (0, 1, 7, 63):
            expected = sum(buffer[i] * buffer[i + lag] for i in range(64 - lag))
            assert corr[lag] == pytest.approx(expected, abs=1e-9)

    def test_rms(self):
        assert rms(np.array([])) == 0.0
        assert rms(np.ones(10)) == pytest.approx(1.0)

    def test_input_level_is_scaled_and_clipped(self):
        loud = sine_wave(440.0, 0.1, SR, amplitude=0.5)
        quiet = sine_wave(440.0, 0.1, SR, amplitude=0.05)
        assert PitchDetector.input_level(loud) == 1.0
        assert PitchDetector.input_level(quiet) == pytest.approx(0.05 / np.sqrt(2) * 10, rel=0.01)
