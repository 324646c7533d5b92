"""Audio file loading and in-memory audio sources."""

from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import librosa

from ..core.constants import DEFAULT_SR, DEFAULT_WINDOW_SIZE
from ..core.timing import Clock
from .base import AudioSource


class AudioLoader:
    """Handles audio file loading and preprocessing."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a"}

    def __init__(
        self,
        target_sr: int = DEFAULT_SR,
        normalize: bool = False,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Target sample rate for resampling
            normalize: Peak-normalize audio amplitude if True
        """
        self.target_sr = target_sr
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Load an audio file as mono float samples.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (audio array, sample rate)

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=True)

        if self.normalize:
            audio = self._normalize(audio)

        return audio, sr

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if len(audio) else 0.0
        if peak > 0:
            audio = audio / peak
        return audio

    def get_duration(self, audio: np.ndarray, sr: Optional[int] = None) -> float:
        """Get duration in seconds."""
        sr = sr or self.target_sr
        return len(audio) / sr


class BufferAudioSource(AudioSource):
    """Serve windows from an in-memory recording as if it were live.

    The play position follows the clock: the window returned is the
    `window_size` samples ending at the time elapsed since `open()`.
    """

    def __init__(
        self,
        audio: np.ndarray,
        sample_rate: int,
        clock: Clock,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ):
        self.audio = np.asarray(audio, dtype=np.float32).ravel()
        self.sample_rate = sample_rate
        self.window_size = window_size
        self.clock = clock
        self._start: Optional[float] = None

    def open(self) -> None:
        self._start = self.clock.now()

    def close(self) -> None:
        self._start = None

    @property
    def is_open(self) -> bool:
        return self._start is not None

    @property
    def position(self) -> int:
        """Current play position in samples."""
        if self._start is None:
            return 0
        return int(round((self.clock.now() - self._start) * self.sample_rate))

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.audio)

    def read_window(self) -> np.ndarray:
        end = min(self.position, len(self.audio))
        start = max(0, end - self.window_size)
        window = self.audio[start:end]
        if len(window) < self.window_size:
            # Not enough audio played yet; pad the front with silence
            window = np.concatenate(
                [np.zeros(self.window_size - len(window), dtype=np.float32), window]
            )
        return window
