"""Live microphone capture with sounddevice."""

import threading
from typing import Optional

import numpy as np

from ..core.constants import DEFAULT_SR, DEFAULT_WINDOW_SIZE
from ..core.errors import MicrophonePermissionError
from .base import AudioSource


class MicrophoneSource(AudioSource):
    """Rolling window over an input device.

    Samples arrive raw: no echo cancellation, noise suppression or gain
    control is applied.
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SR,
        window_size: int = DEFAULT_WINDOW_SIZE,
        block_size: int = 512,
        device: Optional[int] = None,
    ):
        self.sample_rate = sample_rate
        self.window_size = window_size
        self.block_size = block_size
        self.device = device
        self._buffer = np.zeros(window_size, dtype=np.float32)
        self._lock = threading.Lock()
        self._stream = None

    def open(self) -> None:
        if self._stream is not None:
            return
        try:
            import sounddevice as sd
        except OSError as e:
            # PortAudio library missing
            raise MicrophonePermissionError(f"No audio capture backend: {e}") from e

        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate,
                blocksize=self.block_size,
                channels=1,
                dtype="float32",
                device=self.device,
                callback=self._callback,
            )
            stream.start()
        except sd.PortAudioError as e:
            raise MicrophonePermissionError(f"Failed to access microphone: {e}") from e

        with self._lock:
            self._buffer[:] = 0.0
        self._stream = stream

    def _callback(self, indata, frames, time_info, status):
        samples = indata[:, 0]
        with self._lock:
            if len(samples) >= self.window_size:
                self._buffer[:] = samples[-self.window_size:]
            else:
                self._buffer = np.roll(self._buffer, -len(samples))
                self._buffer[-len(samples):] = samples

    def read_window(self) -> np.ndarray:
        with self._lock:
            return self._buffer.copy()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None
