"""Base classes for audio input."""

from abc import ABC, abstractmethod

import numpy as np


class AudioSource(ABC):
    """A capture device (or stand-in) that serves fixed-size analysis windows.

    The source is owned by one stream builder for the lifetime of a
    listening session; nothing else reads raw audio from it.
    """

    sample_rate: int
    window_size: int

    @abstractmethod
    def open(self) -> None:
        """Start capturing.

        Raises:
            MicrophonePermissionError: If capture cannot be started
        """

    @abstractmethod
    def read_window(self) -> np.ndarray:
        """Return the most recent `window_size` samples (mono float)."""

    @abstractmethod
    def close(self) -> None:
        """Stop capturing and release the device."""

    @property
    def is_open(self) -> bool:
        return False

    @property
    def exhausted(self) -> bool:
        """True when a finite source has no more audio to serve."""
        return False
