"""Base classes for transcription."""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..core import NoteEvent


class Transcriber(ABC):
    """Abstract base class for turning recorded audio into note events."""

    @abstractmethod
    def transcribe(self, audio: np.ndarray, sr: int) -> List[NoteEvent]:
        """
        Transcribe audio to note events.

        Args:
            audio: Audio array (mono)
            sr: Sample rate

        Returns:
            Detected note events in onset order
        """
        pass
