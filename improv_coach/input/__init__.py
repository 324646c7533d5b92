"""Input layer - Audio capture and loading.

- Live microphone capture (sounddevice)
- Audio files replayed through the same windowed interface
"""

from .base import AudioSource
from .loader import AudioLoader, BufferAudioSource
from .microphone import MicrophoneSource

__all__ = [
    "AudioSource",
    "AudioLoader",
    "BufferAudioSource",
    "MicrophoneSource",
]
