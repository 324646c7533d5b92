"""Transcription layer - Note event extraction from audio.

Converts a stream of analysis windows into discrete, debounced
note events timed from the start of the session.
"""

from .base import Transcriber
from .stream import NoteEventStreamBuilder, ListeningState, StreamTranscriber

__all__ = [
    "Transcriber",
    "NoteEventStreamBuilder",
    "ListeningState",
    "StreamTranscriber",
]
