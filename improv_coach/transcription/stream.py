"""Real-time note event extraction.

The stream builder pulls one analysis window per frame from its audio
source, runs the pitch detector, and turns stable pitches into
NoteEvent records. Debouncing keeps a sustained note from flooding the
sequence while still letting fast repeated picking through.
"""

from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ..analysis import PitchDetector
from ..core import NoteEvent, MicrophonePermissionError
from ..core.constants import (
    DEFAULT_FRAME_RATE,
    DEFAULT_WINDOW_SIZE,
    EMISSION_CONFIDENCE_THRESHOLD,
    DEBOUNCE_MS,
    CURRENT_NOTE_HOLD_MS,
)
from ..core.timing import Clock, ManualClock, MonotonicClock, FrameScheduler
from ..input import AudioSource, BufferAudioSource
from ..theory import frequency_to_note, FretboardTracker, FretPosition
from .base import Transcriber


class ListeningState(Enum):
    """Lifecycle of a listening session."""
    IDLE = "idle"
    LISTENING = "listening"
    STOPPED = "stopped"
    ERROR = "error"  # capture could not be started


class NoteEventStreamBuilder:
    """Build the note event sequence of one practice session.

    State:
        state: Current ListeningState
        note_events: Append-only sequence of emitted events
        current_note: Most recent event while the pitch is still sounding
        input_level: Scaled RMS of the last window (0-1)
        session_start: Clock time listening started (seconds)
        last_note: Name of the last emitted note (debounce)
        last_note_time: Timestamp of the last emission in ms (debounce)
    """

    def __init__(
        self,
        source: AudioSource,
        clock: Optional[Clock] = None,
        detector: Optional[PitchDetector] = None,
        emission_threshold: float = EMISSION_CONFIDENCE_THRESHOLD,
        debounce_ms: float = DEBOUNCE_MS,
        hold_ms: float = CURRENT_NOTE_HOLD_MS,
    ):
        """
        Initialize NoteEventStreamBuilder.

        Args:
            source: Audio source owned by this builder while listening
            clock: Time source (wall clock by default)
            detector: Pitch detector for each window
            emission_threshold: Minimum confidence to emit a note event
            debounce_ms: Minimum spacing between repeats of the same note
            hold_ms: Silence after which the current note indicator clears
        """
        self.source = source
        self.clock = clock or MonotonicClock()
        self.detector = detector or PitchDetector()
        self.emission_threshold = emission_threshold
        self.debounce_ms = debounce_ms
        self.hold_ms = hold_ms

        self.state = ListeningState.IDLE
        self.error: Optional[str] = None
        self.note_events: List[NoteEvent] = []
        self.current_note: Optional[NoteEvent] = None
        self.current_position: Optional[FretPosition] = None
        self.input_level = 0.0
        self.session_start = 0.0
        self.last_note: Optional[str] = None
        self.last_note_time: Optional[float] = None
        self._fretboard = FretboardTracker()

    @property
    def is_listening(self) -> bool:
        return self.state is ListeningState.LISTENING

    def elapsed_ms(self) -> float:
        """Milliseconds since listening started."""
        return (self.clock.now() - self.session_start) * 1000.0

    def start_listening(self) -> None:
        """
        Open the audio source and start a fresh timeline.

        Raises:
            MicrophonePermissionError: If the capture device cannot be opened
        """
        if self.is_listening:
            return
        try:
            self.source.open()
        except MicrophonePermissionError as e:
            self.state = ListeningState.ERROR
            self.error = str(e)
            raise

        self.error = None
        self.session_start = self.clock.now()
        self._reset_tracking()
        self.state = ListeningState.LISTENING

    def stop_listening(self) -> None:
        """Halt frame processing and release the audio source."""
        if self.is_listening:
            self.source.close()
            self.state = ListeningState.STOPPED
        self.current_note = None
        self.input_level = 0.0

    def clear_notes(self) -> None:
        """Forget all events and debounce state before a new session."""
        self.note_events = []
        self.current_note = None
        self.session_start = self.clock.now()
        self._reset_tracking()

    def _reset_tracking(self) -> None:
        self.last_note = None
        self.last_note_time = None
        self.current_position = None
        self._fretboard.reset()

    def snapshot(self) -> Tuple[NoteEvent, ...]:
        """Frozen copy of the sequence for scoring."""
        return tuple(self.note_events)

    def process_frame(self) -> Optional[NoteEvent]:
        """
        Analyze the latest window from the source.

        Returns:
            The NoteEvent emitted this frame, if any
        """
        if not self.is_listening:
            return None

        window = self.source.read_window()
        self.input_level = self.detector.input_level(window)
        now_ms = self.elapsed_ms()

        result = self.detector.detect(window, self.source.sample_rate)
        if result is None or result.confidence <= self.emission_threshold:
            if self.last_note_time is None or now_ms - self.last_note_time > self.hold_ms:
                self.current_note = None
            return None

        note, cents = frequency_to_note(result.frequency)
        if not self._should_emit(note, now_ms):
            return None

        event = NoteEvent(
            note=note,
            frequency=result.frequency,
            timestamp=now_ms,
            confidence=result.confidence,
            cents=cents,
            velocity=self.input_level,
        )
        self.note_events.append(event)
        self.current_note = event
        self.current_position = self._fretboard.update(note)
        self.last_note = note
        self.last_note_time = now_ms
        return event

    def _should_emit(self, note: str, now_ms: float) -> bool:
        """A new note always emits; the same note only after the debounce interval."""
        if note != self.last_note or self.last_note_time is None:
            return True
        return now_ms - self.last_note_time >= self.debounce_ms

    def attach(self, scheduler: FrameScheduler, frame_rate: float = DEFAULT_FRAME_RATE):
        """Register per-frame processing on a scheduler."""
        return scheduler.every(1.0 / frame_rate, self.process_frame, name="audio-frame")


class StreamTranscriber(Transcriber):
    """Replay a recording through the real-time pipeline.

    A manual clock steps through the audio at the live frame rate, so
    the result matches what a live session would have produced.
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        frame_rate: float = DEFAULT_FRAME_RATE,
        detector: Optional[PitchDetector] = None,
    ):
        self.window_size = window_size
        self.frame_rate = frame_rate
        self.detector = detector

    def transcribe(self, audio: np.ndarray, sr: int) -> List[NoteEvent]:
        clock = ManualClock()
        source = BufferAudioSource(audio, sr, clock, window_size=self.window_size)
        builder = NoteEventStreamBuilder(source, clock=clock, detector=self.detector)
        scheduler = FrameScheduler(clock)

        builder.start_listening()
        builder.attach(scheduler, self.frame_rate)
        scheduler.run(until=lambda: source.exhausted)
        builder.stop_listening()

        return list(builder.snapshot())
