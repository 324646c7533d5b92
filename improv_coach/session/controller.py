"""Practice session controller - setup, playing, analysis and results."""

from enum import Enum
from typing import Callable, List, Optional

from ..core import SessionResult, SessionSettings, MicrophonePermissionError
from ..core.constants import (
    DEFAULT_FRAME_RATE,
    MIN_SESSION_DURATION_S,
    MAX_SESSION_DURATION_S,
)
from ..core.timing import FrameScheduler, ScheduledTask
from ..transcription import NoteEventStreamBuilder
from .analyzer import SessionAnalyzer
from .metronome import Metronome


class SessionView(Enum):
    """Where the player is in the practice flow."""
    SETUP = "setup"
    PLAYING = "playing"
    ANALYZING = "analyzing"
    RESULTS = "results"


class PracticeSession:
    """Run one improvisation session from start to result.

    The scheduler drives three timers while playing: per-frame audio
    processing, a one-second session clock and the metronome. Ending
    or cancelling halts all of them and releases the audio source
    before anything reads the note events.
    """

    def __init__(
        self,
        settings: SessionSettings,
        builder: NoteEventStreamBuilder,
        analyzer: Optional[SessionAnalyzer] = None,
        scheduler: Optional[FrameScheduler] = None,
        metronome: Optional[Metronome] = None,
        frame_rate: float = DEFAULT_FRAME_RATE,
        min_duration: int = MIN_SESSION_DURATION_S,
        max_duration: int = MAX_SESSION_DURATION_S,
    ):
        self.settings = settings
        self.builder = builder
        self.analyzer = analyzer or SessionAnalyzer()
        self.scheduler = scheduler or FrameScheduler(builder.clock)
        self.metronome = metronome or Metronome(settings.tempo, enabled=settings.metronome_enabled)
        self.frame_rate = frame_rate
        self.min_duration = min_duration
        self.max_duration = max_duration

        self.view = SessionView.SETUP
        self.elapsed = 0  # whole seconds played
        self.result: Optional[SessionResult] = None
        self.error: Optional[str] = None
        self._tasks: List[ScheduledTask] = []

    @property
    def is_playing(self) -> bool:
        return self.view is SessionView.PLAYING

    @property
    def can_end(self) -> bool:
        """End-and-analyze is only available after the minimum duration."""
        return self.is_playing and self.elapsed >= self.min_duration

    @property
    def remaining_before_end(self) -> int:
        return max(0, self.min_duration - self.elapsed)

    def start(self) -> None:
        """
        Start listening with a fresh note sequence.

        Raises:
            MicrophonePermissionError: If the microphone cannot be opened;
                the session stays in setup with `error` set
        """
        if self.is_playing:
            return

        self.error = None
        self.result = None
        self.elapsed = 0
        self.builder.clear_notes()
        try:
            self.builder.start_listening()
        except MicrophonePermissionError as e:
            self.error = str(e)
            self.view = SessionView.SETUP
            raise

        self._tasks = [
            self.builder.attach(self.scheduler, self.frame_rate),
            self.scheduler.every(1.0, self._tick_timer, name="session-timer"),
        ]
        if self.settings.metronome_enabled:
            self.metronome.start(self.scheduler)
        self.view = SessionView.PLAYING

    def run(self, until: Optional[Callable[[], bool]] = None) -> Optional[SessionResult]:
        """Drive the scheduler until the session leaves the playing view."""
        self.scheduler.run(
            until=lambda: not self.is_playing or (until is not None and until())
        )
        return self.result

    def _tick_timer(self) -> None:
        if not self.is_playing:
            return
        self.elapsed += 1
        if self.elapsed >= self.max_duration:
            self._finish()

    def end_and_analyze(self) -> Optional[SessionResult]:
        """Stop and analyze; ignored before the minimum duration."""
        if not self.can_end:
            return None
        return self._finish()

    def cancel(self) -> None:
        """Abandon the session and return to setup; always allowed."""
        self._halt()
        self.view = SessionView.SETUP

    def _halt(self) -> None:
        for task in self._tasks:
            self.scheduler.cancel(task)
        self._tasks = []
        self.metronome.stop()
        self.builder.stop_listening()
        self.scheduler.stop()

    def _finish(self) -> SessionResult:
        self._halt()
        self.view = SessionView.ANALYZING
        events = self.builder.snapshot()
        self.result = self.analyzer.analyze(events, self.settings)
        self.view = SessionView.RESULTS
        return self.result
