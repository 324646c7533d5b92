"""Tests for real-time note event extraction."""

from typing import Optional

import numpy as np
import pytest

from improv_coach.core import ManualClock, FrameScheduler, MicrophonePermissionError
from improv_coach.core.constants import GUITAR_MIN_FREQ, GUITAR_MAX_FREQ
from improv_coach.input import AudioSource
from improv_coach.transcription import (
    NoteEventStreamBuilder,
    ListeningState,
    StreamTranscriber,
)

from generate_test_audio import note_sequence

SR = 44100
WINDOW = 4096
FRAME = 1.0 / 60


class ToneSource(AudioSource):
    """Serves a pure tone (or silence) chosen by the test."""

    def __init__(self, fail: bool = False):
        self.sample_rate = SR
        self.window_size = WINDOW
        self.freq: Optional[float] = None
        self.fail = fail
        self.opened = False
        self.closed = False

    def open(self):
        if self.fail:
            raise MicrophonePermissionError("Permission denied")
        self.opened = True
        self.closed = False

    def close(self):
        self.opened = False
        self.closed = True

    @property
    def is_open(self):
        return self.opened

    def read_window(self):
        if self.freq is None:
            return np.zeros(WINDOW, dtype=np.float32)
        t = np.arange(WINDOW) / SR
        return (0.5 * np.sin(2 * np.pi * self.freq * t)).astype(np.float32)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def source():
    return ToneSource()


@pytest.fixture
def builder(source, clock):
    b = NoteEventStreamBuilder(source, clock=clock)
    b.start_listening()
    return b


def run_frames(builder, clock, count):
    emitted = []
    for _ in range(count):
        clock.advance(FRAME)
        event = builder.process_frame()
        if event is not None:
            emitted.append(event)
    return emitted


class TestDebounce:
    """A sustained pitch must not flood the sequence."""

    def test_sustained_note_spacing(self, builder, source, clock):
        source.freq = 220.0
        events = run_frames(builder, clock, 120)

        assert len(events) >= 15
        assert all(event.note == "A3" for event in events)
        gaps = np.diff([event.timestamp for event in events])
        assert np.all(gaps >= 100.0)
        assert np.all(gaps < 120.0)

    def test_note_change_emits_immediately(self, builder, source, clock):
        source.freq = 220.0
        first = run_frames(builder, clock, 1)
        source.freq = 261.63
        second = run_frames(builder, clock, 1)
        source.freq = 220.0
        third = run_frames(builder, clock, 1)

        assert [e.note for e in first + second + third] == ["A3", "C4", "A3"]
        assert second[0].timestamp - first[0].timestamp < 100.0

    def test_same_note_repeats_after_interval(self, builder, source, clock):
        source.freq = 220.0
        run_frames(builder, clock, 1)
        assert run_frames(builder, clock, 5) == []  # within 100ms
        repeated = run_frames(builder, clock, 2)
        assert len(repeated) == 1
        assert repeated[0].note == "A3"

    def test_debounce_state_is_explicit(self, builder, source, clock):
        source.freq = 440.0
        run_frames(builder, clock, 1)
        assert builder.last_note == "A4"
        assert builder.last_note_time == pytest.approx(FRAME * 1000)


class TestEmission:
    """Content and gating of emitted events."""

    def test_event_fields(self, builder, source, clock):
        source.freq = 440.0
        event = run_frames(builder, clock, 1)[0]

        assert event.note == "A4"
        assert event.frequency == pytest.approx(440.0, rel=0.01)
        assert GUITAR_MIN_FREQ <= event.frequency <= GUITAR_MAX_FREQ
        assert -50 <= event.cents <= 50
        assert 0.15 < event.confidence <= 1.0
        assert 0.0 <= event.velocity <= 1.0
        assert event.velocity == pytest.approx(builder.input_level)

    def test_timestamps_relative_to_session_start(self, source):
        clock = ManualClock(start=1000.0)
        builder = NoteEventStreamBuilder(source, clock=clock)
        builder.start_listening()
        source.freq = 330.0
        event = run_frames(builder, clock, 3)[0]
        assert event.timestamp == pytest.approx(FRAME * 1000)

    def test_timestamps_non_decreasing(self, builder, source, clock):
        for freq in (220.0, 246.94, 261.63, None, 293.66, 329.63):
            source.freq = freq
            run_frames(builder, clock, 10)
        timestamps = [event.timestamp for event in builder.note_events]
        assert timestamps == sorted(timestamps)
        assert len(timestamps) >= 5

    def test_silence_emits_nothing(self, builder, source, clock):
        source.freq = None
        assert run_frames(builder, clock, 30) == []
        assert builder.input_level == 0.0
        assert builder.current_note is None

    def test_emission_gate(self, source, clock):
        builder = NoteEventStreamBuilder(source, clock=clock, emission_threshold=1.0)
        builder.start_listening()
        source.freq = 440.0
        assert run_frames(builder, clock, 10) == []

    def test_current_note_clears_after_silence(self, builder, source, clock):
        source.freq = 220.0
        run_frames(builder, clock, 1)
        source.freq = None

        run_frames(builder, clock, 12)  # 200ms
        assert builder.current_note is not None
        run_frames(builder, clock, 12)  # 400ms
        assert builder.current_note is None
        assert len(builder.note_events) == 1

    def test_fret_position_follows_notes(self, builder, source, clock):
        source.freq = 220.0
        run_frames(builder, clock, 1)
        assert (builder.current_position.string, builder.current_position.fret) == (4, 7)


class TestLifecycle:
    """State machine transitions and resource ownership."""

    def test_initial_state(self, source, clock):
        builder = NoteEventStreamBuilder(source, clock=clock)
        assert builder.state is ListeningState.IDLE
        assert builder.process_frame() is None

    def test_start_opens_source(self, builder, source):
        assert builder.state is ListeningState.LISTENING
        assert source.opened

    def test_permission_denied(self, clock):
        builder = NoteEventStreamBuilder(ToneSource(fail=True), clock=clock)
        with pytest.raises(MicrophonePermissionError):
            builder.start_listening()
        assert builder.state is ListeningState.ERROR
        assert builder.error == "Permission denied"

    def test_stop_releases_source(self, builder, source, clock):
        source.freq = 220.0
        run_frames(builder, clock, 1)
        builder.stop_listening()

        assert builder.state is ListeningState.STOPPED
        assert source.closed
        assert builder.current_note is None
        assert run_frames(builder, clock, 10) == []
        assert len(builder.snapshot()) == 1

    def test_snapshot_is_immutable_copy(self, builder, source, clock):
        source.freq = 220.0
        run_frames(builder, clock, 1)
        snapshot = builder.snapshot()
        run_frames(builder, clock, 10)
        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
        assert len(builder.note_events) > 1

    def test_clear_notes_resets_sequence_and_debounce(self, builder, source, clock):
        source.freq = 220.0
        run_frames(builder, clock, 1)
        builder.clear_notes()
        assert builder.note_events == []
        assert builder.last_note is None

        # Same note emits straight away after clearing
        events = run_frames(builder, clock, 1)
        assert len(events) == 1
        assert events[0].timestamp == pytest.approx(FRAME * 1000)

    def test_driven_by_scheduler(self, builder, source, clock):
        source.freq = 220.0
        scheduler = FrameScheduler(clock)
        builder.attach(scheduler)
        scheduler.run(max_duration=1.0)

        assert clock.now() == pytest.approx(1.0, abs=2 * FRAME)
        assert 9 <= len(builder.note_events) <= 11


class TestStreamTranscriber:
    """Recorded audio replayed through the live pipeline."""

    def test_note_sequence(self):
        expected = ["A3", "C4", "D4", "E4"]
        audio = note_sequence([220.0, 261.63, 293.66, 329.63], 1.0, gap=0.15, sr=SR)
        events = StreamTranscriber().transcribe(audio, SR)

        notes = [event.note for event in events]
        matching = [note for note in notes if note in expected]
        assert len(matching) >= 0.7 * len(notes)

        collapsed = [n for i, n in enumerate(matching) if i == 0 or matching[i - 1] != n]
        assert collapsed == expected

    def test_silence(self):
        events = StreamTranscriber().transcribe(np.zeros(SR, dtype=np.float32), SR)
        assert events == []
