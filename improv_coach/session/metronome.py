"""Metronome driven by the frame scheduler."""

from typing import Callable, Optional

import numpy as np

from ..core.constants import BEATS_PER_BAR, DEFAULT_SR
from ..core.timing import FrameScheduler, ScheduledTask

CLICK_DURATION = 0.05  # seconds
ACCENT_FREQ = 800.0
BEAT_FREQ = 600.0
ACCENT_VOLUME = 0.8
BEAT_VOLUME = 0.6
CLICK_DECAY = 20.0

Player = Callable[[np.ndarray, int], None]


def generate_click(accent: bool = False, sr: int = DEFAULT_SR) -> np.ndarray:
    """Short decaying sine tick; the accent is higher and louder."""
    n_samples = int(sr * CLICK_DURATION)
    t = np.arange(n_samples) / sr
    freq = ACCENT_FREQ if accent else BEAT_FREQ
    volume = ACCENT_VOLUME if accent else BEAT_VOLUME
    envelope = np.exp(-t * CLICK_DECAY)
    return (np.sin(2 * np.pi * freq * t) * envelope * volume).astype(np.float32)


def sounddevice_player(samples: np.ndarray, sr: int) -> None:
    """Play a click without blocking."""
    import sounddevice as sd

    sd.play(samples, sr)


class Metronome:
    """Four-beat metronome with an accented downbeat.

    The first tick sounds as soon as the metronome starts.
    """

    def __init__(
        self,
        tempo: int,
        enabled: bool = True,
        player: Optional[Player] = None,
        sr: int = DEFAULT_SR,
    ):
        self.tempo = tempo
        self.enabled = enabled
        self.player = player
        self.sr = sr
        self.beat = 0  # 1-4 while playing, 0 when stopped
        self.ticks = 0
        self._scheduler: Optional[FrameScheduler] = None
        self._task: Optional[ScheduledTask] = None
        self._clicks = {
            True: generate_click(True, sr),
            False: generate_click(False, sr),
        }

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return 60.0 / self.tempo

    @property
    def is_playing(self) -> bool:
        return self._task is not None

    def start(self, scheduler: FrameScheduler) -> None:
        if self.is_playing:
            return
        self._scheduler = scheduler
        self.beat = 0
        self._task = scheduler.every(self.interval, self.tick, name="metronome", immediate=True)

    def stop(self) -> None:
        if self._task is not None and self._scheduler is not None:
            self._scheduler.cancel(self._task)
        self._task = None
        self.beat = 0

    def toggle(self, scheduler: FrameScheduler) -> None:
        if self.is_playing:
            self.stop()
        else:
            self.start(scheduler)

    def set_tempo(self, tempo: int) -> None:
        """Change tempo, restarting the beat if running."""
        self.tempo = tempo
        if self.is_playing:
            scheduler = self._scheduler
            self.stop()
            self.start(scheduler)

    def tick(self) -> None:
        if not self.enabled:
            return
        self.beat = self.beat % BEATS_PER_BAR + 1
        self.ticks += 1
        if self.player is not None:
            self.player(self._clicks[self.beat == 1], self.sr)
