"""Session settings chosen by the player before a session starts."""

from dataclasses import dataclass
from enum import Enum

from .constants import PITCH_NAMES, MIN_TEMPO, MAX_TEMPO, DEFAULT_TEMPO


class Style(Enum):
    """Musical styles a session can be played in."""
    ROCK = "rock"
    BLUES = "blues"
    METAL = "metal"


@dataclass(frozen=True)
class SessionSettings:
    """Style, key and tempo for one practice session."""

    style: Style = Style.BLUES
    key: str = "A"
    tempo: int = DEFAULT_TEMPO  # BPM
    metronome_enabled: bool = True

    def __post_init__(self):
        # Accept plain strings for the style ("blues" -> Style.BLUES)
        if not isinstance(self.style, Style):
            object.__setattr__(self, "style", Style(str(self.style).lower()))

    def validate(self) -> "SessionSettings":
        """Check the settings are within the supported ranges.

        Raises:
            ValueError: If the key or tempo is not supported
        """
        if self.key not in PITCH_NAMES:
            raise ValueError(
                f"Unsupported key: {self.key}. Supported: {', '.join(PITCH_NAMES)}"
            )
        if not MIN_TEMPO <= self.tempo <= MAX_TEMPO:
            raise ValueError(
                f"Tempo must be between {MIN_TEMPO} and {MAX_TEMPO} BPM, got {self.tempo}"
            )
        return self
