"""Global constants for Improv Coach."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Tuning reference
A4_FREQ = 440.0
A4_MIDI = 69

# Audio capture defaults
DEFAULT_SR = 44100
DEFAULT_WINDOW_SIZE = 4096
DEFAULT_FRAME_RATE = 60.0  # display refresh cadence, frames per second

# Pitch detection
SILENCE_RMS_THRESHOLD = 0.01
DETECTOR_CONFIDENCE_THRESHOLD = 0.1  # detector rejects below this
EMISSION_CONFIDENCE_THRESHOLD = 0.15  # stream builder emits above this
GUITAR_MIN_FREQ = 70.0
GUITAR_MAX_FREQ = 1400.0
INPUT_LEVEL_GAIN = 10.0

# Note event debouncing (milliseconds)
DEBOUNCE_MS = 100.0
CURRENT_NOTE_HOLD_MS = 300.0

# Session rules
MIN_TEMPO = 40
MAX_TEMPO = 200
DEFAULT_TEMPO = 120
MIN_SESSION_DURATION_S = 10
MAX_SESSION_DURATION_S = 180
BEATS_PER_BAR = 4

# Fretboard
MAX_FRET = 24
PREFERRED_FRET = 7
