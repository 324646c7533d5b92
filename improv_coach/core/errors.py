"""Exception types raised across Improv Coach."""


class ImprovCoachError(Exception):
    """Base class for all Improv Coach errors."""


class MicrophonePermissionError(ImprovCoachError):
    """Microphone access was denied or no capture device is available."""


class AssessmentError(ImprovCoachError):
    """The external assessment service failed or returned a malformed result."""
