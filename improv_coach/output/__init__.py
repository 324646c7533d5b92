"""Output layer - Export sessions to various formats.

- MIDI files of the played notes
- JSON reports of the analysis
"""

from .midi import MIDIExporter
from .report import JSONExporter

__all__ = [
    "MIDIExporter",
    "JSONExporter",
]
