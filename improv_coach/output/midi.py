"""MIDI export of played note events."""

from pathlib import Path
from typing import Sequence

import pretty_midi

from ..core import NoteEvent, DEFAULT_TEMPO


class MIDIExporter:
    """Export note events to MIDI format.

    Events only mark onsets, so each note lasts until the next one
    starts; the last note gets `last_note_duration`.
    """

    def __init__(
        self,
        tempo: float = DEFAULT_TEMPO,
        instrument_name: str = "Electric Guitar (clean)",
        instrument_program: int = 27,
        last_note_duration: float = 0.5,
        min_velocity: int = 20,
    ):
        """
        Initialize MIDIExporter.

        Args:
            tempo: Tempo in BPM
            instrument_name: MIDI instrument name
            instrument_program: MIDI program number (0-127)
            last_note_duration: Length of the final note in seconds
            min_velocity: Floor for MIDI velocity of quiet notes
        """
        self.tempo = tempo
        self.instrument_name = instrument_name
        self.instrument_program = instrument_program
        self.last_note_duration = last_note_duration
        self.min_velocity = min_velocity

    def to_pretty_midi(self, events: Sequence[NoteEvent]) -> pretty_midi.PrettyMIDI:
        """Convert events to a PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=self.instrument_name,
        )

        playable = [event for event in events if event.midi is not None]
        for i, event in enumerate(playable):
            start = event.timestamp / 1000.0
            if i + 1 < len(playable):
                end = playable[i + 1].timestamp / 1000.0
            else:
                end = start + self.last_note_duration
            if end <= start:
                end = start + 0.01
            velocity = int(min(127, max(self.min_velocity, round(event.velocity * 127))))
            instrument.notes.append(
                pretty_midi.Note(velocity=velocity, pitch=event.midi, start=start, end=end)
            )

        midi.instruments.append(instrument)
        return midi

    def export(self, events: Sequence[NoteEvent], output_path: str) -> None:
        """
        Export note events to a MIDI file.

        Args:
            events: Note events in onset order
            output_path: Path to output MIDI file
        """
        midi = self.to_pretty_midi(events)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))
