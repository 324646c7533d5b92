"""Tests for MIDI and JSON export."""

import json

import pretty_midi
import pytest

from improv_coach.core import NoteEvent, ScoreMetrics, SessionResult, SessionSettings, Style
from improv_coach.output import JSONExporter, MIDIExporter


@pytest.fixture
def events():
    return [
        NoteEvent("A3", 220.0, 0.0, 0.9, 0, 0.5),
        NoteEvent("C4", 262.0, 500.0, 0.9, 6, 0.0),
        NoteEvent("??", 0.0, 750.0, 0.2, 0, 0.3),
        NoteEvent("E4", 330.0, 1000.0, 0.9, -3, 1.0),
    ]


@pytest.fixture
def result(events):
    return SessionResult(
        overall_score=91,
        metrics=ScoreMetrics(100, 90, 95, 80, 70),
        feedback=["Analysis completed using local metrics."],
        strengths=["Great intonation and pitch stability"],
        weaknesses=["Minor areas to refine for even better playing"],
        suggestions=["Continue exploring and developing your unique voice"],
        note_events=tuple(events),
        duration=1000.0,
    )


class TestMIDIExporter:
    """Note events to MIDI notes."""

    def test_notes_last_until_next_onset(self, events):
        midi = MIDIExporter(tempo=120).to_pretty_midi(events)
        notes = midi.instruments[0].notes

        assert [n.pitch for n in notes] == [57, 60, 64]
        assert [(n.start, n.end) for n in notes] == [(0.0, 0.5), (0.5, 1.0), (1.0, 1.5)]

    def test_velocity_scaling(self, events):
        notes = MIDIExporter().to_pretty_midi(events).instruments[0].notes
        assert [n.velocity for n in notes] == [64, 20, 127]

    def test_instrument(self, events):
        instrument = MIDIExporter().to_pretty_midi(events).instruments[0]
        assert instrument.program == 27
        assert not instrument.is_drum

    def test_empty(self):
        midi = MIDIExporter().to_pretty_midi([])
        assert midi.instruments[0].notes == []

    def test_export_round_trip(self, events, tmp_path):
        path = tmp_path / "out" / "session.mid"
        MIDIExporter(tempo=90).export(events, str(path))

        loaded = pretty_midi.PrettyMIDI(str(path))
        notes = loaded.instruments[0].notes
        assert [n.pitch for n in notes] == [57, 60, 64]
        assert notes[1].start == pytest.approx(0.5, abs=0.01)


class TestJSONExporter:
    """Result reports."""

    def test_to_dict(self, result):
        settings = SessionSettings(style=Style.METAL, key="E", tempo=140, metronome_enabled=False)
        data = JSONExporter().to_dict(result, settings)

        assert data["overallScore"] == 91
        assert data["metrics"]["phraseConsistency"] == 80
        assert data["source"] == "local"
        assert len(data["noteEvents"]) == 4
        assert data["noteEvents"][1]["cents"] == 6
        assert data["settings"] == {
            "style": "metal",
            "key": "E",
            "tempo": 140,
            "metronomeEnabled": False,
        }

    def test_export(self, result, tmp_path):
        path = tmp_path / "reports" / "session.json"
        JSONExporter().export(result, SessionSettings(), str(path))

        data = json.loads(path.read_text())
        assert data["overallScore"] == 91
        assert data["settings"]["style"] == "blues"
