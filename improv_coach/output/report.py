"""JSON export of session results."""

import json
from pathlib import Path

from ..core import SessionResult, SessionSettings


class JSONExporter:
    """Write a session result and its settings as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def to_dict(self, result: SessionResult, settings: SessionSettings) -> dict:
        data = result.to_dict()
        data["settings"] = {
            "style": settings.style.value,
            "key": settings.key,
            "tempo": settings.tempo,
            "metronomeEnabled": settings.metronome_enabled,
        }
        return data

    def export(self, result: SessionResult, settings: SessionSettings, output_path: str) -> None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(result, settings), indent=self.indent))
