"""Command-line interface for Improv Coach.

Provides commands for:
- practice: Live improvisation session over the microphone
- analyze: Score a recorded performance from an audio file
- scales: Show the notes allowed for a style and key
- fret: Show where a note can be played on the neck
"""

import typer
import time
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table

from .core import SessionSettings, SessionResult, Style, MicrophonePermissionError

app = typer.Typer(
    name="improv-coach",
    help="Guitar improvisation practice with real-time note detection and scoring",
    rich_markup_mode="markdown",
)
console = Console()


def _build_settings(style: str, key: str, tempo: int, metronome: bool) -> SessionSettings:
    """Validate command-line settings, exiting with a message if invalid."""
    try:
        return SessionSettings(
            style=Style(style.lower()),
            key=key.upper(),
            tempo=tempo,
            metronome_enabled=metronome,
        ).validate()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _build_analyzer(use_assessment: bool, timeout: float):
    from .session import SessionAnalyzer, AssessmentConfig, HttpAssessmentClient

    if not use_assessment:
        return SessionAnalyzer()
    config = AssessmentConfig.from_env(timeout=timeout)
    if config is None:
        console.print(
            f"[yellow]{AssessmentConfig.URL_ENV} not set; using local analysis only[/yellow]"
        )
        return SessionAnalyzer()
    return SessionAnalyzer(client=HttpAssessmentClient(config))


def _report(
    result: SessionResult,
    settings: SessionSettings,
    json_output: bool,
    verbose: bool,
    midi: Optional[Path],
) -> None:
    from .output import JSONExporter, MIDIExporter

    if midi is not None:
        MIDIExporter(tempo=settings.tempo).export(list(result.note_events), str(midi))
        if not json_output:
            console.print(f"[blue]Exported MIDI:[/blue] {midi}")

    if json_output:
        console.print_json(data=JSONExporter().to_dict(result, settings))
        return

    if verbose and result.note_events:
        _show_notes_table(result.note_events)
    _show_result(result)


@app.command()
def practice(
    style: str = typer.Option("blues", "-s", "--style", help="Style: rock, blues or metal"),
    key: str = typer.Option("A", "-k", "--key", help="Key (C, C#, D, ... B)"),
    tempo: int = typer.Option(120, "-t", "--tempo", help="Tempo in BPM (40-200)"),
    metronome: bool = typer.Option(True, "--metronome/--no-metronome", help="Play a click track"),
    duration: int = typer.Option(
        0, "-d", "--duration", help="Stop automatically after N seconds (0 = until Ctrl+C)"
    ),
    device: Optional[int] = typer.Option(None, "--device", help="Input device index"),
    assessment: bool = typer.Option(
        True, "--assessment/--local", help="Ask the assessment service for feedback"
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Assessment timeout in seconds"),
    midi: Optional[Path] = typer.Option(None, "--midi", help="Save played notes as MIDI"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show every detected note"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """Play over a style, key and tempo while the microphone listens.

    **Examples:**

        improv-coach practice -s blues -k A -t 90

        improv-coach practice -s metal -k E --no-metronome -d 60
    """
    from .core import MonotonicClock
    from .core.constants import MIN_SESSION_DURATION_S, MAX_SESSION_DURATION_S
    from .input import MicrophoneSource
    from .transcription import NoteEventStreamBuilder
    from .session import PracticeSession, Metronome
    from .session.metronome import sounddevice_player

    settings = _build_settings(style, key, tempo, metronome)
    if duration and not MIN_SESSION_DURATION_S <= duration <= MAX_SESSION_DURATION_S:
        console.print(
            f"[red]Error: Duration must be between {MIN_SESSION_DURATION_S} "
            f"and {MAX_SESSION_DURATION_S} seconds[/red]"
        )
        raise typer.Exit(1)

    clock = MonotonicClock()
    source = MicrophoneSource(device=device)
    builder = NoteEventStreamBuilder(source, clock=clock)
    session = PracticeSession(
        settings,
        builder,
        analyzer=_build_analyzer(assessment, timeout),
        metronome=Metronome(
            settings.tempo,
            enabled=settings.metronome_enabled,
            player=sounddevice_player,
        ),
    )

    try:
        session.start()
    except MicrophonePermissionError as e:
        console.print(f"[red]Microphone access denied: {e}[/red]")
        console.print("Check your audio device permissions and try again.")
        raise typer.Exit(1)

    console.print(
        f"[blue]Listening:[/blue] {settings.style.value} in {settings.key} "
        f"at {settings.tempo} BPM. Press Ctrl+C to finish."
    )

    last_note = None

    def _until() -> bool:
        nonlocal last_note
        current = builder.current_note
        if verbose and current is not None and current is not last_note:
            position = builder.current_position
            where = f" (string {position.string}, fret {position.fret})" if position else ""
            console.print(f"  {current.note} {current.cents:+d}c{where}")
            last_note = current
        return bool(duration) and session.elapsed >= duration

    try:
        session.run(until=_until)
    except KeyboardInterrupt:
        pass

    if session.is_playing:
        if not session.can_end:
            session.cancel()
            console.print(
                f"[yellow]Session cancelled: play at least {session.min_duration}s "
                f"to get an analysis[/yellow]"
            )
            raise typer.Exit(1)
        console.print("[blue]Analyzing session...[/blue]")
        session.end_and_analyze()

    if session.result is None:
        console.print("[red]Session ended before analysis finished[/red]")
        raise typer.Exit(1)

    _report(session.result, settings, json_output, verbose=False, midi=midi)


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Recorded performance (WAV, MP3, FLAC, OGG)"),
    style: str = typer.Option("blues", "-s", "--style", help="Style: rock, blues or metal"),
    key: str = typer.Option("A", "-k", "--key", help="Key (C, C#, D, ... B)"),
    tempo: int = typer.Option(120, "-t", "--tempo", help="Tempo in BPM (40-200)"),
    assessment: bool = typer.Option(
        False, "--assessment/--local", help="Ask the assessment service for feedback"
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Assessment timeout in seconds"),
    midi: Optional[Path] = typer.Option(None, "--midi", help="Save detected notes as MIDI"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show every detected note"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """Score a recorded performance as if it had been played live.

    **Examples:**

        improv-coach analyze take1.wav -s rock -k E -t 100

        improv-coach analyze take1.wav --json --midi take1.mid
    """
    from .input import AudioLoader
    from .transcription import StreamTranscriber

    settings = _build_settings(style, key, tempo, metronome=False)

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    loader = AudioLoader()
    try:
        audio, sr = loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not json_output:
        console.print(f"[blue]Loaded audio:[/blue] {input_file}")
        console.print(f"  Duration: {loader.get_duration(audio, sr):.2f}s, Sample rate: {sr}Hz")

    started = time.time()
    events = StreamTranscriber().transcribe(audio, sr)
    if not json_output:
        console.print(f"  Detected {len(events)} notes in {time.time() - started:.2f}s")

    result = _build_analyzer(assessment, timeout).analyze(events, settings)
    _report(result, settings, json_output, verbose, midi)


@app.command()
def scales(
    style: str = typer.Option("blues", "-s", "--style", help="Style: rock, blues or metal"),
    key: str = typer.Option("A", "-k", "--key", help="Key (C, C#, D, ... B)"),
):
    """Show the scales of a style and the notes they allow in a key."""
    from .core import PITCH_NAMES
    from .theory import STYLE_SCALES, get_scale_notes, get_style_notes

    settings = _build_settings(style, key, 120, metronome=False)

    table = Table(title=f"{settings.style.value.title()} scales in {settings.key}")
    table.add_column("Scale", style="cyan")
    table.add_column("Notes", style="green")
    for scale in STYLE_SCALES[settings.style]:
        table.add_row(scale.replace("_", " "), " ".join(get_scale_notes(settings.key, scale)))
    console.print(table)

    allowed = get_style_notes(settings.style, settings.key)
    ordered = [name for name in PITCH_NAMES if name in allowed]
    console.print(f"[bold]In scale:[/bold] {' '.join(ordered)}")


@app.command()
def fret(
    note: str = typer.Argument(..., help="Note with octave, e.g. A3 or C#4"),
):
    """Show every place a note can be fretted in standard tuning."""
    from .theory import note_to_fret_positions, most_likely_fret_position

    positions = note_to_fret_positions(note)
    if not positions:
        console.print(f"[red]Error: {note} cannot be played in standard tuning[/red]")
        raise typer.Exit(1)

    best = most_likely_fret_position(note)
    table = Table(title=f"Positions for {note}")
    table.add_column("String", style="cyan")
    table.add_column("Fret", style="green")
    table.add_column("", style="magenta")
    for position in positions:
        table.add_row(
            str(position.string),
            str(position.fret),
            "preferred" if position == best else "",
        )
    console.print(table)


def _show_result(result: SessionResult):
    """Display scores and feedback."""
    table = Table(title=f"Overall score: {result.overall_score}")
    table.add_column("Metric", style="cyan")
    table.add_column("Score", style="green")

    metrics = result.metrics
    table.add_row("Scale adherence", str(metrics.scale_adherence))
    table.add_row("Timing accuracy", str(metrics.timing_accuracy))
    table.add_row("Pitch control", str(metrics.pitch_control))
    table.add_row("Phrase consistency", str(metrics.phrase_consistency))
    table.add_row("Style match", str(metrics.style_match))
    console.print(table)

    console.print(
        f"  {result.note_count} notes over {result.duration / 1000:.1f}s "
        f"({result.source} analysis)"
    )
    for title, items, color in (
        ("Feedback", result.feedback, "blue"),
        ("Strengths", result.strengths, "green"),
        ("Weaknesses", result.weaknesses, "yellow"),
        ("Suggestions", result.suggestions, "magenta"),
    ):
        console.print(f"\n[bold {color}]{title}:[/bold {color}]")
        for item in items:
            console.print(f"  - {item}")


def _show_notes_table(events):
    """Display note events in a table."""
    table = Table(title="Detected Notes")
    table.add_column("Note", style="cyan")
    table.add_column("Time (ms)", style="green")
    table.add_column("Frequency (Hz)", style="yellow")
    table.add_column("Cents", style="magenta")
    table.add_column("Confidence")

    for event in events:
        table.add_row(
            event.note,
            f"{event.timestamp:.0f}",
            f"{event.frequency:.1f}",
            f"{event.cents:+d}",
            f"{event.confidence:.2f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
