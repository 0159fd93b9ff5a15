"""Shared test fixtures for take scoring tests."""

import numpy as np
import pytest

from vocalgrade.config import ScoringOptions
from vocalgrade.scoring.grade import letter_from_percent
from vocalgrade.scoring.helpers import midi_to_hz
from vocalgrade.scoring.intervals import empty_classes
from vocalgrade.scoring.models import (
    FinalScore,
    IntervalScore,
    Note,
    PerNotePitch,
    PerNoteRhythm,
    Phrase,
    PitchSample,
    PitchScore,
    RhythmEvent,
    RhythmScore,
    TakeScore,
    TempoContext,
)


def generate_pitch_track(
    notes: list[Note],
    rate: float = 50.0,
    duration_seconds: float | None = None,
    cents_offset: float = 0.0,
    start_sec: float = 0.0,
) -> list[PitchSample]:
    """Generate a detector track singing *notes* at a fixed frame rate.

    Frames outside every note are unvoiced. *cents_offset* detunes the
    whole track.
    """
    end = duration_seconds if duration_seconds is not None else max((n.end_sec for n in notes), default=0.0)
    n_frames = int(round((end - start_sec) * rate))
    samples = []
    for k in range(n_frames):
        t = start_sec + k / rate
        hz = None
        for note in notes:
            if note.start_sec <= t < note.end_sec:
                hz = float(midi_to_hz(note.midi + cents_offset / 100.0))
                break
        samples.append(PitchSample(time_sec=t, hz=hz))
    return samples


def constant_track(hz: float | None, n: int = 50, rate: float = 50.0) -> list[PitchSample]:
    return [PitchSample(time_sec=i / rate, hz=hz) for i in range(n)]


@pytest.fixture
def pitch_track():
    """Factory for synthetic pitch tracks."""
    return generate_pitch_track


@pytest.fixture
def steady_track():
    """Factory for a constant-frequency track."""
    return constant_track


@pytest.fixture
def middle_c():
    """One-second middle C."""
    return Phrase(notes=[Note(start_sec=0.0, dur_sec=1.0, midi=60)])


@pytest.fixture
def scale_phrase():
    """C major scale up a fifth, half a second per note."""
    midis = [60, 62, 64, 65, 67]
    return Phrase(notes=[Note(start_sec=0.5 * i, dur_sec=0.5, midi=m) for i, m in enumerate(midis)])


@pytest.fixture
def leap_phrase():
    """Octave leap then a fourth down."""
    return Phrase(notes=[
        Note(start_sec=0.0, dur_sec=0.6, midi=60),
        Note(start_sec=0.6, dur_sec=0.6, midi=72),
        Note(start_sec=1.2, dur_sec=0.6, midi=67),
    ])


def build_take(
    pitch: float = 80.0,
    melody: float = 80.0,
    line: float | None = None,
    pitch_rows: list[PerNotePitch] | None = None,
    melody_rows: list[PerNoteRhythm] | None = None,
    line_rows: list[RhythmEvent] | None = None,
    intervals: IntervalScore | None = None,
    tempo: TempoContext | None = None,
    options: ScoringOptions | None = None,
) -> TakeScore:
    """Hand-built take with fixed track percents."""
    parts = [pitch, melody] + ([line] if line is not None else [])
    final = sum(parts) / len(parts)
    return TakeScore(
        pitch=PitchScore(
            percent=pitch,
            time_on_pitch_ratio=pitch / 100.0,
            cents_mae=20.0,
            per_note=pitch_rows or [],
        ),
        rhythm=RhythmScore(
            melody_percent=melody,
            melody_hit_rate=1.0,
            melody_mean_abs_ms=30.0,
            line_evaluated=line is not None,
            line_percent=line or 0.0,
            line_hit_rate=1.0 if line is not None else 0.0,
            line_mean_abs_ms=40.0 if line is not None else 0.0,
            combined_percent=(melody + line) / 2 if line is not None else melody,
            per_note_melody=melody_rows or [],
            line_per_event=line_rows or [],
        ),
        intervals=intervals or IntervalScore(total=0, correct=0, correct_ratio=1.0, classes=empty_classes()),
        final=FinalScore(percent=final, letter=letter_from_percent(final)),
        options=options or ScoringOptions(),
        tempo=tempo,
    )


@pytest.fixture
def make_take():
    """Factory for hand-built takes."""
    return build_take


@pytest.fixture
def tempo_120():
    return TempoContext(bpm=120)


@pytest.fixture
def beat_onsets():
    """Quarter notes at 120 BPM for two bars."""
    return list(np.arange(8) * 0.5)
