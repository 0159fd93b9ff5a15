"""Readable labels for durations, beat positions and intervals."""

from collections.abc import Callable

from vocalgrade.scoring.models import RhythmEvent, TempoContext

DurationLabeler = Callable[[float], str]
LineLabeler = Callable[[RhythmEvent], str | None]
IntervalLabeler = Callable[[int], str]

# (label, length in quarter notes)
NOTE_VALUES: list[tuple[str, float]] = [
    ("whole", 4.0),
    ("dotted half", 3.0),
    ("half", 2.0),
    ("dotted quarter", 1.5),
    ("triplet quarter", 2.0 / 3.0),
    ("quarter", 1.0),
    ("dotted eighth", 0.75),
    ("triplet eighth", 1.0 / 3.0),
    ("eighth", 0.5),
    ("dotted sixteenth", 0.375),
    ("triplet sixteenth", 1.0 / 6.0),
    ("sixteenth", 0.25),
    ("thirty-second", 0.125),
]

_SHORT_INTERVALS = ["P1", "m2", "M2", "m3", "M3", "P4", "TT", "P5", "m6", "M6", "m7", "M7", "P8"]
_LONG_INTERVALS = [
    "Perfect Unison", "Minor 2nd", "Major 2nd", "Minor 3rd", "Major 3rd", "Perfect 4th",
    "Tritone", "Perfect 5th", "Minor 6th", "Major 6th", "Minor 7th", "Major 7th",
    "Perfect Octave",
]

# Onsets within this fraction of a beat of the grid count as on the beat
ON_BEAT_TOLERANCE = 0.12


def short_interval_label(semitones: int) -> str:
    s = abs(int(semitones))
    return _SHORT_INTERVALS[s] if s <= 12 else str(s)


def interval_label(semitones: int) -> str:
    s = abs(int(semitones))
    return _LONG_INTERVALS[s] if s <= 12 else f"{s} semitones"


def seconds_label(sec: float) -> str:
    return f"{sec:.2f}s"


def note_value_label(sec: float, tempo: TempoContext) -> str:
    """Closest note value for a duration in seconds at *tempo*."""
    if sec <= 0 or tempo.bpm <= 0 or tempo.den <= 0:
        return seconds_label(sec)
    quarter_sec = tempo.quarter_sec
    label, _ = min(NOTE_VALUES, key=lambda v: abs(v[1] * quarter_sec - sec))
    return label


def duration_labeler(tempo: TempoContext | None) -> DurationLabeler:
    if tempo is None:
        return seconds_label
    return lambda sec: note_value_label(sec, tempo)


def beat_position_labeler(tempo: TempoContext | None) -> LineLabeler:
    """Label hand-line rows as on-beat or off-beat by their expected time."""
    if tempo is None or tempo.bpm <= 0:
        return lambda event: "event"

    def label(event: RhythmEvent) -> str | None:
        pos = event.expected_sec / tempo.beat_sec
        frac = pos - round(pos)
        return "on-beat" if abs(frac) <= ON_BEAT_TOLERANCE else "off-beat"

    return label
