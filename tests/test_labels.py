"""Tests for duration, beat and interval labels."""

import pytest

from vocalgrade.scoring.labels import (
    beat_position_labeler,
    duration_labeler,
    interval_label,
    note_value_label,
    short_interval_label,
)
from vocalgrade.scoring.models import RhythmEvent, TempoContext


@pytest.mark.parametrize("sec,label", [
    (2.0, "whole"),
    (1.0, "half"),
    (0.75, "dotted quarter"),
    (0.5, "quarter"),
    (0.25, "eighth"),
    (0.125, "sixteenth"),
    (0.33, "triplet quarter"),
    (0.48, "quarter"),
])
def test_note_values_at_120(sec, label, tempo_120):
    assert note_value_label(sec, tempo_120) == label


def test_denominator_scales_the_beat_not_the_note_values():
    # In x/8 time the beat is an eighth
    tempo = TempoContext(bpm=120, den=8)
    assert tempo.beat_sec == pytest.approx(0.25)
    assert note_value_label(0.5, tempo) == "quarter"
    assert beat_position_labeler(tempo)(
        RhythmEvent(idx=0, expected_sec=0.25, tapped_sec=None, err_ms=None, credit=0.0, hit=False)
    ) == "on-beat"


def test_duration_labeler_without_tempo():
    label = duration_labeler(None)
    assert label(0.3) == "0.30s"
    assert duration_labeler(TempoContext(bpm=60))(1.0) == "quarter"


def test_beat_position_labeler(tempo_120):
    label = beat_position_labeler(tempo_120)

    def event(t):
        return RhythmEvent(idx=0, expected_sec=t, tapped_sec=None, err_ms=None, credit=0.0, hit=False)

    assert label(event(1.0)) == "on-beat"
    assert label(event(1.03)) == "on-beat"
    assert label(event(1.25)) == "off-beat"
    assert beat_position_labeler(None)(event(1.25)) == "event"


def test_interval_names():
    assert short_interval_label(0) == "P1"
    assert short_interval_label(-7) == "P5"
    assert short_interval_label(12) == "P8"
    assert interval_label(6) == "Tritone"
    assert interval_label(12) == "Perfect Octave"
    assert interval_label(14) == "14 semitones"
