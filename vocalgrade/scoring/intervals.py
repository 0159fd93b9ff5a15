"""Interval accuracy between adjacent notes."""

import math
from collections.abc import Sequence

import numpy as np

from vocalgrade.scoring.helpers import hz_to_midi, sample_arrays, voiced_mask
from vocalgrade.scoring.labels import short_interval_label
from vocalgrade.scoring.models import IntervalAttempt, IntervalClass, IntervalScore, Phrase, PitchSample

INTERVAL_OK_CENTS = 50.0
N_CLASSES = 13  # unison .. octave


def empty_classes() -> list[IntervalClass]:
    return [IntervalClass(semitones=s, label=short_interval_label(s)) for s in range(N_CLASSES)]


def median_midi_in_range(times: np.ndarray, midi: np.ndarray, t0: float, t1: float) -> float:
    """Upper median MIDI of the voiced frames in [t0, t1]; NaN when there are none."""
    vals = midi[(times >= t0) & (times <= t1)]
    vals = np.sort(vals[np.isfinite(vals)])
    if not len(vals):
        return math.nan
    return float(vals[len(vals) // 2])


def compute_interval_score(
    phrase: Phrase,
    samples: Sequence[PitchSample],
    confidence_min: float = 0.0,
) -> IntervalScore:
    """Compare sung intervals to expected ones for each adjacent note pair."""
    classes = empty_classes()
    if len(phrase.notes) < 2:
        return IntervalScore(total=0, correct=0, correct_ratio=1.0, classes=classes)

    times, hz, conf = sample_arrays(samples)
    voiced = voiced_mask(hz, conf, confidence_min)
    midi = np.full(len(times), np.nan)
    if voiced.any():
        midi[voiced] = hz_to_midi(hz[voiced])

    medians = [median_midi_in_range(times, midi, n.start_sec, n.end_sec) for n in phrase.notes]

    attempts: list[IntervalAttempt] = []
    for i in range(1, len(phrase.notes)):
        if not (math.isfinite(medians[i - 1]) and math.isfinite(medians[i])):
            continue
        expected = phrase.notes[i].midi - phrase.notes[i - 1].midi
        sung = medians[i] - medians[i - 1]
        err_cents = 100.0 * (sung - expected)
        attempt = IntervalAttempt(
            idx=i,
            expected_semitones=expected,
            sung_semitones=sung,
            error_cents=err_cents,
            correct=abs(err_cents) <= INTERVAL_OK_CENTS,
        )
        attempts.append(attempt)

        cell = classes[attempt.semitone_class]
        cell.attempts += 1
        cell.correct += int(attempt.correct)

    for cell in classes:
        cell.percent = 100.0 * cell.correct / cell.attempts if cell.attempts else 0.0

    total = len(attempts)
    correct = sum(1 for a in attempts if a.correct)
    return IntervalScore(
        total=total,
        correct=correct,
        correct_ratio=correct / total if total else 1.0,
        classes=classes,
        attempts=attempts,
    )
