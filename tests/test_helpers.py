"""Tests for shared statistics and pitch-math helpers."""

import math

import numpy as np
import pytest

from vocalgrade.scoring.helpers import (
    DEFAULT_DT,
    clamp01,
    cosine_credit,
    estimate_avg_dt,
    filter_voiced,
    hz_to_midi,
    mean,
    midi_to_hz,
    sample_arrays,
    trimmed_mean,
    voiced_mask,
)
from vocalgrade.scoring.models import PitchSample


def test_estimate_avg_dt_uniform():
    times = [i / 100 for i in range(11)]
    assert estimate_avg_dt(times) == pytest.approx(0.01)


@pytest.mark.parametrize("times", [[], [0.3], [1.0, 1.0]])
def test_estimate_avg_dt_fallback(times):
    assert estimate_avg_dt(times) == DEFAULT_DT


def test_mean_of_empty_is_zero():
    assert mean([]) == 0.0
    assert mean([1.0, 2.0, 6.0]) == pytest.approx(3.0)


def test_trimmed_mean_drops_largest_quarter():
    # 100 is the top quarter of four values
    assert trimmed_mean([1.0, 2.0, 3.0, 100.0]) == pytest.approx(2.0)


def test_trimmed_mean_keeps_one_value():
    assert trimmed_mean([7.0], upper_trim=0.9) == pytest.approx(7.0)
    assert trimmed_mean([]) == 0.0


def test_cosine_credit_shape():
    assert cosine_credit(10, 50, 240) == 1.0
    assert cosine_credit(50, 50, 240) == 1.0
    assert cosine_credit(240, 50, 240) == 0.0
    assert cosine_credit(145, 50, 240) == pytest.approx(0.5)
    xs = np.linspace(50, 240, 20)
    credits = [cosine_credit(x, 50, 240) for x in xs]
    assert all(a >= b for a, b in zip(credits, credits[1:]))


def test_clamp01():
    assert clamp01(-0.2) == 0.0
    assert clamp01(1.7) == 1.0
    assert clamp01(0.4) == 0.4


def test_sample_arrays_sorts_and_zeroes_unvoiced():
    samples = [
        PitchSample(0.2, 220.0),
        PitchSample(0.0, None),
        PitchSample(0.1, math.nan),
    ]
    times, hz, _ = sample_arrays(samples)
    assert times.tolist() == [0.0, 0.1, 0.2]
    assert hz.tolist() == [0.0, 0.0, 220.0]


def test_voiced_mask_confidence_gate():
    hz = np.array([220.0, 220.0, 0.0, -1.0])
    conf = np.array([0.9, 0.2, 0.9, 0.9])
    assert voiced_mask(hz, conf).tolist() == [True, True, False, False]
    assert voiced_mask(hz, conf, 0.5).tolist() == [True, False, False, False]


def test_filter_voiced():
    samples = [PitchSample(0.0, 220.0, 0.9), PitchSample(0.1, None), PitchSample(0.2, 220.0, 0.1)]
    assert len(filter_voiced(samples)) == 2
    assert len(filter_voiced(samples, 0.5)) == 1


def test_midi_conversions():
    assert hz_to_midi(440.0) == pytest.approx(69.0)
    assert midi_to_hz(60) == pytest.approx(261.6256, abs=1e-3)
