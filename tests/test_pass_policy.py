"""Tests for the pass/fail gate."""

from vocalgrade.scoring.aggregate import aggregate_for_submission
from vocalgrade.scoring.pass_policy import DEFAULT_PASS_POLICY, PassPolicy, compute_pass


def test_on_pitch_take_passes_despite_rhythm(make_take):
    take = make_take(pitch=85.0, melody=20.0)
    result = compute_pass(take)
    assert result.passed
    assert result.reasons == []


def test_failing_take_lists_reasons(make_take):
    take = make_take(pitch=30.0, melody=20.0)
    take.pitch.cents_mae = 95.0
    result = compute_pass(take)

    assert not result.passed
    assert result.reasons == [
        "final 25.0% < 60%",
        "pitch 30.0% < 65%",
        "time-on-pitch 30% < 55%",
        "MAE 95¢ > 60¢",
    ]


def test_two_guards_are_enough(make_take):
    # Only pitch-based guards hold: MAE and time on pitch
    take = make_take(pitch=60.0, melody=10.0)
    result = compute_pass(take)
    assert result.passed


def test_missing_score():
    result = compute_pass(None)
    assert not result.passed
    assert result.reasons == ["no score"]


def test_custom_policy(make_take):
    take = make_take(pitch=85.0, melody=85.0)
    strict = PassPolicy(min_final_pct=95, min_pitch_pct=95, min_time_on_pitch_ratio=0.95, max_cents_mae=5)
    assert compute_pass(take, DEFAULT_PASS_POLICY).passed
    assert not compute_pass(take, strict).passed


def test_works_on_aggregate(make_take):
    agg = aggregate_for_submission([make_take(pitch=90.0, melody=90.0), make_take(pitch=80.0, melody=85.0)])
    assert compute_pass(agg).passed
