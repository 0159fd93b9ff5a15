"""Tests for scoring options and settings."""

import pytest
from pydantic import ValidationError

from vocalgrade.config import ScoringOptions, Settings


def test_defaults():
    opts = ScoringOptions()
    assert opts.confidence_min == 0.0
    assert opts.cents_ok == 50.0
    assert opts.onset_grace_ms == 120.0
    assert opts.max_align_ms == 250.0
    assert opts.good_align_ms == 120.0
    assert opts.onset_grace_sec == pytest.approx(0.12)


@pytest.mark.parametrize("field,value", [
    ("confidence_min", 1.5),
    ("cents_ok", 0),
    ("cents_ok", 300),
    ("onset_grace_ms", -1),
    ("max_align_ms", 0),
    ("good_align_ms", -5),
])
def test_invalid_options_raise(field, value):
    with pytest.raises(ValidationError):
        ScoringOptions(**{field: value})


def test_unknown_option_rejected():
    with pytest.raises(ValidationError):
        ScoringOptions(cents_okay=40)


def test_options_are_frozen():
    opts = ScoringOptions()
    with pytest.raises(ValidationError):
        opts.cents_ok = 10


def test_env_override(monkeypatch):
    monkeypatch.setenv("VOCALGRADE_CENTS_OK", "35")
    monkeypatch.setenv("VOCALGRADE_MAX_ALIGN_MS", "180")
    opts = Settings().scoring_options()
    assert opts.cents_ok == 35.0
    assert opts.max_align_ms == 180.0
    assert opts.onset_grace_ms == 120.0


def test_invalid_env_fails_at_construction(monkeypatch):
    monkeypatch.setenv("VOCALGRADE_CONFIDENCE_MIN", "2")
    with pytest.raises(ValidationError):
        Settings().scoring_options()
