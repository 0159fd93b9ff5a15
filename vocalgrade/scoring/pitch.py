"""Per-note pitch credit integration.

Every frame inside a note's evaluation window counts: voiced frames earn a
cosine credit from their cents error, unvoiced frames earn nothing, so
silence inside a note lowers the score.
"""

import logging
from collections.abc import Sequence

import numpy as np

from vocalgrade.config import ScoringOptions
from vocalgrade.scoring.helpers import (
    NO_DATA_CENTS,
    clamp01,
    cosine_credit,
    estimate_avg_dt,
    hz_to_midi,
    sample_arrays,
    trimmed_mean,
    voiced_mask,
)
from vocalgrade.scoring.models import PerNotePitch, Phrase, PitchSample, PitchScore

logger = logging.getLogger(__name__)

TAIL_GRACE_SEC = 0.080  # ignore release wobble at the end of each note
ZERO_CREDIT_CENTS = 240.0
MAE_UPPER_TRIM = 0.25

# Landing: holding the target steadily earns a floor on the note ratio
LANDING_CREDIT_MIN = 0.85
LANDING_MIN_SEC = 0.300
LANDING_BONUS = 0.85


def shape_ratio(raw: float) -> float:
    """Concave shaping that rewards partial coverage super-linearly."""
    r = clamp01(raw)
    return 1.0 - (1.0 - r) ** 2


def longest_run(flags: np.ndarray) -> int:
    """Length of the longest run of True values."""
    best = run = 0
    for flag in flags:
        run = run + 1 if flag else 0
        best = max(best, run)
    return best


def compute_pitch_score(
    phrase: Phrase,
    samples: Sequence[PitchSample],
    options: ScoringOptions | None = None,
) -> PitchScore:
    """Score pitch accuracy of a take against *phrase*."""
    options = options or ScoringOptions()
    times, hz, conf = sample_arrays(samples)
    voiced = voiced_mask(hz, conf, options.confidence_min)
    dt = estimate_avg_dt(times)

    midi = np.full(len(times), np.nan)
    if voiced.any():
        midi[voiced] = hz_to_midi(hz[voiced])

    per_note: list[PerNotePitch] = []
    all_cents: list[float] = []
    sum_good = sum_weighted = sum_eval = 0.0

    for i, note in enumerate(phrase.notes):
        start = note.start_sec + options.onset_grace_sec
        end = note.end_sec - TAIL_GRACE_SEC
        eval_dur = end - start

        if eval_dur <= 0:
            per_note.append(PerNotePitch(
                idx=i, midi=note.midi, time_on_pitch_sec=0.0, evaluated_dur_sec=0.0,
                ratio=0.0, raw_ratio=0.0, cents_mae=NO_DATA_CENTS,
            ))
            continue

        in_win = (times >= start) & (times <= end)
        win_voiced = voiced[in_win]
        win_cents = np.abs(100.0 * (midi[in_win] - note.midi))

        credits = np.zeros(int(in_win.sum()))
        for k in np.flatnonzero(win_voiced):
            credits[k] = cosine_credit(float(win_cents[k]), options.cents_ok, ZERO_CREDIT_CENTS)

        good_sec = float(credits.sum()) * dt
        raw_ratio = min(1.0, good_sec / eval_dur)

        streak_sec = longest_run(credits >= LANDING_CREDIT_MIN) * dt
        bonus = LANDING_BONUS if streak_sec >= LANDING_MIN_SEC else 0.0
        ratio = max(shape_ratio(raw_ratio), bonus)

        voiced_cents = win_cents[win_voiced].tolist()
        mae = trimmed_mean(voiced_cents, MAE_UPPER_TRIM) if voiced_cents else NO_DATA_CENTS
        all_cents.extend(voiced_cents)

        per_note.append(PerNotePitch(
            idx=i,
            midi=note.midi,
            time_on_pitch_sec=good_sec,
            evaluated_dur_sec=eval_dur,
            ratio=ratio,
            raw_ratio=raw_ratio,
            cents_mae=mae,
            landing_streak_sec=streak_sec,
        ))
        sum_good += good_sec
        sum_weighted += ratio * eval_dur
        sum_eval += eval_dur

    if sum_eval <= 0:
        logger.debug(f"No evaluable pitch windows in {len(phrase.notes)} notes")

    percent = round(100.0 * sum_weighted / sum_eval, 1) if sum_eval > 0 else 0.0
    time_on_pitch = clamp01(sum_good / sum_eval) if sum_eval > 0 else 0.0
    cents_mae = trimmed_mean(all_cents, MAE_UPPER_TRIM) if all_cents else NO_DATA_CENTS

    return PitchScore(
        percent=max(0.0, min(100.0, percent)),
        time_on_pitch_ratio=time_on_pitch,
        cents_mae=cents_mae,
        per_note=per_note,
    )
