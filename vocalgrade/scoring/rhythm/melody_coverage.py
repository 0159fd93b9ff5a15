"""Melody rhythm: voiced-frame coverage inside each note window.

A coverage-only signal: any voicing that shows up promptly inside a note
counts, whatever its pitch.
"""

import logging
from collections.abc import Sequence

import numpy as np

from vocalgrade.scoring.helpers import clamp01, mean, sample_arrays, voiced_mask
from vocalgrade.scoring.models import Note, PerNoteRhythm, PitchSample, RhythmEval

logger = logging.getLogger(__name__)

# Longest stretch a single voiced frame can account for
MAX_HOLD_SEC = 0.100


def voiced_seconds(times: np.ndarray, voiced: np.ndarray, t0: float, t1: float) -> float:
    """Voiced time inside [t0, t1].

    Each voiced frame in the window holds until the next frame of the track
    (at most MAX_HOLD_SEC) and is clipped to the window end. Holds never
    overlap, so inserting a voiced frame can only add time.
    """
    nxt = np.append(times[1:], np.inf)
    sel = voiced & (times >= t0) & (times <= t1)
    starts = times[sel]
    ends = np.minimum(np.minimum(nxt[sel], starts + MAX_HOLD_SEC), t1)
    return float(np.sum(np.maximum(0.0, ends - starts)))


def eval_melody_coverage(
    notes: Sequence[Note],
    samples: Sequence[PitchSample],
    confidence_min: float = 0.0,
    onset_grace_ms: float = 120.0,
    max_align_ms: float = 250.0,
    onsets: Sequence[float] | None = None,
) -> RhythmEval:
    """Evaluate melody coverage.

    *onsets*, when given with one entry per note, replaces each note's start
    as the notated onset that onset errors are measured from.
    """
    if not notes:
        return RhythmEval(percent=0.0, hit_rate=0.0, mean_abs_ms=0.0, evaluated=False)

    if onsets is not None and len(onsets) != len(notes):
        logger.debug(f"Ignoring {len(onsets)} melody onsets for {len(notes)} notes")
        onsets = None

    times, hz, conf = sample_arrays(samples)
    voiced = voiced_mask(hz, conf, confidence_min)
    grace_sec = max(0.0, onset_grace_ms / 1000.0)

    per_note: list[PerNoteRhythm] = []
    total_eval = total_voiced = 0.0
    abs_err_ms: list[float] = []

    for i, note in enumerate(notes):
        t0 = note.start_sec + grace_sec
        t1 = note.end_sec
        eval_dur = max(0.0, t1 - t0)
        if eval_dur <= 0:
            per_note.append(PerNoteRhythm(
                idx=i, note_dur_sec=note.dur_sec, evaluated_dur_sec=0.0, voiced_sec=0.0, coverage=0.0, onset_err_ms=None,
            ))
            continue

        in_win = (times >= t0) & (times <= t1)
        voiced_times = times[in_win & voiced]
        voiced_sec = min(eval_dur, voiced_seconds(times, voiced, t0, t1))

        onset_err = None
        if len(voiced_times):
            notated = onsets[i] if onsets is not None else note.start_sec
            onset_err = (float(voiced_times[0]) - notated) * 1000.0
            abs_err_ms.append(abs(onset_err))

        per_note.append(PerNoteRhythm(
            idx=i,
            note_dur_sec=note.dur_sec,
            evaluated_dur_sec=eval_dur,
            voiced_sec=voiced_sec,
            coverage=clamp01(voiced_sec / eval_dur),
            onset_err_ms=onset_err,
        ))
        total_eval += eval_dur
        total_voiced += voiced_sec

    hits = sum(1 for r in per_note if r.hit)
    coverage = total_voiced / total_eval if total_eval > 0 else 0.0

    return RhythmEval(
        percent=clamp01(coverage) * 100.0,
        hit_rate=hits / len(notes),
        mean_abs_ms=mean(abs_err_ms) if abs_err_ms else float(max_align_ms),
        evaluated=True,
        per_note=per_note,
    )

