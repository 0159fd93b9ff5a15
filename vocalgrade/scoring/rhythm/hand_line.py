"""Hand-line rhythm: one-to-one alignment of taps to expected onsets.

Expected onsets and detected taps are aligned by dynamic programming:

- matches are unique and monotonic (they never cross in time)
- either side may be skipped for zero credit
- a match is allowed only if |dt| <= max_align_ms; credit falls off with
  a cosine from good_align_ms to max_align_ms
- on equal scores the preference is match > skip-event > skip-expected,
  so extra taps are absorbed before expected onsets are given up
"""

import math
from collections.abc import Sequence

import numpy as np

from vocalgrade.scoring.helpers import cosine_credit, mean
from vocalgrade.scoring.models import RhythmEval, RhythmEvent

_MATCH, _SKIP_EXPECTED, _SKIP_EVENT, _NONE = 0, 1, 2, -1


def alignment_credit(err_ms: float, max_align_ms: float, good_align_ms: float = 0.0) -> float:
    """Credit for a tap *err_ms* away from its onset; -inf when out of range."""
    if err_ms > max_align_ms:
        return -math.inf
    good = max(0.0, good_align_ms)
    # falloff width is floored at 1 ms
    zero = good + max(1.0, max_align_ms - good)
    return cosine_credit(err_ms, good, zero)


def align_onsets(
    expected: Sequence[float],
    events: Sequence[float],
    max_align_ms: float,
    good_align_ms: float = 0.0,
) -> list[int]:
    """Optimal monotonic matching of sorted *expected* to sorted *events*.

    Returns, for every expected onset, the index of its event or -1.
    """
    n, m = len(expected), len(events)
    score = np.full((n + 1, m + 1), -np.inf)
    parent = np.full((n + 1, m + 1), _NONE, dtype=np.int8)

    # Skipping leading onsets or events costs nothing
    score[:, 0] = 0.0
    score[0, :] = 0.0
    parent[1:, 0] = _SKIP_EXPECTED
    parent[0, 1:] = _SKIP_EVENT

    for i in range(1, n + 1):
        t_exp = expected[i - 1]
        for j in range(1, m + 1):
            err_ms = abs(events[j - 1] - t_exp) * 1000.0
            credit = alignment_credit(err_ms, max_align_ms, good_align_ms)

            best = score[i - 1, j - 1] + credit if credit > -math.inf else -math.inf
            act = _MATCH
            if score[i, j - 1] > best:
                best, act = score[i, j - 1], _SKIP_EVENT
            if score[i - 1, j] > best:
                best, act = score[i - 1, j], _SKIP_EXPECTED

            score[i, j] = best
            parent[i, j] = act

    match_idx = [-1] * n
    i, j = n, m
    while i > 0 or j > 0:
        act = parent[i, j]
        if act == _MATCH:
            match_idx[i - 1] = j - 1
            i -= 1
            j -= 1
        elif act == _SKIP_EXPECTED:
            i -= 1
        elif act == _SKIP_EVENT:
            j -= 1
        else:
            break
    return match_idx


def _nearest_matches(expected: Sequence[float], events: Sequence[float]) -> list[int]:
    """Nearest event per onset; one event may serve several onsets."""
    if not len(events):
        return [-1] * len(expected)
    ev = np.asarray(events, dtype=float)
    return [int(np.argmin(np.abs(ev - t))) for t in expected]


def eval_hand_line(
    onsets: Sequence[float] | None,
    events: Sequence[float],
    max_align_ms: float = 250.0,
    good_align_ms: float = 0.0,
    unique: bool = True,
) -> RhythmEval:
    """Score detected taps against an independent rhythm-line onset sequence.

    With ``unique=False`` each onset takes its nearest tap (the legacy
    matcher, no one-to-one guarantee).
    """
    if onsets is None or len(onsets) == 0:
        return RhythmEval(percent=0.0, hit_rate=0.0, mean_abs_ms=0.0, evaluated=False)

    expected = sorted(float(t) for t in onsets)
    taps = sorted(float(t) for t in events)

    if unique:
        match_idx = align_onsets(expected, taps, max_align_ms, good_align_ms)
    else:
        match_idx = _nearest_matches(expected, taps)

    rows: list[RhythmEvent] = []
    for k, t_exp in enumerate(expected):
        j = match_idx[k]
        tapped = taps[j] if j >= 0 else None
        err_ms = abs(tapped - t_exp) * 1000.0 if tapped is not None else None
        hit = err_ms is not None and err_ms <= max_align_ms
        credit = alignment_credit(err_ms, max_align_ms, good_align_ms) if hit else 0.0
        rows.append(RhythmEvent(
            idx=k,
            expected_sec=t_exp,
            tapped_sec=tapped,
            err_ms=err_ms,
            credit=credit,
            hit=hit,
        ))

    hit_errs = [r.err_ms for r in rows if r.hit]
    return RhythmEval(
        percent=mean([r.credit for r in rows]) * 100.0,
        hit_rate=len(hit_errs) / len(rows),
        mean_abs_ms=mean(hit_errs) if hit_errs else float(max_align_ms),
        evaluated=True,
        per_event=rows,
    )
