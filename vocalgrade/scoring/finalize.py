"""Visibility-aware final score (harmonic mean of the shown tracks)."""

import math

from vocalgrade.scoring.grade import letter_from_percent
from vocalgrade.scoring.helpers import clamp
from vocalgrade.scoring.models import FinalScore, TakeScore, Visibility

SNAP_FLOOR = 98.0


def finalize_score_n(*percents: float) -> float:
    """Harmonic mean of the positive components.

    Non-positive and NaN components are ignored. When every remaining
    component is at least 98 the result snaps to 100.
    """
    parts = [float(p) for p in percents if p is not None and not math.isnan(p) and p > 0]
    if not parts:
        return 0.0
    if all(p >= SNAP_FLOOR for p in parts):
        return 100.0
    hm = len(parts) / sum(1.0 / p for p in parts)
    return clamp(hm, 0.0, 100.0)


def finalize_visible(take: TakeScore, visibility: Visibility | None = None) -> FinalScore:
    """Final score over only the tracks the learner can see."""
    visibility = visibility or Visibility()
    parts = [take.pitch.percent]
    if visibility.show_melody_rhythm:
        parts.append(take.rhythm.melody_percent)
    if visibility.show_rhythm_line and take.rhythm.line_evaluated:
        parts.append(take.rhythm.line_percent)
    percent = finalize_score_n(*parts)
    return FinalScore(percent=percent, letter=letter_from_percent(percent))
