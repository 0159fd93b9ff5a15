"""Rhythm scorers - each algorithm in its own module."""

from collections.abc import Sequence

from vocalgrade.config import ScoringOptions
from vocalgrade.scoring.models import Phrase, PitchSample, RhythmScore
from vocalgrade.scoring.rhythm.hand_line import align_onsets, eval_hand_line
from vocalgrade.scoring.rhythm.melody_coverage import eval_melody_coverage

__all__ = [
    "align_onsets",
    "compute_rhythm_score",
    "eval_hand_line",
    "eval_melody_coverage",
]


def compute_rhythm_score(
    phrase: Phrase,
    samples: Sequence[PitchSample],
    gesture_events: Sequence[float],
    melody_onsets: Sequence[float] | None = None,
    rhythm_line_onsets: Sequence[float] | None = None,
    options: ScoringOptions | None = None,
) -> RhythmScore:
    """Run melody coverage and the hand-line alignment for one take."""
    options = options or ScoringOptions()

    mel = eval_melody_coverage(
        phrase.notes,
        samples,
        confidence_min=options.confidence_min,
        onset_grace_ms=options.onset_grace_ms,
        max_align_ms=options.max_align_ms,
        onsets=melody_onsets,
    )
    line = eval_hand_line(
        rhythm_line_onsets,
        gesture_events,
        max_align_ms=options.max_align_ms,
        good_align_ms=options.good_align_ms,
    )

    tracks = [t for t in (mel, line) if t.evaluated]
    combined = sum(t.percent for t in tracks) / len(tracks) if tracks else 0.0

    return RhythmScore(
        melody_percent=mel.percent,
        melody_hit_rate=mel.hit_rate,
        melody_mean_abs_ms=mel.mean_abs_ms,
        line_evaluated=line.evaluated,
        line_percent=line.percent,
        line_hit_rate=line.hit_rate,
        line_mean_abs_ms=line.mean_abs_ms,
        combined_percent=combined,
        per_note_melody=mel.per_note,
        line_per_event=line.per_event,
    )
