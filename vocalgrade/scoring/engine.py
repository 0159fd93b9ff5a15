"""Take scoring orchestrator - combines pitch, rhythm and interval scorers."""

import logging
from collections.abc import Sequence

from vocalgrade.config import ScoringOptions, settings
from vocalgrade.scoring.grade import letter_from_percent
from vocalgrade.scoring.helpers import clamp
from vocalgrade.scoring.intervals import compute_interval_score
from vocalgrade.scoring.models import FinalScore, Phrase, PitchSample, TakeScore, TempoContext
from vocalgrade.scoring.pitch import compute_pitch_score
from vocalgrade.scoring.rhythm import compute_rhythm_score

logger = logging.getLogger(__name__)


class TakeScorer:
    """Scores takes with one validated set of options."""

    def __init__(self, options: ScoringOptions | None = None):
        self.options = options or settings.scoring_options()

    def score(
        self,
        phrase: Phrase,
        tempo: TempoContext | None,
        samples: Sequence[PitchSample],
        gesture_events: Sequence[float],
        melody_onsets: Sequence[float] | None = None,
        rhythm_line_onsets: Sequence[float] | None = None,
    ) -> TakeScore:
        """Score one take.

        The displayed final is the plain mean of the pitch, melody and (when
        evaluated) rhythm-line percents. It always includes every evaluated
        track; use ``finalize_visible`` for the visibility-aware variant.
        """
        opts = self.options
        logger.debug(f"Scoring {len(phrase.notes)} notes, {len(samples)} samples, "
                     f"{len(gesture_events)} gesture events")

        pitch = compute_pitch_score(phrase, samples, opts)
        rhythm = compute_rhythm_score(
            phrase,
            samples,
            gesture_events,
            melody_onsets=melody_onsets,
            rhythm_line_onsets=rhythm_line_onsets,
            options=opts,
        )
        intervals = compute_interval_score(phrase, samples, opts.confidence_min)

        parts = [pitch.percent, rhythm.melody_percent]
        if rhythm.line_evaluated:
            parts.append(rhythm.line_percent)
        final_pct = clamp(sum(parts) / len(parts), 0.0, 100.0)

        logger.info(f"Scored take: final={final_pct:.1f} pitch={pitch.percent:.1f} "
                    f"melody={rhythm.melody_percent:.1f} "
                    f"line={rhythm.line_percent:.1f} (evaluated={rhythm.line_evaluated}) "
                    f"intervals={intervals.correct}/{intervals.total}")

        return TakeScore(
            pitch=pitch,
            rhythm=rhythm,
            intervals=intervals,
            final=FinalScore(percent=final_pct, letter=letter_from_percent(final_pct)),
            options=opts,
            tempo=tempo,
        )


def compute_take_score(
    phrase: Phrase,
    tempo: TempoContext | None,
    samples: Sequence[PitchSample],
    gesture_events: Sequence[float],
    melody_onsets: Sequence[float] | None = None,
    rhythm_line_onsets: Sequence[float] | None = None,
    options: ScoringOptions | None = None,
) -> TakeScore:
    """Score one take (see ``TakeScorer.score``)."""
    return TakeScorer(options).score(
        phrase, tempo, samples, gesture_events, melody_onsets, rhythm_line_onsets,
    )
