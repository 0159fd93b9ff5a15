"""Convert a submission aggregate into storage rows."""

from vocalgrade.api.schemas import (
    IntervalClassRow,
    IntervalLabelRow,
    LessonResultRow,
    LifetimeCountsRow,
    MelodyDurationRow,
    PitchNoteRow,
    RhythmLineRow,
    SubmissionPayload,
)
from vocalgrade.scoring.models import SubmissionAggregate


def build_submission_payload(
    aggregate: SubmissionAggregate,
    lesson_slug: str,
    session_id: str | None = None,
    take_index: int = 0,
) -> SubmissionPayload:
    """Build the result row and its child rows; empty interval buckets are not stored."""
    pitch = aggregate.pitch
    rhythm = aggregate.rhythm
    intervals = aggregate.intervals

    return SubmissionPayload(
        result=LessonResultRow(
            lesson_slug=lesson_slug,
            session_id=session_id,
            take_index=take_index,
            takes=aggregate.takes,
            final_percent=aggregate.final.percent,
            final_letter=aggregate.final.letter,
            pitch_percent=pitch.percent,
            pitch_time_on_ratio=pitch.time_on_pitch_ratio,
            pitch_cents_mae=pitch.cents_mae,
            rhythm_melody_percent=rhythm.melody_percent,
            rhythm_melody_hit_rate=rhythm.melody_hit_rate,
            rhythm_melody_mean_abs_ms=rhythm.melody_mean_abs_ms,
            rhythm_line_evaluated=rhythm.line_evaluated,
            rhythm_line_percent=rhythm.line_percent,
            rhythm_line_hit_rate=rhythm.line_hit_rate,
            rhythm_line_mean_abs_ms=rhythm.line_mean_abs_ms,
            rhythm_combined_percent=rhythm.combined_percent,
            intervals_total=intervals.total,
            intervals_correct=intervals.correct,
            intervals_correct_ratio=intervals.correct_ratio,
        ),
        pitch_notes=[
            PitchNoteRow(midi=r.midi, n=r.n, ratio=r.ratio, cents_mae=r.cents_mae)
            for r in pitch.per_midi
        ],
        melody_per_duration=[
            MelodyDurationRow(
                duration_label=r.label,
                attempts=r.attempts,
                hits=r.hits,
                hit_rate=r.hit_rate,
                mean_coverage=r.mean_coverage,
            )
            for r in aggregate.duration_rollup
        ],
        rhythm_per_event=[
            RhythmLineRow(value=r.label, n=r.attempts, hits=r.hits, hit_rate=r.hit_rate, credit=r.mean_credit)
            for r in aggregate.line_rollup
        ],
        interval_classes=[
            IntervalClassRow(
                semitones=c.semitones,
                label=c.label,
                attempts=c.attempts,
                correct=c.correct,
                percent=c.percent,
            )
            for c in intervals.classes
            if c.attempts > 0
        ],
        interval_labels=[
            IntervalLabelRow(
                label=r.label,
                semitones=r.semitones,
                attempts=r.attempts,
                correct=r.correct,
                percent=r.percent,
            )
            for r in aggregate.interval_rollup
        ],
        counts=LifetimeCountsRow(
            note_attempts=aggregate.counts.note_attempts,
            note_hits=aggregate.counts.note_hits,
            event_attempts=aggregate.counts.event_attempts,
            event_hits=aggregate.counts.event_hits,
            interval_attempts=aggregate.counts.interval_attempts,
            interval_correct=aggregate.counts.interval_correct,
        ),
    )
