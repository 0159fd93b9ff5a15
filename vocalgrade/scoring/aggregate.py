"""Cross-take rollup into one submission aggregate.

A pure reduction over finished takes: it runs once all takes of a session
exist and never mutates them. Rounding policy: percents to 2 decimals,
ratios to 5 decimals.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from vocalgrade.scoring.finalize import finalize_visible
from vocalgrade.scoring.grade import letter_from_percent
from vocalgrade.scoring.helpers import clamp01, mean, round2, round5
from vocalgrade.scoring.intervals import empty_classes
from vocalgrade.scoring.labels import (
    DurationLabeler,
    IntervalLabeler,
    LineLabeler,
    beat_position_labeler,
    duration_labeler,
    interval_label,
)
from vocalgrade.scoring.models import (
    AggregatedRows,
    AggregatePitch,
    AggregateRhythm,
    DurationRollupRow,
    FinalScore,
    IntervalRollupRow,
    IntervalScore,
    LifetimeCounts,
    LineRollupRow,
    PerNoteRows,
    PitchMidiRow,
    RollupSource,
    SubmissionAggregate,
    TakeScore,
    Visibility,
)

logger = logging.getLogger(__name__)


@dataclass
class _Tally:
    attempts: int = 0
    hits: int = 0
    total: float = 0.0  # sum of coverage or credit


@dataclass
class _RunningMean:
    n: int = 0
    ratio: float = 0.0
    mae: float = 0.0

    def add(self, ratio: float, mae: float) -> None:
        self.n += 1
        self.ratio += (ratio - self.ratio) / self.n
        self.mae += (mae - self.mae) / self.n


# ---------------------------------------------------------------------------
# Rollups
# ---------------------------------------------------------------------------

def rollup_durations(
    sources: Sequence[RollupSource],
    labeler: DurationLabeler | None = None,
) -> list[DurationRollupRow]:
    """Group melody rows by note-duration label.

    Per-note rows are labelled from the notated note length, so notes
    shorter than the onset grace keep their own label. Already aggregated
    rows merge in by label.
    """
    tallies: dict[str, _Tally] = {}
    for src in sources:
        if isinstance(src, AggregatedRows):
            for row in src.rows:
                t = tallies.setdefault(row.label, _Tally())
                t.attempts += row.attempts
                t.hits += row.hits
                t.total += row.mean_coverage * row.attempts
        elif isinstance(src, PerNoteRows):
            label_of = labeler or duration_labeler(src.tempo)
            for r in src.rows:
                t = tallies.setdefault(label_of(r.note_dur_sec), _Tally())
                t.attempts += 1
                t.hits += int(r.hit)
                t.total += r.coverage
        else:
            raise TypeError(f"Unknown rollup source: {type(src).__name__}")

    return [
        DurationRollupRow(
            label=label,
            attempts=t.attempts,
            hits=t.hits,
            hit_rate=round5(t.hits / t.attempts),
            mean_coverage=round5(t.total / t.attempts),
        )
        for label, t in tallies.items()
        if t.attempts > 0
    ]


def rollup_line_events(
    takes: Sequence[TakeScore],
    labeler: LineLabeler | None = None,
) -> list[LineRollupRow]:
    """Group hand-line rows by beat label; rows labelled None are left out."""
    tallies: dict[str, _Tally] = {}
    for take in takes:
        if not take.rhythm.line_evaluated:
            continue
        label_of = labeler or beat_position_labeler(take.tempo)
        for event in take.rhythm.line_per_event:
            label = label_of(event)
            if label is None:
                continue
            t = tallies.setdefault(label, _Tally())
            t.attempts += 1
            t.hits += int(event.hit)
            t.total += event.credit

    return [
        LineRollupRow(
            label=label,
            attempts=t.attempts,
            hits=t.hits,
            hit_rate=round5(t.hits / t.attempts),
            mean_credit=round5(t.total / t.attempts),
        )
        for label, t in tallies.items()
        if t.attempts > 0
    ]


def rollup_intervals(
    takes: Sequence[TakeScore],
    labeler: IntervalLabeler | None = None,
) -> list[IntervalRollupRow]:
    label_of = labeler or interval_label
    tallies: dict[str, tuple[int, _Tally]] = {}
    for take in takes:
        for attempt in take.intervals.attempts:
            semis = attempt.semitone_class
            _, t = tallies.setdefault(label_of(semis), (semis, _Tally()))
            t.attempts += 1
            t.hits += int(attempt.correct)

    return [
        IntervalRollupRow(
            label=label,
            semitones=semis,
            attempts=t.attempts,
            correct=t.hits,
            percent=round2(100.0 * t.hits / t.attempts),
        )
        for label, (semis, t) in tallies.items()
        if t.attempts > 0
    ]


# ---------------------------------------------------------------------------
# Sections of the payload
# ---------------------------------------------------------------------------

def _aggregate_pitch(takes: Sequence[TakeScore]) -> AggregatePitch:
    by_midi: dict[int, _RunningMean] = {}
    for take in takes:
        for p in take.pitch.per_note:
            by_midi.setdefault(round(p.midi), _RunningMean()).add(p.ratio, p.cents_mae)

    return AggregatePitch(
        percent=round2(mean([t.pitch.percent for t in takes])),
        time_on_pitch_ratio=round5(clamp01(mean([t.pitch.time_on_pitch_ratio for t in takes]))),
        cents_mae=round2(mean([t.pitch.cents_mae for t in takes])),
        per_midi=[
            PitchMidiRow(midi=midi, n=g.n, ratio=round5(g.ratio), cents_mae=round2(g.mae))
            for midi, g in sorted(by_midi.items())
        ],
    )


def _aggregate_rhythm(takes: Sequence[TakeScore], visibility: Visibility) -> tuple[AggregateRhythm, LifetimeCounts]:
    counts = LifetimeCounts()
    melody_errs: list[float] = []
    line_errs: list[float] = []

    for take in takes:
        for r in take.rhythm.per_note_melody:
            counts.note_attempts += 1
            if r.hit:
                counts.note_hits += 1
                melody_errs.append(abs(r.onset_err_ms))
        if take.rhythm.line_evaluated:
            for e in take.rhythm.line_per_event:
                counts.event_attempts += 1
                if e.hit:
                    counts.event_hits += 1
                    line_errs.append(abs(e.err_ms))

    line_takes = [t for t in takes if t.rhythm.line_evaluated]
    any_line = bool(line_takes)
    show_line = visibility.show_rhythm_line and any_line
    line_percent = mean([t.rhythm.line_percent for t in line_takes]) if show_line else 0.0

    def visible_rhythm(take: TakeScore) -> float:
        parts = []
        if visibility.show_melody_rhythm:
            parts.append(take.rhythm.melody_percent)
        if visibility.show_rhythm_line and take.rhythm.line_evaluated:
            parts.append(take.rhythm.line_percent)
        return mean(parts)

    rhythm = AggregateRhythm(
        melody_percent=round2(mean([t.rhythm.melody_percent for t in takes])),
        melody_hit_rate=round5(counts.note_hits / counts.note_attempts) if counts.note_attempts else 0.0,
        melody_mean_abs_ms=round2(mean(melody_errs)),
        line_evaluated=any_line,
        line_percent=round2(line_percent),
        line_hit_rate=round5(counts.event_hits / counts.event_attempts) if counts.event_attempts else 0.0,
        line_mean_abs_ms=round2(mean(line_errs)),
        combined_percent=round2(mean([visible_rhythm(t) for t in takes])),
    )
    return rhythm, counts


def _aggregate_intervals(takes: Sequence[TakeScore], counts: LifetimeCounts, visible: bool) -> IntervalScore:
    classes = empty_classes()
    for take in takes:
        for c in take.intervals.classes:
            cell = classes[c.semitones]
            cell.attempts += c.attempts
            cell.correct += c.correct

    total = sum(c.attempts for c in classes)
    correct = sum(c.correct for c in classes)
    counts.interval_attempts = total
    counts.interval_correct = correct

    if not visible:
        return IntervalScore(total=0, correct=0, correct_ratio=0.0, classes=empty_classes())

    for cell in classes:
        cell.percent = round2(100.0 * cell.correct / cell.attempts) if cell.attempts else 0.0
    return IntervalScore(
        total=total,
        correct=correct,
        correct_ratio=round5(correct / total) if total else 1.0,
        classes=classes,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def aggregate_for_submission(
    takes: Sequence[TakeScore],
    visibility: Visibility | None = None,
    duration_labeler: DurationLabeler | None = None,
    line_labeler: LineLabeler | None = None,
    interval_labeler: IntervalLabeler | None = None,
    prior_durations: Sequence[DurationRollupRow] | None = None,
) -> SubmissionAggregate:
    """Roll every take of a session into one submission payload.

    Labelers default to ones derived from each take's tempo. Rows from a
    previous submission can be folded into the duration rollup through
    *prior_durations*.
    """
    visibility = visibility or Visibility()

    # Finals reflect what the learner saw on each take
    final_pct = mean([finalize_visible(t, visibility).percent for t in takes])

    pitch = _aggregate_pitch(takes)
    rhythm, counts = _aggregate_rhythm(takes, visibility)
    intervals = _aggregate_intervals(takes, counts, visibility.show_intervals)

    sources: list[RollupSource] = []
    if prior_durations:
        sources.append(AggregatedRows(rows=list(prior_durations)))
    sources.extend(
        PerNoteRows(rows=t.rhythm.per_note_melody, tempo=t.tempo)
        for t in takes
    )

    result = SubmissionAggregate(
        final=FinalScore(percent=round2(final_pct), letter=letter_from_percent(final_pct)),
        pitch=pitch,
        rhythm=rhythm,
        intervals=intervals,
        duration_rollup=rollup_durations(sources, duration_labeler),
        line_rollup=rollup_line_events(takes, line_labeler),
        interval_rollup=rollup_intervals(takes, interval_labeler) if visibility.show_intervals else [],
        counts=counts,
        takes=len(takes),
    )
    logger.info(f"Aggregated {result.takes} takes: final={result.final.percent:.2f} ({result.final.letter}) "
                f"pitch={result.pitch.percent:.2f} melody={result.rhythm.melody_percent:.2f} "
                f"line={result.rhythm.line_percent:.2f} "
                f"intervals={result.intervals.correct}/{result.intervals.total}")
    return result
