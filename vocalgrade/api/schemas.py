"""Pydantic models for the stored submission rows."""

from pydantic import BaseModel


class PitchNoteRow(BaseModel):
    midi: int
    n: int
    ratio: float
    cents_mae: float


class MelodyDurationRow(BaseModel):
    duration_label: str
    attempts: int
    hits: int
    hit_rate: float
    mean_coverage: float


class RhythmLineRow(BaseModel):
    value: str
    n: int
    hits: int
    hit_rate: float
    credit: float


class IntervalClassRow(BaseModel):
    semitones: int
    label: str
    attempts: int
    correct: int
    percent: float


class IntervalLabelRow(BaseModel):
    label: str
    semitones: int
    attempts: int
    correct: int
    percent: float


class LifetimeCountsRow(BaseModel):
    note_attempts: int = 0
    note_hits: int = 0
    event_attempts: int = 0
    event_hits: int = 0
    interval_attempts: int = 0
    interval_correct: int = 0


class LessonResultRow(BaseModel):
    lesson_slug: str
    session_id: str | None = None
    take_index: int = 0
    takes: int = 0

    final_percent: float
    final_letter: str
    pitch_percent: float
    pitch_time_on_ratio: float
    pitch_cents_mae: float
    rhythm_melody_percent: float
    rhythm_melody_hit_rate: float
    rhythm_melody_mean_abs_ms: float
    rhythm_line_evaluated: bool = False
    rhythm_line_percent: float = 0.0
    rhythm_line_hit_rate: float = 0.0
    rhythm_line_mean_abs_ms: float = 0.0
    rhythm_combined_percent: float
    intervals_total: int = 0
    intervals_correct: int = 0
    intervals_correct_ratio: float


class SubmissionPayload(BaseModel):
    result: LessonResultRow
    pitch_notes: list[PitchNoteRow] = []
    melody_per_duration: list[MelodyDurationRow] = []
    rhythm_per_event: list[RhythmLineRow] = []
    interval_classes: list[IntervalClassRow] = []
    interval_labels: list[IntervalLabelRow] = []
    counts: LifetimeCountsRow = LifetimeCountsRow()
