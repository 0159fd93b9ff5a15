"""Core data models for take scoring."""

from dataclasses import dataclass, field

from vocalgrade.config import ScoringOptions


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PitchSample:
    """A single pitch-detector frame."""
    time_sec: float
    hz: float | None  # None or <= 0 means unvoiced
    confidence: float = 1.0


@dataclass(frozen=True)
class Note:
    """A target note of the phrase."""
    start_sec: float
    dur_sec: float
    midi: float

    @property
    def end_sec(self) -> float:
        return self.start_sec + self.dur_sec


@dataclass(frozen=True)
class Phrase:
    """Ordered target notes for one take."""
    notes: list[Note] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.notes)

    @property
    def end_sec(self) -> float:
        return max((n.end_sec for n in self.notes), default=0.0)


@dataclass(frozen=True)
class TempoContext:
    """Tempo the phrase was generated at."""
    bpm: float
    den: int = 4  # time signature denominator

    @property
    def beat_sec(self) -> float:
        """Seconds per beat unit (the denominator note)."""
        return (60.0 / self.bpm) * (4.0 / self.den)

    @property
    def quarter_sec(self) -> float:
        return 60.0 / self.bpm


@dataclass(frozen=True)
class Visibility:
    """Which score tracks the learner is shown."""
    show_pitch: bool = True
    show_melody_rhythm: bool = True
    show_rhythm_line: bool = True
    show_intervals: bool = True


# ---------------------------------------------------------------------------
# Pitch
# ---------------------------------------------------------------------------

@dataclass
class PerNotePitch:
    """Pitch accuracy of one note."""
    idx: int
    midi: float
    time_on_pitch_sec: float
    evaluated_dur_sec: float
    ratio: float  # shaped, 0..1 (used in the score)
    raw_ratio: float  # unshaped coverage, 0..1
    cents_mae: float
    landing_streak_sec: float = 0.0


@dataclass
class PitchScore:
    """Pitch track of one take."""
    percent: float  # 0..100
    time_on_pitch_ratio: float  # 0..1
    cents_mae: float
    per_note: list[PerNotePitch] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Rhythm
# ---------------------------------------------------------------------------

@dataclass
class PerNoteRhythm:
    """Melody coverage of one note."""
    idx: int
    note_dur_sec: float  # notated length, before the onset grace
    evaluated_dur_sec: float
    voiced_sec: float
    coverage: float  # 0..1
    onset_err_ms: float | None  # first voiced frame minus notated onset

    @property
    def hit(self) -> bool:
        return self.onset_err_ms is not None


@dataclass
class RhythmEvent:
    """One expected rhythm-line onset and the tap matched to it."""
    idx: int
    expected_sec: float
    tapped_sec: float | None
    err_ms: float | None
    credit: float  # 0..1
    hit: bool


@dataclass
class RhythmEval:
    """Result of one rhythm algorithm."""
    percent: float
    hit_rate: float
    mean_abs_ms: float
    evaluated: bool
    per_note: list[PerNoteRhythm] = field(default_factory=list)
    per_event: list[RhythmEvent] = field(default_factory=list)


@dataclass
class RhythmScore:
    """Melody coverage and hand-line results of one take."""
    melody_percent: float
    melody_hit_rate: float
    melody_mean_abs_ms: float
    line_evaluated: bool
    line_percent: float
    line_hit_rate: float
    line_mean_abs_ms: float
    combined_percent: float  # mean of evaluated tracks
    per_note_melody: list[PerNoteRhythm] = field(default_factory=list)
    line_per_event: list[RhythmEvent] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Intervals
# ---------------------------------------------------------------------------

@dataclass
class IntervalClass:
    """Attempts and accuracy for one semitone distance."""
    semitones: int  # 0..12
    label: str
    attempts: int = 0
    correct: int = 0
    percent: float = 0.0


@dataclass
class IntervalAttempt:
    """One evaluated adjacent note pair."""
    idx: int  # index of the second note
    expected_semitones: float
    sung_semitones: float
    error_cents: float
    correct: bool

    @property
    def semitone_class(self) -> int:
        return min(12, round(abs(self.expected_semitones)))


@dataclass
class IntervalScore:
    """Interval track of one take (13 semitone buckets)."""
    total: int
    correct: int
    correct_ratio: float  # 0..1
    classes: list[IntervalClass] = field(default_factory=list)
    attempts: list[IntervalAttempt] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Take
# ---------------------------------------------------------------------------

@dataclass
class FinalScore:
    """Final percent with its letter grade."""
    percent: float  # 0..100
    letter: str


@dataclass
class TakeScore:
    """Complete score of one take."""
    pitch: PitchScore
    rhythm: RhythmScore
    intervals: IntervalScore
    final: FinalScore
    options: ScoringOptions = field(default_factory=ScoringOptions)
    tempo: TempoContext | None = None


# ---------------------------------------------------------------------------
# Submission aggregate
# ---------------------------------------------------------------------------

@dataclass
class PitchMidiRow:
    """Per-note pitch results averaged over one MIDI number."""
    midi: int
    n: int
    ratio: float
    cents_mae: float


@dataclass
class AggregatePitch:
    """Pitch track averaged over a session."""
    percent: float
    time_on_pitch_ratio: float
    cents_mae: float
    per_midi: list[PitchMidiRow] = field(default_factory=list)


@dataclass
class AggregateRhythm:
    """Rhythm tracks pooled over a session."""
    melody_percent: float
    melody_hit_rate: float
    melody_mean_abs_ms: float
    line_evaluated: bool
    line_percent: float
    line_hit_rate: float
    line_mean_abs_ms: float
    combined_percent: float


@dataclass
class DurationRollupRow:
    """Melody coverage grouped by note-duration label."""
    label: str
    attempts: int
    hits: int
    hit_rate: float
    mean_coverage: float


@dataclass
class LineRollupRow:
    """Hand-line events grouped by beat label."""
    label: str
    attempts: int
    hits: int
    hit_rate: float
    mean_credit: float


@dataclass
class IntervalRollupRow:
    """Interval attempts grouped by label."""
    label: str
    semitones: int
    attempts: int
    correct: int
    percent: float


@dataclass
class LifetimeCounts:
    """Attempt and hit counters for one submission."""
    note_attempts: int = 0
    note_hits: int = 0
    event_attempts: int = 0
    event_hits: int = 0
    interval_attempts: int = 0
    interval_correct: int = 0


@dataclass
class SubmissionAggregate:
    """Session rollup of every take, written once."""
    final: FinalScore
    pitch: AggregatePitch
    rhythm: AggregateRhythm
    intervals: IntervalScore
    duration_rollup: list[DurationRollupRow] = field(default_factory=list)
    line_rollup: list[LineRollupRow] = field(default_factory=list)
    interval_rollup: list[IntervalRollupRow] = field(default_factory=list)
    counts: LifetimeCounts = field(default_factory=LifetimeCounts)
    takes: int = 0


# ---------------------------------------------------------------------------
# Rollup sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AggregatedRows:
    """Duration rows that were already rolled up (e.g. a stored submission)."""
    rows: list[DurationRollupRow]


@dataclass(frozen=True)
class PerNoteRows:
    """Raw melody rows of one take."""
    rows: list[PerNoteRhythm]
    tempo: TempoContext | None = None


RollupSource = AggregatedRows | PerNoteRows
