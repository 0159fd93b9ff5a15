"""Pass/fail gate for a scored take or submission."""

from dataclasses import dataclass, field

from vocalgrade.scoring.models import SubmissionAggregate, TakeScore

MIN_GUARDS = 2


@dataclass(frozen=True)
class PassPolicy:
    min_final_pct: float = 60.0
    min_pitch_pct: float = 65.0
    min_time_on_pitch_ratio: float = 0.55  # 0..1
    max_cents_mae: float = 60.0


@dataclass
class PassResult:
    passed: bool
    reasons: list[str] = field(default_factory=list)


DEFAULT_PASS_POLICY = PassPolicy()


def compute_pass(
    score: TakeScore | SubmissionAggregate | None,
    policy: PassPolicy = DEFAULT_PASS_POLICY,
) -> PassResult:
    """Pass when at least two of the four guards hold.

    Mostly-on-pitch singing passes even with timing wobbles. A failing
    result lists every guard that did not hold.
    """
    if score is None:
        return PassResult(passed=False, reasons=["no score"])

    final_pct = score.final.percent
    pitch_pct = score.pitch.percent
    t_on = score.pitch.time_on_pitch_ratio
    mae = score.pitch.cents_mae

    guards = [
        final_pct >= policy.min_final_pct,
        pitch_pct >= policy.min_pitch_pct,
        t_on >= policy.min_time_on_pitch_ratio,
        mae <= policy.max_cents_mae,
    ]
    if sum(guards) >= MIN_GUARDS:
        return PassResult(passed=True)

    reasons = []
    if final_pct < policy.min_final_pct:
        reasons.append(f"final {final_pct:.1f}% < {policy.min_final_pct:g}%")
    if pitch_pct < policy.min_pitch_pct:
        reasons.append(f"pitch {pitch_pct:.1f}% < {policy.min_pitch_pct:g}%")
    if t_on < policy.min_time_on_pitch_ratio:
        reasons.append(f"time-on-pitch {t_on * 100:.0f}% < {policy.min_time_on_pitch_ratio * 100:.0f}%")
    if mae > policy.max_cents_mae:
        reasons.append(f"MAE {round(mae)}¢ > {policy.max_cents_mae:g}¢")
    return PassResult(passed=False, reasons=reasons)
