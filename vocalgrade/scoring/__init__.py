"""Take scoring - each scorer in its own module."""

from vocalgrade.scoring.aggregate import aggregate_for_submission
from vocalgrade.scoring.engine import TakeScorer, compute_take_score
from vocalgrade.scoring.finalize import finalize_score_n, finalize_visible
from vocalgrade.scoring.pass_policy import DEFAULT_PASS_POLICY, PassPolicy, compute_pass

__all__ = [
    "DEFAULT_PASS_POLICY",
    "PassPolicy",
    "TakeScorer",
    "aggregate_for_submission",
    "compute_pass",
    "compute_take_score",
    "finalize_score_n",
    "finalize_visible",
]
