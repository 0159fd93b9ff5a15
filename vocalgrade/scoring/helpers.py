"""Statistics and pitch-math primitives shared by the scorers."""

import math
from collections.abc import Sequence

import librosa
import numpy as np

from vocalgrade.scoring.models import PitchSample

DEFAULT_DT = 1.0 / 50  # assumed detector frame interval when it cannot be estimated
NO_DATA_CENTS = 120.0  # MAE reported when a window has no voiced frames


def estimate_avg_dt(times: Sequence[float] | np.ndarray) -> float:
    """Average interval between time-sorted sample timestamps."""
    if len(times) < 2:
        return DEFAULT_DT
    total = float(times[-1]) - float(times[0])
    return total / (len(times) - 1) if total > 0 else DEFAULT_DT


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp01(x: float) -> float:
    return clamp(x, 0.0, 1.0)


def mean(xs: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    return float(np.mean(xs)) if len(xs) else 0.0


def trimmed_mean(xs: Sequence[float], upper_trim: float = 0.25, lower_trim: float = 0.0) -> float:
    """Mean after dropping the largest *upper_trim* fraction of values.

    At least one value is always kept.
    """
    if not len(xs):
        return 0.0
    ys = np.sort(np.asarray(xs, dtype=float))
    lo = int(math.floor(len(ys) * lower_trim))
    hi = max(lo + 1, int(math.ceil(len(ys) * (1.0 - upper_trim))))
    return float(np.mean(ys[lo:hi]))


def cosine_credit(x: float, full: float, zero: float) -> float:
    """Smooth 1 → 0 falloff: full credit up to *full*, none from *zero*."""
    if x <= full:
        return 1.0
    if x >= zero:
        return 0.0
    t = (x - full) / (zero - full)
    return 0.5 * (1.0 + math.cos(math.pi * t))


def round2(x: float) -> float:
    return round(float(x), 2)


def round5(x: float) -> float:
    return round(float(x), 5)


# ---------------------------------------------------------------------------
# Samples
# ---------------------------------------------------------------------------

def sample_arrays(samples: Sequence[PitchSample]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split samples into (times, hz, confidence) arrays sorted by time.

    Unvoiced frames carry hz = 0.
    """
    if not samples:
        empty = np.zeros(0, dtype=float)
        return empty, empty.copy(), empty.copy()
    times = np.array([s.time_sec for s in samples], dtype=float)
    hz = np.array([s.hz if s.hz is not None else 0.0 for s in samples], dtype=float)
    conf = np.array([s.confidence for s in samples], dtype=float)
    hz[~np.isfinite(hz)] = 0.0
    order = np.argsort(times, kind="stable")
    return times[order], hz[order], conf[order]


def voiced_mask(hz: np.ndarray, conf: np.ndarray, confidence_min: float = 0.0) -> np.ndarray:
    """Boolean mask of voiced frames, optionally gated by confidence."""
    mask = hz > 0
    if confidence_min > 0:
        mask &= conf >= confidence_min
    return mask


def is_voiced(sample: PitchSample, confidence_min: float = 0.0) -> bool:
    if sample.hz is None or not math.isfinite(sample.hz) or sample.hz <= 0:
        return False
    return confidence_min <= 0 or sample.confidence >= confidence_min


def filter_voiced(samples: Sequence[PitchSample], confidence_min: float = 0.0) -> list[PitchSample]:
    return [s for s in samples if is_voiced(s, confidence_min)]


# ---------------------------------------------------------------------------
# Pitch math
# ---------------------------------------------------------------------------

def hz_to_midi(hz):
    """Fractional MIDI number for a frequency (scalar or array)."""
    return librosa.hz_to_midi(hz)


def midi_to_hz(midi):
    return librosa.midi_to_hz(midi)
