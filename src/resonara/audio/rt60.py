"""
Reverberation time (RT60) from an impulse response.

Uses Schroeder backward integration to get a smooth energy decay curve,
then extrapolates the time for a 60 dB decay from the -5 to -25 dB span
(T20), falling back to the -10 dB point when the capture lacks dynamic
range.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class RT60Result:
    """Reverberation time with the decay curve it was measured on."""
    rt60: float                                          # Seconds, 0 if not measurable
    decay_curve: np.ndarray = field(compare=False)       # Schroeder curve (dB)
    quality: str = "poor"                                # "good", "fair", "poor"


def schroeder_integration(impulse_response: Sequence[float]) -> np.ndarray:
    """
    Schroeder backward integration of an impulse response.

    Each point holds the energy remaining from that sample to the end,
    expressed in dB relative to the total energy, so the curve starts at
    0 dB and never rises. Samples after the last non-zero sample give -inf.

    If the response carries no energy the (all-zero) integrated curve is
    returned unconverted.

    Args:
        impulse_response: Decay segment following an excitation

    Returns:
        Energy decay curve, same length as the input
    """
    ir = np.asarray(impulse_response, dtype=np.float64)
    if ir.size == 0:
        return np.zeros(0, dtype=np.float64)

    squared = ir ** 2

    # Backward integration: sum from the end to each position
    energy = np.cumsum(squared[::-1])[::-1].copy()

    total = energy[0]
    if total <= 0:
        return energy

    with np.errstate(divide="ignore"):
        return 10 * np.log10(energy / total)


def _first_crossing(decay_curve: np.ndarray, level_db: float) -> Optional[int]:
    """First index at or below level_db, None if never reached."""
    hits = np.flatnonzero(decay_curve <= level_db)
    return int(hits[0]) if hits.size else None


def estimate_rt60(decay_curve: Sequence[float], sample_rate: float) -> float:
    """
    Estimate RT60 from a Schroeder decay curve.

    T20: time from -5 dB to -25 dB, times 3. When the curve never gets to
    -25 dB the -10 dB point is extrapolated instead (times 6), which is a
    coarser estimate. Returns 0 when neither is available.
    """
    curve = np.asarray(decay_curve, dtype=np.float64)

    t5 = _first_crossing(curve, -5.0)
    t25 = _first_crossing(curve, -25.0)

    if t5 is None or t25 is None or t25 <= t5:
        # Not enough dynamic range, rough estimate from the -10 dB point
        t10 = _first_crossing(curve, -10.0)
        if t10 is None or t10 <= 0:
            return 0.0
        return (t10 / sample_rate) * 6

    t20_seconds = (t25 - t5) / sample_rate
    return t20_seconds * 3


def compute_rt60(impulse_response: Sequence[float], sample_rate: float) -> float:
    """RT60 straight from a raw impulse response."""
    return estimate_rt60(schroeder_integration(impulse_response), sample_rate)


def rate_decay(decay_curve: np.ndarray) -> str:
    """Quality of a measurement from the dynamic range the curve reached."""
    min_db = min(0.0, float(np.min(decay_curve))) if len(decay_curve) else 0.0

    if min_db <= -35:
        return "good"
    elif min_db <= -20:
        return "fair"
    return "poor"


def analyse_rt60(impulse_response: Sequence[float], sample_rate: float) -> RT60Result:
    """
    Full RT60 analysis with a quality assessment.

    Args:
        impulse_response: Decay segment following an excitation
        sample_rate: Sample rate in Hz

    Returns:
        RT60Result; quality reflects how far the decay curve fell
    """
    decay_curve = schroeder_integration(impulse_response)
    rt60 = estimate_rt60(decay_curve, sample_rate)
    quality = rate_decay(decay_curve)

    decay_curve.flags.writeable = False
    return RT60Result(rt60=float(rt60), decay_curve=decay_curve, quality=quality)
