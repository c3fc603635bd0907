"""
Noise floor estimation for the ambient listening pass.

Determines the ambient level of the room from per-block RMS readings and
frequency snapshots, used both for calibration and to rate how suitable
the room is for sound practice.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Sequence

import numpy as np

from .bands import ENERGY_CENTRE_ORDER, EnergyCentre, band_energy


# Floor applied before taking the log, keeps silence finite
LINEAR_FLOOR = 1e-10

# Rough A-weighting offset (simplified)
DBA_OFFSET = 3.0


@dataclass(frozen=True)
class NoiseFloorResult:
    """Ambient noise characteristics of a room."""
    average_db: float                       # Level of the mean RMS (dBFS)
    peak_db: float                          # Level of the loudest RMS block (dBFS)
    estimated_dba: float                    # Approximate A-weighted level
    band_levels: Dict[EnergyCentre, float] = field(default_factory=dict)
    rating: str = "poor"                    # "excellent", "good", "fair", "poor"


def compute_rms(buffer: Sequence[float]) -> float:
    """RMS of a time-domain block (0.0 for an empty block)."""
    data = np.asarray(buffer, dtype=np.float64)
    if data.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(data ** 2)))


def linear_to_db(value: float) -> float:
    """Convert a linear amplitude to dB relative to full scale."""
    return 20 * math.log10(max(value, LINEAR_FLOOR))


def rate_noise_floor(average_db: float) -> str:
    """Quality rating of an average ambient level for sound practice."""
    if average_db < -50:
        return "excellent"
    elif average_db < -40:
        return "good"
    elif average_db < -30:
        return "fair"
    return "poor"


def analyse_noise_floor(
    samples: Sequence[float],
    frequency_snapshots: Sequence[Sequence[float]],
    sample_rate: float,
    fft_size: int,
) -> NoiseFloorResult:
    """
    Analyse the noise floor from an ambient listening pass.

    Band levels are the mean, across snapshots, of each snapshot's band
    energy. With no snapshots ``band_levels`` is left empty; substituting a
    default level is up to the caller.

    Args:
        samples: RMS amplitude of each captured block
        frequency_snapshots: dB frequency frames captured alongside
        sample_rate: Sample rate in Hz
        fft_size: FFT size of the snapshots

    Returns:
        NoiseFloorResult for the pass
    """
    rms = np.asarray(samples, dtype=np.float64)

    # No readings is treated as digital silence
    avg_rms = float(np.mean(rms)) if rms.size else 0.0
    peak_rms = float(np.max(rms)) if rms.size else 0.0
    average_db = linear_to_db(avg_rms)
    peak_db = linear_to_db(peak_rms)

    band_levels: Dict[EnergyCentre, float] = {}
    if len(frequency_snapshots) > 0:
        for centre in ENERGY_CENTRE_ORDER:
            levels = [
                band_energy(snapshot, centre.low_hz, centre.high_hz, sample_rate, fft_size)
                for snapshot in frequency_snapshots
            ]
            band_levels[centre] = float(np.mean(levels))

    return NoiseFloorResult(
        average_db=average_db,
        peak_db=peak_db,
        estimated_dba=average_db + DBA_OFFSET,
        band_levels=band_levels,
        rating=rate_noise_floor(average_db),
    )
