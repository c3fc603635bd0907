"""
Energy centre banding for frequency-domain frames.

Maps a dB magnitude frame onto the seven fixed energy centre bands
(root through crown) by averaging the dB values inside each band.
"""

import math
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np


class EnergyCentre(Enum):
    """The seven energy centre bands with their literal Hz ranges."""

    ROOT = ("root", 32.0, 128.0)
    SACRAL = ("sacral", 128.0, 256.0)
    SOLAR_PLEXUS = ("solarPlexus", 256.0, 384.0)
    HEART = ("heart", 384.0, 512.0)
    THROAT = ("throat", 512.0, 768.0)
    THIRD_EYE = ("thirdEye", 768.0, 1024.0)
    CROWN = ("crown", 1024.0, 4000.0)

    def __init__(self, key: str, low_hz: float, high_hz: float):
        self.key = key
        self.low_hz = low_hz
        self.high_hz = high_hz

    @classmethod
    def from_key(cls, key: str) -> "EnergyCentre":
        """Look up a centre by its serialised key (e.g. ``"solarPlexus"``)."""
        for centre in cls:
            if centre.key == key:
                return centre
        raise ValueError(f"Unknown energy centre: '{key}'")


# Ordered low to high
ENERGY_CENTRE_ORDER: Tuple[EnergyCentre, ...] = tuple(EnergyCentre)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def frequency_to_bin(freq: float, sample_rate: float, fft_size: int) -> int:
    """Convert a frequency in Hz to the nearest FFT bin index."""
    return round_half_up(freq * fft_size / sample_rate)


def bin_to_frequency(bin_index: float, sample_rate: float, fft_size: int) -> float:
    """Convert an FFT bin index to its frequency in Hz."""
    return bin_index * sample_rate / fft_size


def _clamped_bin_range(
    low_hz: float,
    high_hz: float,
    sample_rate: float,
    fft_size: int,
    n_bins: int,
) -> Tuple[int, int]:
    low_bin = min(max(frequency_to_bin(low_hz, sample_rate, fft_size), 0), n_bins)
    high_bin = min(max(frequency_to_bin(high_hz, sample_rate, fft_size), 0), n_bins)
    return low_bin, max(low_bin, high_bin)


def band_energy(
    frequency_data: Sequence[float],
    low_freq: float,
    high_freq: float,
    sample_rate: float,
    fft_size: int,
) -> float:
    """
    Average dB level of a frequency band.

    The dB values themselves are averaged (no conversion to linear power).

    Args:
        frequency_data: dB magnitudes, one per bin
        low_freq: Inclusive lower band edge in Hz
        high_freq: Exclusive upper band edge in Hz
        sample_rate: Sample rate in Hz
        fft_size: FFT size the frame was computed with

    Returns:
        Mean dB over the band's bins, or -inf if no bins fall inside the frame
    """
    data = np.asarray(frequency_data, dtype=np.float64)
    low_bin, high_bin = _clamped_bin_range(
        low_freq, high_freq, sample_rate, fft_size, len(data)
    )
    if high_bin <= low_bin:
        return float("-inf")
    return float(np.mean(data[low_bin:high_bin]))


def centre_bin_ranges(
    sample_rate: float, fft_size: int, n_bins: Optional[int] = None
) -> Dict[EnergyCentre, Tuple[int, int]]:
    """
    Half-open ``[low, high)`` bin range used for every energy centre.

    Args:
        sample_rate: Sample rate in Hz
        fft_size: FFT size
        n_bins: Frame length to clamp against (defaults to fft_size // 2)
    """
    if n_bins is None:
        n_bins = fft_size // 2
    return {
        centre: _clamped_bin_range(
            centre.low_hz, centre.high_hz, sample_rate, fft_size, n_bins
        )
        for centre in ENERGY_CENTRE_ORDER
    }


def map_energy_centres(
    frequency_data: Sequence[float], sample_rate: float, fft_size: int
) -> Dict[EnergyCentre, float]:
    """Average dB level of every energy centre for one frame."""
    data = np.asarray(frequency_data, dtype=np.float64)
    return {
        centre: band_energy(data, centre.low_hz, centre.high_hz, sample_rate, fft_size)
        for centre in ENERGY_CENTRE_ORDER
    }


def frequency_to_centre(hz: float) -> Optional[EnergyCentre]:
    """
    Energy centre a frequency falls into.

    Anything at or above 1024 Hz belongs to the crown, including frequencies
    beyond the crown's 4 kHz banding edge. Returns None below 32 Hz.
    """
    if not math.isfinite(hz):
        return None
    for centre in ENERGY_CENTRE_ORDER:
        if centre.low_hz <= hz < centre.high_hz:
            return centre
    return EnergyCentre.CROWN if hz >= EnergyCentre.CROWN.low_hz else None
