"""
Overtone detection using the Harmonic Product Spectrum (HPS).

Identifies the fundamental frequency of an instrument recording and
classifies the prominent spectral peaks as harmonics of it.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np


# Peaks considered when matching harmonics
MAX_PEAKS_CONSIDERED = 16

# Denominator cap for the confidence ratio
CONFIDENCE_PEAK_CAP = 10

# Maximum distance from an integer ratio to count as a harmonic
HARMONIC_TOLERANCE = 0.08


@dataclass(frozen=True)
class HarmonicPeak:
    """A spectral peak matched to a harmonic of the fundamental."""
    frequency: float        # Hz
    amplitude: float        # dB
    harmonic_number: int    # 1 = fundamental, 2 = 2nd harmonic, ...


@dataclass(frozen=True)
class SpectralPeak:
    """A local maximum of the spectrum."""
    bin: int
    frequency: float
    amplitude: float


@dataclass(frozen=True)
class OvertoneResult:
    """Fundamental and detected harmonics of a spectrum."""
    fundamental: float
    harmonics: List[HarmonicPeak] = field(default_factory=list)
    confidence: float = 0.0


def harmonic_product_spectrum(
    magnitude_spectrum: Sequence[float],
    sample_rate: float,
    fft_size: int,
    num_harmonics: int = 5,
) -> float:
    """
    Estimate the fundamental by multiplying downsampled spectra.

    Args:
        magnitude_spectrum: dB magnitudes, one per bin
        sample_rate: Sample rate in Hz
        fft_size: FFT size of the spectrum
        num_harmonics: Number of downsampled copies (including the original)

    Returns:
        Fundamental frequency in Hz, or 0.0 if the spectrum is too short
        to search above ~20 Hz
    """
    spectrum = np.asarray(magnitude_spectrum, dtype=np.float64)
    num_harmonics = max(1, int(num_harmonics))
    half_length = len(spectrum) // num_harmonics
    if half_length == 0:
        return 0.0

    # dB -> linear amplitude for multiplication
    linear = 10 ** (spectrum / 20)
    hps = linear[:half_length].copy()

    indices = np.arange(half_length)
    for h in range(2, num_harmonics + 1):
        source = indices * h
        in_range = source < len(spectrum)
        hps[in_range] *= linear[source[in_range]]

    # Skip DC and very low bins
    min_bin = int(math.ceil(20 * fft_size / sample_rate))
    if min_bin >= half_length:
        return 0.0

    max_bin = min_bin + int(np.argmax(hps[min_bin:]))
    return max_bin * sample_rate / fft_size


def find_spectral_peaks(
    magnitude_spectrum: Sequence[float],
    sample_rate: float,
    fft_size: int,
    threshold_db: float = -60.0,
    min_distance: int = 5,
) -> List[SpectralPeak]:
    """
    Find local maxima above a threshold, loudest first.

    A bin is a peak when it is strictly greater than its two neighbours on
    each side. Peaks closer than ``min_distance`` bins to the previously
    accepted peak are dropped.
    """
    spectrum = np.asarray(magnitude_spectrum, dtype=np.float64)
    n = len(spectrum)
    if n < 5:
        return []

    centre = spectrum[2:n - 2]
    is_peak = (
        (centre > threshold_db)
        & (centre > spectrum[1:n - 3])
        & (centre > spectrum[3:n - 1])
        & (centre > spectrum[0:n - 4])
        & (centre > spectrum[4:n])
    )

    peaks: List[SpectralPeak] = []
    for i in np.flatnonzero(is_peak) + 2:
        if not peaks or i - peaks[-1].bin >= min_distance:
            peaks.append(SpectralPeak(
                bin=int(i),
                frequency=float(i * sample_rate / fft_size),
                amplitude=float(spectrum[i]),
            ))

    return sorted(peaks, key=lambda p: p.amplitude, reverse=True)


def detect_overtones(
    magnitude_spectrum: Sequence[float],
    sample_rate: float,
    fft_size: int,
    num_harmonics: int = 5,
) -> OvertoneResult:
    """
    Find the fundamental and classify harmonics.

    Harmonics keep the order the peaks were examined in (loudest first), not
    harmonic order. Confidence is the fraction of examined peaks that landed
    on a harmonic. A silent or degenerate spectrum with no usable
    fundamental yields no harmonics and zero confidence.

    Args:
        magnitude_spectrum: dB magnitudes, one per bin
        sample_rate: Sample rate in Hz
        fft_size: FFT size of the spectrum
        num_harmonics: Harmonics used by the HPS stage

    Returns:
        OvertoneResult
    """
    fundamental = harmonic_product_spectrum(
        magnitude_spectrum, sample_rate, fft_size, num_harmonics
    )
    peaks = find_spectral_peaks(magnitude_spectrum, sample_rate, fft_size)

    if not math.isfinite(fundamental) or fundamental <= 0 or not peaks:
        return OvertoneResult(fundamental=float(fundamental), harmonics=[], confidence=0.0)

    harmonics: List[HarmonicPeak] = []
    for peak in peaks[:MAX_PEAKS_CONSIDERED]:
        ratio = peak.frequency / fundamental
        nearest = int(math.floor(ratio + 0.5))

        if nearest >= 1 and abs(ratio - nearest) < HARMONIC_TOLERANCE:
            harmonics.append(HarmonicPeak(
                frequency=peak.frequency,
                amplitude=peak.amplitude,
                harmonic_number=nearest,
            ))

    confidence = len(harmonics) / min(len(peaks), CONFIDENCE_PEAK_CAP)

    return OvertoneResult(
        fundamental=float(fundamental),
        harmonics=harmonics,
        confidence=float(min(1.0, confidence)),
    )
