"""
Acoustic measurement primitives.

Pure functions over captured buffers:
- Energy centre banding of dB frames
- Noise floor statistics
- Transient (clap) detection and impulse response extraction
- RT60 via Schroeder integration
- Fundamental and harmonic detection (HPS)
- Hz/note conversion
"""

from .bands import (
    ENERGY_CENTRE_ORDER,
    EnergyCentre,
    band_energy,
    bin_to_frequency,
    centre_bin_ranges,
    frequency_to_bin,
    frequency_to_centre,
    map_energy_centres,
)
from .noise_floor import (
    NoiseFloorResult,
    analyse_noise_floor,
    compute_rms,
    linear_to_db,
    rate_noise_floor,
)
from .transients import (
    TransientDetectorConfig,
    TransientEvent,
    detect_transients,
    extract_impulse_response,
)
from .rt60 import RT60Result, analyse_rt60, compute_rt60, estimate_rt60, schroeder_integration
from .overtones import (
    HarmonicPeak,
    OvertoneResult,
    SpectralPeak,
    detect_overtones,
    find_spectral_peaks,
    harmonic_product_spectrum,
)
from .notes import NoteInfo, frequency_to_note, note_to_frequency
from .spectrum import SpectrumAnalyser, average_spectrum, split_blocks
from .sweep import compute_inverse_filter, deconvolve_sweep, generate_log_sweep

__all__ = [
    # Banding
    "EnergyCentre",
    "ENERGY_CENTRE_ORDER",
    "band_energy",
    "bin_to_frequency",
    "centre_bin_ranges",
    "frequency_to_bin",
    "frequency_to_centre",
    "map_energy_centres",
    # Noise floor
    "NoiseFloorResult",
    "analyse_noise_floor",
    "compute_rms",
    "linear_to_db",
    "rate_noise_floor",
    # Transients
    "TransientDetectorConfig",
    "TransientEvent",
    "detect_transients",
    "extract_impulse_response",
    # Reverberation
    "RT60Result",
    "analyse_rt60",
    "compute_rt60",
    "estimate_rt60",
    "schroeder_integration",
    # Overtones
    "HarmonicPeak",
    "OvertoneResult",
    "SpectralPeak",
    "detect_overtones",
    "find_spectral_peaks",
    "harmonic_product_spectrum",
    # Notes
    "NoteInfo",
    "frequency_to_note",
    "note_to_frequency",
    # Front end
    "SpectrumAnalyser",
    "average_spectrum",
    "split_blocks",
    # Sweep
    "generate_log_sweep",
    "compute_inverse_filter",
    "deconvolve_sweep",
]
