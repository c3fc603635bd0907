"""
Room-instrument compatibility scoring.

Scores how well an instrument resonates within a room from the room's
noise floor and the instrument's energy centres and overtones, and turns
the result into a practitioner-friendly summary.

Score components:
- Resonance complement (40 pts): headroom of the instrument over the noise floor
- Spectral richness (35 pts): how many energy centres the instrument activates
- Signal clarity (25 pts): overtone confidence and harmonic count
"""

import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from ..audio.bands import ENERGY_CENTRE_ORDER, EnergyCentre, round_half_up
from ..audio.noise_floor import NoiseFloorResult
from ..audio.overtones import HarmonicPeak


# Per-band noise level assumed when no room data is available
DEFAULT_NOISE_DB = -60.0

# Level mapped to zero coverage; kept separate from DEFAULT_NOISE_DB
SILENCE_FLOOR_DB = -80.0

RESONANCE_POINTS = 40.0
RESONANCE_FULL_HEADROOM_DB = 30.0
RICHNESS_POINTS = 35.0
ACTIVATION_HEADROOM_DB = 6.0
CLARITY_POINTS = 25.0
HARMONIC_COUNT_FOR_FULL_BONUS = 6

CENTRE_WELLNESS_NAMES: Dict[EnergyCentre, str] = {
    EnergyCentre.ROOT: "grounding",
    EnergyCentre.SACRAL: "creative flow",
    EnergyCentre.SOLAR_PLEXUS: "empowerment",
    EnergyCentre.HEART: "heart-opening",
    EnergyCentre.THROAT: "expression",
    EnergyCentre.THIRD_EYE: "intuition",
    EnergyCentre.CROWN: "transcendence",
}


@dataclass(frozen=True)
class InstrumentProfile:
    """How one instrument recording performs in a room."""
    instrument_id: str
    fundamental: float
    harmonics: List[HarmonicPeak]
    energy_centres: Dict[EnergyCentre, float]     # dB per centre
    compatibility_score: int                      # 0-100
    centre_coverage: Dict[EnergyCentre, float]    # 0-1 per centre
    summary: str
    averaged_spectrum: np.ndarray = field(compare=False)
    timestamp: float = 0.0                        # Seconds since the epoch


def band_levels_or_default(noise_floor: Optional[NoiseFloorResult]) -> Dict[EnergyCentre, float]:
    """Room band levels with the default level filling anything missing."""
    levels = noise_floor.band_levels if noise_floor is not None else {}
    return {centre: levels.get(centre, DEFAULT_NOISE_DB) for centre in ENERGY_CENTRE_ORDER}


def _headroom(instrument_db: float, noise_db: float) -> float:
    difference = instrument_db - noise_db
    if math.isnan(difference):
        return 0.0
    return max(0.0, difference)


def compute_compatibility_score(
    instrument_centres: Mapping[EnergyCentre, float],
    noise_floor_bands: Optional[Mapping[EnergyCentre, float]],
    overtone_confidence: float,
    harmonics: Sequence[HarmonicPeak],
) -> int:
    """
    Compute the room-instrument compatibility score.

    Args:
        instrument_centres: dB level per centre from the instrument recording
        noise_floor_bands: dB level per centre of the room (None = defaults)
        overtone_confidence: Overtone detection confidence, 0-1
        harmonics: Detected harmonics

    Returns:
        Integer score in [0, 100]
    """
    noise_bands = noise_floor_bands or {}

    headrooms = []
    for centre in ENERGY_CENTRE_ORDER:
        instrument_level = instrument_centres.get(centre, float("-inf"))
        noise_level = noise_bands.get(centre, DEFAULT_NOISE_DB)
        headrooms.append(_headroom(instrument_level, noise_level))

    # 1. Resonance complement: 0 dB -> 0 pts, 30+ dB -> 40 pts
    avg_headroom = sum(headrooms) / len(headrooms)
    resonance_score = min(
        RESONANCE_POINTS, (avg_headroom / RESONANCE_FULL_HEADROOM_DB) * RESONANCE_POINTS
    )

    # 2. Spectral richness: centres at least 6 dB above the noise
    activated = sum(1 for h in headrooms if h > ACTIVATION_HEADROOM_DB)
    richness_score = (activated / len(ENERGY_CENTRE_ORDER)) * RICHNESS_POINTS

    # 3. Signal clarity
    confidence = overtone_confidence if math.isfinite(overtone_confidence) else 0.0
    confidence = min(1.0, max(0.0, confidence))
    harmonic_bonus = min(1.0, len(harmonics) / HARMONIC_COUNT_FOR_FULL_BONUS)
    clarity_score = (confidence * 0.6 + harmonic_bonus * 0.4) * CLARITY_POINTS

    total = resonance_score + richness_score + clarity_score
    return max(0, min(100, round_half_up(total)))


def compute_centre_coverage(
    instrument_centres: Mapping[EnergyCentre, float],
) -> Dict[EnergyCentre, float]:
    """Map each centre's dB level from [-80, 0] onto [0, 1]."""
    coverage = {}
    for centre in ENERGY_CENTRE_ORDER:
        db = instrument_centres.get(centre, float("-inf"))
        value = (db - SILENCE_FLOOR_DB) / -SILENCE_FLOOR_DB
        coverage[centre] = 0.0 if math.isnan(value) else max(0.0, min(1.0, value))
    return coverage


def ordinal(n: int) -> str:
    """English ordinal, e.g. 1st, 2nd, 11th, 23rd."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def generate_summary(
    instrument_name: str,
    note_name: str,
    fundamental: float,
    centre_coverage: Mapping[EnergyCentre, float],
    compatibility_score: int,
    harmonics: Sequence[HarmonicPeak],
) -> str:
    """
    Describe how an instrument performs in the room.

    Opening sentence is chosen on the score (>= 80, >= 60, >= 40, else),
    the overtone clause on the harmonic count (>= 5, >= 3, else) and the
    closing sentence on how many centres exceed 0.5 coverage.
    """
    strong_centres = sorted(
        (c for c in ENERGY_CENTRE_ORDER if centre_coverage.get(c, 0.0) > 0.5),
        key=lambda c: centre_coverage[c],
        reverse=True,
    )

    peak_centre = ENERGY_CENTRE_ORDER[0]
    for centre in ENERGY_CENTRE_ORDER[1:]:
        if centre_coverage.get(centre, 0.0) > centre_coverage.get(peak_centre, 0.0):
            peak_centre = centre

    subject = f"{note_name} {instrument_name}" if note_name else instrument_name

    if compatibility_score >= 80:
        opening = f"Your {subject} resonates beautifully here"
    elif compatibility_score >= 60:
        opening = f"Your {subject} works well in this space"
    elif compatibility_score >= 40:
        opening = f"Your {subject} has moderate resonance here"
    else:
        opening = f"Your {subject} faces some acoustic challenges in this room"

    harmonic_count = len(harmonics)
    if harmonic_count >= 5:
        harmonic_note = (
            f", producing a rich overtone series up to the {ordinal(harmonic_count)} harmonic"
        )
    elif harmonic_count >= 3:
        harmonic_note = " with clear harmonics"
    else:
        harmonic_note = ""

    if len(strong_centres) >= 3:
        names = ", ".join(CENTRE_WELLNESS_NAMES[c] for c in strong_centres[:3])
        centre_note = f"The room supports its {names} frequencies"
    elif strong_centres:
        fundamental_hz = round_half_up(fundamental) if math.isfinite(fundamental) else 0
        centre_note = (
            f"It primarily activates {CENTRE_WELLNESS_NAMES[peak_centre]} "
            f"frequencies at {fundamental_hz} Hz"
        )
    else:
        centre_note = "The room's acoustic profile limits its energy centre activation"

    return f"{opening}{harmonic_note}. {centre_note}."


def build_instrument_profile(
    instrument_id: str,
    instrument_name: str,
    note_name: str,
    fundamental: float,
    harmonics: Sequence[HarmonicPeak],
    overtone_confidence: float,
    energy_centres: Mapping[EnergyCentre, float],
    averaged_spectrum: np.ndarray,
    noise_floor: Optional[NoiseFloorResult] = None,
    timestamp: Optional[float] = None,
) -> InstrumentProfile:
    """
    Fuse an instrument recording's analysis with the room's noise floor.

    Args:
        instrument_id: Library id of the instrument
        instrument_name: Display name used in the summary
        note_name: Name of the fundamental's nearest note ("" if unknown)
        fundamental: Fundamental in Hz
        harmonics: Detected harmonics
        overtone_confidence: Overtone detection confidence
        energy_centres: dB level per centre of the recording
        averaged_spectrum: Mean dB spectrum of the recording
        noise_floor: Room noise floor (None = default levels)
        timestamp: Creation time, defaults to now

    Returns:
        InstrumentProfile
    """
    score = compute_compatibility_score(
        energy_centres,
        band_levels_or_default(noise_floor),
        overtone_confidence,
        harmonics,
    )
    coverage = compute_centre_coverage(energy_centres)
    summary = generate_summary(
        instrument_name, note_name, fundamental, coverage, score, harmonics
    )

    return InstrumentProfile(
        instrument_id=instrument_id,
        fundamental=float(fundamental),
        harmonics=list(harmonics),
        energy_centres=dict(energy_centres),
        compatibility_score=score,
        centre_coverage=coverage,
        summary=summary,
        averaged_spectrum=averaged_spectrum,
        timestamp=time.time() if timestamp is None else timestamp,
    )
