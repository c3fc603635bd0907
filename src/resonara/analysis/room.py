"""
Room-level aggregation of the discovery measurements.

Combines the ambient noise floor, the clap test captures and the
instrument profiles into a single room profile with an overall score.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..audio.bands import EnergyCentre, round_half_up
from ..audio.noise_floor import NoiseFloorResult
from ..audio.rt60 import RT60Result, analyse_rt60
from ..audio.transients import (
    TransientDetectorConfig,
    TransientEvent,
    detect_transients,
    extract_impulse_response,
)
from .compatibility import InstrumentProfile, band_levels_or_default

logger = logging.getLogger(__name__)


# Seconds of decay captured after each clap
DECAY_CAPTURE_SECONDS = 3.0

# Reverberation time considered ideal for sound practice (0.8-2.0 s band)
IDEAL_RT60_SECONDS = 1.4

BASE_ROOM_SCORE = 50.0
NOISE_RATING_POINTS = {"excellent": 25.0, "good": 20.0, "fair": 12.0, "poor": 5.0}
RT60_MAX_POINTS = 25.0
RT60_PENALTY_PER_SECOND = 20.0

NO_AUDIO_MESSAGE = "No audio was captured. Please try again."
NO_CLAPS_MESSAGE = "No claps detected. Try clapping louder or closer to the microphone."


@dataclass(frozen=True)
class ClapCapture:
    """One detected clap with its decay and reverberation time."""
    transient: TransientEvent
    impulse_response: np.ndarray = field(compare=False)
    rt60: RT60Result = field(compare=False)


@dataclass(frozen=True)
class ClapTestResult:
    """Outcome of a clap test; ``error`` is set when nothing was usable."""
    captures: List[ClapCapture] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and len(self.captures) > 0


@dataclass(frozen=True)
class RoomProfile:
    """Everything measured about one room."""
    name: str
    overall_score: int
    noise_floor: Optional[NoiseFloorResult]
    clap_captures: List[ClapCapture]
    instrument_profiles: List[InstrumentProfile]
    energy_centres: Dict[EnergyCentre, float]
    created_at: float = 0.0


def analyse_clap_recording(
    recording: np.ndarray,
    sample_rate: float,
    config: Optional[TransientDetectorConfig] = None,
    decay_seconds: float = DECAY_CAPTURE_SECONDS,
) -> ClapTestResult:
    """
    Run the clap test pipeline on a full recording.

    Detects transients, slices the decay after each one and measures its
    RT60. Segments with no samples left after the transient are skipped.

    Args:
        recording: Concatenated capture buffer
        sample_rate: Sample rate in Hz
        config: Transient detector settings
        decay_seconds: Length of decay captured per clap

    Returns:
        ClapTestResult with one capture per usable clap
    """
    recording = np.asarray(recording, dtype=np.float64)
    if recording.size == 0:
        return ClapTestResult(captures=[], error=NO_AUDIO_MESSAGE)

    transients = detect_transients(recording, sample_rate, config)
    if not transients:
        logger.info(f"No transients found in {recording.size / sample_rate:.1f}s of audio")
        return ClapTestResult(captures=[], error=NO_CLAPS_MESSAGE)

    captures = []
    for transient in transients:
        impulse = extract_impulse_response(recording, transient, decay_seconds, sample_rate)
        if impulse.size == 0:
            logger.warning(
                f"Transient at {transient.time_seconds:.2f}s has no decay left, skipping"
            )
            continue

        rt60 = analyse_rt60(impulse, sample_rate)
        logger.debug(
            f"Clap at {transient.time_seconds:.2f}s: RT60={rt60.rt60:.2f}s ({rt60.quality})"
        )
        captures.append(ClapCapture(transient=transient, impulse_response=impulse, rt60=rt60))

    if not captures:
        return ClapTestResult(captures=[], error=NO_CLAPS_MESSAGE)

    logger.info(f"Clap test: {len(captures)} usable clap(s)")
    return ClapTestResult(captures=captures)


def average_rt60(captures: Sequence[ClapCapture]) -> float:
    """Mean RT60 over the captures (0.0 when there are none)."""
    if not captures:
        return 0.0
    return float(np.mean([c.rt60.rt60 for c in captures]))


def compute_overall_score(
    noise_floor: Optional[NoiseFloorResult],
    clap_captures: Sequence[ClapCapture],
) -> int:
    """
    Overall suitability of a room for sound practice (0-100).

    Starts from 50, adds up to 25 for a quiet noise floor and up to 25 for
    a reverberation time close to 1.4 s.
    """
    score = BASE_ROOM_SCORE

    if noise_floor is not None:
        score += NOISE_RATING_POINTS.get(noise_floor.rating, NOISE_RATING_POINTS["poor"])

    if clap_captures:
        deviation = abs(average_rt60(clap_captures) - IDEAL_RT60_SECONDS)
        score += max(0.0, RT60_MAX_POINTS - deviation * RT60_PENALTY_PER_SECOND)

    return max(0, min(100, round_half_up(score)))


def room_energy_centres(noise_floor: Optional[NoiseFloorResult]) -> Dict[EnergyCentre, float]:
    """Per-centre room levels, defaulted where the noise floor has none."""
    return band_levels_or_default(noise_floor)


def build_room_profile(
    name: str,
    noise_floor: Optional[NoiseFloorResult],
    clap_captures: Sequence[ClapCapture] = (),
    instrument_profiles: Sequence[InstrumentProfile] = (),
    created_at: Optional[float] = None,
) -> RoomProfile:
    """Assemble a RoomProfile from the individual measurements."""
    profile = RoomProfile(
        name=name,
        overall_score=compute_overall_score(noise_floor, clap_captures),
        noise_floor=noise_floor,
        clap_captures=list(clap_captures),
        instrument_profiles=list(instrument_profiles),
        energy_centres=room_energy_centres(noise_floor),
        created_at=time.time() if created_at is None else created_at,
    )
    logger.info(f"Room '{name}' scored {profile.overall_score}/100")
    return profile
