"""
Session accumulators for the capture passes.

Each session owns the buffers collected during one listening or recording
pass and is finalised exactly once into an immutable result. The capture
layer feeds frames in at its own cadence; the engine never keeps state
between sessions.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..audio.bands import map_energy_centres
from ..audio.noise_floor import NoiseFloorResult, analyse_noise_floor, compute_rms
from ..audio.notes import frequency_to_note
from ..audio.overtones import detect_overtones
from ..audio.spectrum import average_spectrum
from ..audio.transients import TransientDetectorConfig
from ..data.instruments import get_instrument
from .compatibility import InstrumentProfile, build_instrument_profile
from .room import (
    DECAY_CAPTURE_SECONDS,
    NO_AUDIO_MESSAGE,
    ClapTestResult,
    analyse_clap_recording,
)

logger = logging.getLogger(__name__)


class SessionClosedError(RuntimeError):
    """Raised when a finalised session is fed or finalised again."""


class _Session:
    """Finalise-once bookkeeping shared by all sessions."""

    def __init__(self, sample_rate: int, fft_size: int):
        self.sample_rate = sample_rate
        self.fft_size = fft_size
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"{type(self).__name__} has already been finalised")

    def _close(self) -> None:
        self._check_open()
        self._closed = True


class AmbientListenSession(_Session):
    """
    Collects RMS readings and frequency snapshots of the empty room.

    Example:
        >>> session = AmbientListenSession(44100, 8192)
        >>> for block, frame in capture:
        ...     session.add_frame(block, frame)
        >>> noise_floor = session.finalise()
    """

    def __init__(self, sample_rate: int = 44100, fft_size: int = 8192):
        super().__init__(sample_rate, fft_size)
        self._rms: List[float] = []
        self._snapshots: List[np.ndarray] = []

    def __len__(self) -> int:
        return len(self._rms)

    def add_frame(self, time_domain: Sequence[float], frequency_data: Sequence[float]) -> None:
        """Record one analyser tick."""
        self._check_open()
        self._rms.append(compute_rms(time_domain))
        # Copy: the capture layer may reuse its frame buffer
        self._snapshots.append(np.array(frequency_data, dtype=np.float64))

    def finalise(self) -> Optional[NoiseFloorResult]:
        """Noise floor of the pass, or None if nothing was captured."""
        self._close()
        if not self._rms:
            logger.warning("Ambient listening finished without any frames")
            return None

        result = analyse_noise_floor(self._rms, self._snapshots, self.sample_rate, self.fft_size)
        logger.info(
            f"Noise floor over {len(self._rms)} frames: {result.average_db:.1f} dB ({result.rating})"
        )
        self._rms, self._snapshots = [], []
        return result


class ClapCaptureSession(_Session):
    """
    Collects raw audio blocks during the clap test.

    Args:
        sample_rate: Sample rate in Hz
        detector_config: Transient detector settings
        decay_seconds: Decay captured after each clap
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        detector_config: Optional[TransientDetectorConfig] = None,
        decay_seconds: float = DECAY_CAPTURE_SECONDS,
    ):
        super().__init__(sample_rate, fft_size=0)
        self.detector_config = detector_config
        self.decay_seconds = decay_seconds
        self._blocks: List[np.ndarray] = []
        self.current_peak = 0.0

    @property
    def num_samples(self) -> int:
        return sum(len(b) for b in self._blocks)

    def add_block(self, block: Sequence[float]) -> None:
        """Append a captured block and update the live peak meter."""
        self._check_open()
        data = np.array(block, dtype=np.float64)
        self._blocks.append(data)
        self.current_peak = float(np.max(np.abs(data))) if data.size else 0.0

    def finalise(self) -> ClapTestResult:
        """Concatenate the recording and run the clap test on it."""
        self._close()
        self.current_peak = 0.0

        if not self._blocks:
            return ClapTestResult(captures=[], error=NO_AUDIO_MESSAGE)

        recording = np.concatenate(self._blocks)
        self._blocks = []
        return analyse_clap_recording(
            recording, self.sample_rate, self.detector_config, self.decay_seconds
        )


class InstrumentRecordingSession(_Session):
    """
    Collects frequency frames while an instrument is played.

    Args:
        instrument_id: Library id of the instrument
        sample_rate: Sample rate in Hz
        fft_size: FFT size of the frames
        num_harmonics: Harmonics used by the HPS stage
        instrument_name: Display name, looked up in the library if omitted
    """

    def __init__(
        self,
        instrument_id: str,
        sample_rate: int = 44100,
        fft_size: int = 8192,
        num_harmonics: int = 5,
        instrument_name: Optional[str] = None,
    ):
        super().__init__(sample_rate, fft_size)
        self.instrument_id = instrument_id
        self.num_harmonics = num_harmonics

        if instrument_name is None:
            instrument = get_instrument(instrument_id)
            instrument_name = instrument.name if instrument else instrument_id
        self.instrument_name = instrument_name

        self._frames: List[np.ndarray] = []

    def __len__(self) -> int:
        return len(self._frames)

    def add_frame(self, frequency_data: Sequence[float]) -> None:
        self._check_open()
        self._frames.append(np.array(frequency_data, dtype=np.float64))

    def finalise(
        self,
        noise_floor: Optional[NoiseFloorResult] = None,
        timestamp: Optional[float] = None,
    ) -> Optional[InstrumentProfile]:
        """
        Build the instrument's profile against the room's noise floor.

        Returns None if no frames were captured.
        """
        self._close()
        if not self._frames:
            logger.warning(f"No frames recorded for {self.instrument_id}")
            return None

        spectrum = average_spectrum(self._frames)
        self._frames = []

        overtones = detect_overtones(
            spectrum, self.sample_rate, self.fft_size, self.num_harmonics
        )
        note = frequency_to_note(overtones.fundamental)
        centres = map_energy_centres(spectrum, self.sample_rate, self.fft_size)

        profile = build_instrument_profile(
            instrument_id=self.instrument_id,
            instrument_name=self.instrument_name,
            note_name=note.name if note else "",
            fundamental=overtones.fundamental,
            harmonics=overtones.harmonics,
            overtone_confidence=overtones.confidence,
            energy_centres=centres,
            averaged_spectrum=spectrum,
            noise_floor=noise_floor,
            timestamp=timestamp,
        )
        logger.info(
            f"{self.instrument_name}: fundamental {overtones.fundamental:.1f} Hz, "
            f"{len(overtones.harmonics)} harmonics, score {profile.compatibility_score}"
        )
        return profile
