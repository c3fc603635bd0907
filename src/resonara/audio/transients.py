"""
Transient detection for the clap test.

Finds sudden onset events (claps, strikes) in a raw recording and slices
out the decay that follows each one for reverberation analysis.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class TransientEvent:
    """A detected onset."""
    sample_index: int          # Start of the window that fired
    time_seconds: float        # sample_index / sample_rate
    peak_amplitude: float      # Peak |sample| inside the window
    energy_ratio: float        # Window energy over background energy


@dataclass(frozen=True)
class TransientDetectorConfig:
    """Detector settings."""
    threshold_db: float = 6.0            # Energy rise over background to fire
    min_amplitude: float = 0.1           # Quieter peaks are ignored
    min_interval_seconds: float = 0.3    # Minimum spacing of recorded events
    window_size: int = 512               # Analysis window in samples

    def __post_init__(self):
        if self.window_size <= 0:
            raise ValueError(f"window_size must be positive, got {self.window_size}")
        if self.min_interval_seconds < 0:
            raise ValueError(
                f"min_interval_seconds must be >= 0, got {self.min_interval_seconds}"
            )


# Number of preceding windows averaged for the background estimate
BACKGROUND_WINDOWS = 20


def detect_transients(
    buffer: Sequence[float],
    sample_rate: float,
    config: Optional[TransientDetectorConfig] = None,
) -> List[TransientEvent]:
    """
    Detect transients in a recording.

    The buffer is cut into non-overlapping windows; a window fires when its
    mean-squared energy exceeds the mean of the preceding windows by
    ``threshold_db`` and the previous recorded event is at least
    ``min_interval_seconds`` away. Windows whose peak is below
    ``min_amplitude`` are skipped without moving the interval gate, so a
    louder event right after a quiet false positive can still be recorded.

    Args:
        buffer: Full mono recording
        sample_rate: Sample rate in Hz
        config: Detector settings (defaults if None)

    Returns:
        Events in chronological order; empty if no claps were found
    """
    if config is None:
        config = TransientDetectorConfig()

    audio = np.asarray(buffer, dtype=np.float64)
    window_size = config.window_size
    min_interval_samples = int(math.floor(config.min_interval_seconds * sample_rate))

    num_windows = len(audio) // window_size
    if num_windows == 0:
        return []

    windows = audio[:num_windows * window_size].reshape(num_windows, window_size)
    energies = np.mean(windows ** 2, axis=1)

    # Running background: mean of the preceding avg_window windows
    avg_window = min(BACKGROUND_WINDOWS, num_windows)
    cumulative = np.concatenate(([0.0], np.cumsum(energies)))
    threshold_linear = 10 ** (config.threshold_db / 10)
    last_detected = -min_interval_samples

    events: List[TransientEvent] = []
    for w in range(avg_window, num_windows):
        background = (cumulative[w] - cumulative[w - avg_window]) / avg_window
        ratio = energies[w] / background if background > 0 else 0.0
        sample_index = w * window_size

        if ratio > threshold_linear and sample_index - last_detected >= min_interval_samples:
            peak = float(np.max(np.abs(windows[w])))

            # Amplitude gate for quiet noise spikes
            if peak < config.min_amplitude:
                continue

            events.append(TransientEvent(
                sample_index=sample_index,
                time_seconds=sample_index / sample_rate,
                peak_amplitude=peak,
                energy_ratio=float(ratio),
            ))
            last_detected = sample_index

    return events


def extract_impulse_response(
    buffer: Sequence[float],
    transient: TransientEvent,
    duration_seconds: float,
    sample_rate: float,
) -> np.ndarray:
    """
    Slice the decay that follows a transient.

    Returns an empty array when the transient sits at the very end of the
    buffer; callers should treat that segment as unusable.
    """
    audio = np.asarray(buffer, dtype=np.float64)
    start = transient.sample_index
    length = min(int(math.floor(duration_seconds * sample_rate)), len(audio) - start)

    if length <= 0:
        return np.zeros(0, dtype=np.float64)

    segment = audio[start:start + length].copy()
    segment.flags.writeable = False
    return segment
