"""
Logarithmic sine sweep for impulse response measurement.

A sweep played into the room and recorded back can be deconvolved with
its inverse filter to obtain an impulse response, an alternative to the
clap test when a speaker is available.
"""

import numpy as np
from scipy.signal import fftconvolve


SWEEP_AMPLITUDE = 0.8
FADE_SECONDS = 0.05


def generate_log_sweep(
    start_freq: float,
    end_freq: float,
    duration_seconds: float,
    sample_rate: int = 44100,
) -> np.ndarray:
    """
    Generate an exponential (logarithmic) sine sweep.

    Args:
        start_freq: Starting frequency in Hz
        end_freq: Final frequency in Hz
        duration_seconds: Sweep length
        sample_rate: Sample rate in Hz

    Returns:
        Sweep samples with 50 ms linear fades at both ends
    """
    if start_freq <= 0 or end_freq <= 0 or end_freq == start_freq:
        raise ValueError(
            f"Sweep needs distinct positive frequencies, got {start_freq} -> {end_freq}"
        )
    if duration_seconds <= 0:
        raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

    length = int(np.floor(sample_rate * duration_seconds))
    t = np.arange(length) / sample_rate

    # Frequency ratio per second
    k = (end_freq / start_freq) ** (1 / duration_seconds)
    phase = 2 * np.pi * start_freq * (k ** t - 1) / np.log(k)
    sweep = np.sin(phase) * SWEEP_AMPLITUDE

    # Fade in/out to avoid clicks
    fade_length = min(int(np.floor(sample_rate * FADE_SECONDS)), length // 2)
    if fade_length > 0:
        gain = np.arange(fade_length) / fade_length
        sweep[:fade_length] *= gain
        sweep[length - fade_length:] *= gain[::-1]

    return sweep


def compute_inverse_filter(sweep: np.ndarray) -> np.ndarray:
    """
    Inverse filter for a logarithmic sweep.

    Time-reversed sweep with an exponential amplitude envelope to
    compensate the sweep's energy distribution, peak-normalised.
    """
    sweep = np.asarray(sweep, dtype=np.float64)
    length = len(sweep)
    if length == 0:
        return np.zeros(0, dtype=np.float64)

    inverse = sweep[::-1].copy()
    decay_rate = 6 / length
    inverse *= np.exp(-decay_rate * np.arange(length))

    max_val = np.max(np.abs(inverse))
    if max_val > 0:
        inverse /= max_val

    return inverse


def deconvolve_sweep(recording: np.ndarray, sweep: np.ndarray) -> np.ndarray:
    """
    Recover an impulse response from a recorded sweep.

    Convolves the recording with the sweep's inverse filter and returns the
    part from the main peak onwards, peak-normalised.

    Args:
        recording: Room recording of the sweep
        sweep: The sweep that was played

    Returns:
        Impulse response starting at its direct-sound peak
    """
    recording = np.asarray(recording, dtype=np.float64)
    inverse = compute_inverse_filter(sweep)
    if recording.size == 0 or inverse.size == 0:
        return np.zeros(0, dtype=np.float64)

    response = fftconvolve(recording, inverse, mode="full")

    peak_idx = int(np.argmax(np.abs(response)))
    impulse = response[peak_idx:]

    peak = np.max(np.abs(impulse))
    if peak > 0:
        impulse = impulse / peak

    return impulse
