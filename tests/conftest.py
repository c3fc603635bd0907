"""
Shared synthetic signals for the test suite.

Every fixture builds deterministic numpy signals so tests never need
recorded audio.
"""

import numpy as np
import pytest

SAMPLE_RATE = 44100
FFT_SIZE = 8192
N_BINS = FFT_SIZE // 2
WINDOW = 512


@pytest.fixture
def harmonic_spectrum():
    """
    Factory for a dB spectrum with peaks at integer multiples of a bin.

    ``harmonic_spectrum(fundamental_bin, levels)`` places ``levels[k]`` dB
    at bin ``fundamental_bin * (k + 1)`` over a -100 dB background.
    """
    def build(fundamental_bin=40, levels=(-10.0, -14.0, -18.0, -22.0), n_bins=N_BINS):
        spectrum = np.full(n_bins, -100.0)
        for k, level in enumerate(levels):
            spectrum[fundamental_bin * (k + 1)] = level
        return spectrum

    return build


@pytest.fixture
def clap_recording():
    """
    Factory for a recording with exponentially decaying noise bursts.

    Claps start exactly on detector window boundaries so the expected
    sample indices are known.
    """
    def build(
        clap_windows=(40,),
        duration_seconds=4.0,
        decay_tau=0.1,
        clap_amplitude=0.8,
        noise_level=1e-3,
        seed=0,
    ):
        rng = np.random.default_rng(seed)
        n = int(duration_seconds * SAMPLE_RATE)
        audio = rng.normal(scale=noise_level, size=n)

        for window in clap_windows:
            start = window * WINDOW
            length = n - start
            t = np.arange(length) / SAMPLE_RATE
            burst = clap_amplitude * np.exp(-t / decay_tau) * rng.normal(size=length)
            audio[start:] += burst

        return np.clip(audio, -1.0, 1.0)

    return build
