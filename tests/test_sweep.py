"""Tests for sweep generation and deconvolution."""

import numpy as np
import pytest

from resonara.audio.sweep import compute_inverse_filter, deconvolve_sweep, generate_log_sweep

SR = 8000


def test_sweep_shape_and_level():
    sweep = generate_log_sweep(50, 2000, 1.0, SR)
    assert len(sweep) == SR
    assert np.max(np.abs(sweep)) <= 0.8 + 1e-12


def test_sweep_fades():
    sweep = generate_log_sweep(50, 2000, 1.0, SR)
    fade = int(SR * 0.05)
    assert sweep[0] == 0.0
    assert np.max(np.abs(sweep[:fade // 10])) < 0.1
    assert np.max(np.abs(sweep[-fade // 10:])) < 0.1


@pytest.mark.parametrize("start,end,duration", [
    (0, 1000, 1.0),
    (100, -5, 1.0),
    (100, 100, 1.0),
    (100, 1000, 0.0),
])
def test_invalid_sweep(start, end, duration):
    with pytest.raises(ValueError):
        generate_log_sweep(start, end, duration, SR)


def test_inverse_filter_normalised():
    inverse = compute_inverse_filter(generate_log_sweep(50, 2000, 1.0, SR))
    assert np.max(np.abs(inverse)) == pytest.approx(1.0)
    assert compute_inverse_filter(np.zeros(0)).size == 0


def test_deconvolve_starts_at_peak():
    sweep = generate_log_sweep(50, 3000, 1.0, SR)
    recording = np.concatenate([np.zeros(200), sweep, np.zeros(SR // 2)])

    impulse = deconvolve_sweep(recording, sweep)

    assert abs(impulse[0]) == pytest.approx(1.0)
    assert np.max(np.abs(impulse)) == pytest.approx(1.0)
    assert 0 < len(impulse) < len(recording) + len(sweep)


def test_deconvolve_tracks_recording_delay():
    sweep = generate_log_sweep(50, 3000, 1.0, SR)
    early = deconvolve_sweep(np.concatenate([sweep, np.zeros(SR)]), sweep)
    late = deconvolve_sweep(np.concatenate([np.zeros(300), sweep, np.zeros(SR - 300)]), sweep)

    # Same total length, so a later peak leaves a shorter tail
    assert len(early) - len(late) == 300


def test_deconvolve_empty():
    assert deconvolve_sweep(np.zeros(0), generate_log_sweep(50, 2000, 0.5, SR)).size == 0
