"""Tests for the clap test pipeline and room scoring."""

import numpy as np
import pytest

from resonara.analysis.room import (
    NO_AUDIO_MESSAGE,
    NO_CLAPS_MESSAGE,
    ClapCapture,
    analyse_clap_recording,
    average_rt60,
    build_room_profile,
    compute_overall_score,
    room_energy_centres,
)
from resonara.analysis.compatibility import DEFAULT_NOISE_DB
from resonara.audio.bands import ENERGY_CENTRE_ORDER
from resonara.audio.noise_floor import NoiseFloorResult
from resonara.audio.rt60 import RT60Result
from resonara.audio.transients import TransientEvent

from conftest import SAMPLE_RATE, WINDOW


def capture(rt60):
    return ClapCapture(
        transient=TransientEvent(0, 0.0, 0.5, 100.0),
        impulse_response=np.zeros(1),
        rt60=RT60Result(rt60=rt60, decay_curve=np.zeros(1), quality="good"),
    )


def noise_floor(rating):
    return NoiseFloorResult(-55.0, -50.0, -52.0, {}, rating)


class TestAnalyseClapRecording:
    def test_measures_each_clap(self, clap_recording):
        # Claps more than the 3 s decay window apart
        audio = clap_recording(clap_windows=(40, 400), duration_seconds=9.0)
        result = analyse_clap_recording(audio, SAMPLE_RATE)

        assert result.ok
        assert result.error is None
        assert len(result.captures) == 2
        for c in result.captures:
            assert len(c.impulse_response) == 3 * SAMPLE_RATE
            # tau = 0.1 s -> 60 dB in ~0.69 s
            assert 0.5 < c.rt60.rt60 < 0.9

    def test_impulse_starts_at_transient(self, clap_recording):
        audio = clap_recording(clap_windows=(40,))
        result = analyse_clap_recording(audio, SAMPLE_RATE)
        first = result.captures[0]

        assert first.transient.sample_index == 40 * WINDOW
        np.testing.assert_array_equal(first.impulse_response[:10], audio[40 * WINDOW:40 * WINDOW + 10])

    def test_short_decay_window(self, clap_recording):
        audio = clap_recording(clap_windows=(40,))
        result = analyse_clap_recording(audio, SAMPLE_RATE, decay_seconds=1.0)
        assert len(result.captures[0].impulse_response) == SAMPLE_RATE

    def test_empty_recording(self):
        result = analyse_clap_recording(np.zeros(0), SAMPLE_RATE)
        assert not result.ok
        assert result.error == NO_AUDIO_MESSAGE
        assert result.captures == []

    def test_no_claps(self):
        result = analyse_clap_recording(np.zeros(SAMPLE_RATE), SAMPLE_RATE)
        assert not result.ok
        assert result.error == NO_CLAPS_MESSAGE


class TestOverallScore:
    def test_nothing_measured(self):
        assert compute_overall_score(None, []) == 50

    @pytest.mark.parametrize("rating,expected", [
        ("excellent", 75),
        ("good", 70),
        ("fair", 62),
        ("poor", 55),
    ])
    def test_noise_rating_points(self, rating, expected):
        assert compute_overall_score(noise_floor(rating), []) == expected

    def test_ideal_room(self):
        assert compute_overall_score(noise_floor("excellent"), [capture(1.4)]) == 100

    def test_rt60_penalty(self):
        # |0.9 - 1.4| * 20 = 10 -> 15 pts
        assert compute_overall_score(None, [capture(0.9)]) == 65

    def test_far_from_ideal_gets_no_rt60_points(self):
        assert compute_overall_score(noise_floor("poor"), [capture(3.0)]) == 55

    def test_rt60_averaged_over_claps(self):
        captures = [capture(1.0), capture(1.8)]
        assert average_rt60(captures) == pytest.approx(1.4)
        assert compute_overall_score(None, captures) == 75

    def test_average_rt60_empty(self):
        assert average_rt60([]) == 0.0


class TestRoomProfile:
    def test_energy_centres_default(self):
        levels = room_energy_centres(None)
        assert list(levels) == list(ENERGY_CENTRE_ORDER)
        assert all(v == DEFAULT_NOISE_DB for v in levels.values())

    def test_build(self):
        nf = NoiseFloorResult(-55.0, -50.0, -52.0, {c: -70.0 for c in ENERGY_CENTRE_ORDER}, "excellent")
        profile = build_room_profile("Studio", nf, [capture(1.4)], [], created_at=5.0)

        assert profile.name == "Studio"
        assert profile.overall_score == 100
        assert profile.created_at == 5.0
        assert profile.energy_centres == nf.band_levels
        assert len(profile.clap_captures) == 1
        assert profile.instrument_profiles == []
