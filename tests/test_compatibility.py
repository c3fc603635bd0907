"""Tests for compatibility scoring, coverage and summaries."""

import numpy as np
import pytest

from resonara.analysis.compatibility import (
    DEFAULT_NOISE_DB,
    band_levels_or_default,
    build_instrument_profile,
    compute_centre_coverage,
    compute_compatibility_score,
    generate_summary,
    ordinal,
)
from resonara.audio.bands import ENERGY_CENTRE_ORDER, EnergyCentre
from resonara.audio.noise_floor import NoiseFloorResult
from resonara.audio.overtones import HarmonicPeak


def centres(level):
    return {c: level for c in ENERGY_CENTRE_ORDER}


def harmonics(n, fundamental=220.0):
    return [HarmonicPeak(fundamental * k, -10.0 - k, k) for k in range(1, n + 1)]


class TestCompatibilityScore:
    def test_maximum(self):
        score = compute_compatibility_score(centres(0.0), centres(-60.0), 1.0, harmonics(6))
        assert score == 100

    def test_minimum(self):
        score = compute_compatibility_score(centres(-100.0), centres(-60.0), 0.0, [])
        assert score == 0

    def test_missing_noise_floor_uses_default(self):
        # 15 dB headroom -> 20, all centres active -> 35, no clarity
        score = compute_compatibility_score(centres(-45.0), None, 0.0, [])
        assert score == 55
        assert compute_compatibility_score(centres(-45.0), {}, 0.0, []) == 55

    def test_activation_needs_more_than_six_db(self):
        at_edge = compute_compatibility_score(centres(-54.0), centres(-60.0), 0.0, [])
        above = compute_compatibility_score(centres(-53.9), centres(-60.0), 0.0, [])
        # 6 dB headroom -> 8 pts, nothing activated
        assert at_edge == 8
        assert above == 43

    def test_clarity_component(self):
        # Confidence 1, 3 harmonics: (0.6 + 0.2) * 25 = 20
        score = compute_compatibility_score(centres(-100.0), centres(-60.0), 1.0, harmonics(3))
        assert score == 20

    def test_integer_in_range_for_random_inputs(self):
        rng = np.random.default_rng(3)
        for _ in range(200):
            instrument = {c: float(rng.uniform(-120, 10)) for c in ENERGY_CENTRE_ORDER}
            noise = {c: float(rng.uniform(-100, -10)) for c in ENERGY_CENTRE_ORDER}
            score = compute_compatibility_score(
                instrument, noise, float(rng.uniform(-0.5, 1.5)), harmonics(int(rng.integers(0, 12)))
            )
            assert isinstance(score, int)
            assert 0 <= score <= 100

    def test_monotonic_in_instrument_level(self):
        scores = [
            compute_compatibility_score(centres(level), centres(-60.0), 0.5, harmonics(2))
            for level in np.linspace(-90, 0, 50)
        ]
        assert all(b >= a for a, b in zip(scores, scores[1:]))

    def test_non_finite_levels(self):
        score = compute_compatibility_score(
            centres(float("-inf")), centres(float("-inf")), float("nan"), []
        )
        assert score == 0


class TestCentreCoverage:
    def test_mapping(self):
        coverage = compute_centre_coverage({
            EnergyCentre.ROOT: -80.0,
            EnergyCentre.SACRAL: -40.0,
            EnergyCentre.SOLAR_PLEXUS: 0.0,
            EnergyCentre.HEART: 12.0,
            EnergyCentre.THROAT: -120.0,
            EnergyCentre.THIRD_EYE: float("-inf"),
        })
        assert coverage[EnergyCentre.ROOT] == 0.0
        assert coverage[EnergyCentre.SACRAL] == pytest.approx(0.5)
        assert coverage[EnergyCentre.SOLAR_PLEXUS] == 1.0
        assert coverage[EnergyCentre.HEART] == 1.0
        assert coverage[EnergyCentre.THROAT] == 0.0
        assert coverage[EnergyCentre.THIRD_EYE] == 0.0
        # Missing centre treated as silent
        assert coverage[EnergyCentre.CROWN] == 0.0


@pytest.mark.parametrize("n,expected", [
    (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
    (11, "11th"), (12, "12th"), (13, "13th"),
    (21, "21st"), (22, "22nd"), (111, "111th"),
])
def test_ordinal(n, expected):
    assert ordinal(n) == expected


class TestGenerateSummary:
    def coverage(self, **values):
        base = {c: 0.0 for c in ENERGY_CENTRE_ORDER}
        for key, value in values.items():
            base[EnergyCentre[key.upper()]] = value
        return base

    def test_excellent_with_rich_overtones(self):
        coverage = self.coverage(heart=0.9, throat=0.8, solar_plexus=0.7, root=0.6)
        summary = generate_summary("Singing Bowl", "A4", 440.0, coverage, 85, harmonics(5))
        assert summary == (
            "Your A4 Singing Bowl resonates beautifully here, producing a rich overtone "
            "series up to the 5th harmonic. The room supports its heart-opening, "
            "expression, empowerment frequencies."
        )

    def test_good_with_clear_harmonics(self):
        coverage = self.coverage(heart=0.7)
        summary = generate_summary("Singing Bowl", "A4", 440.0, coverage, 65, harmonics(3))
        assert summary == (
            "Your A4 Singing Bowl works well in this space with clear harmonics. "
            "It primarily activates heart-opening frequencies at 440 Hz."
        )

    def test_moderate(self):
        summary = generate_summary("Gong", "C2", 65.4, self.coverage(), 45, [])
        assert summary == (
            "Your C2 Gong has moderate resonance here. "
            "The room's acoustic profile limits its energy centre activation."
        )

    def test_challenging(self):
        summary = generate_summary("Gong", "C2", 65.4, self.coverage(), 10, [])
        assert summary.startswith("Your C2 Gong faces some acoustic challenges in this room.")

    def test_without_note_name(self):
        summary = generate_summary("Voice", "", 0.0, self.coverage(), 50, [])
        assert summary.startswith("Your Voice has moderate resonance here.")

    @pytest.mark.parametrize("score,phrase", [
        (80, "resonates beautifully"),
        (79, "works well"),
        (60, "works well"),
        (59, "moderate resonance"),
        (40, "moderate resonance"),
        (39, "acoustic challenges"),
    ])
    def test_score_thresholds(self, score, phrase):
        summary = generate_summary("Gong", "C2", 65.4, self.coverage(), score, [])
        assert phrase in summary

    def test_coverage_at_half_is_not_strong(self):
        summary = generate_summary("Gong", "C2", 65.4, self.coverage(root=0.5), 50, [])
        assert "limits its energy centre activation" in summary


class TestBuildInstrumentProfile:
    def test_profile_fields(self):
        spectrum = np.full(4096, -50.0)
        profile = build_instrument_profile(
            instrument_id="singing-bowl",
            instrument_name="Singing Bowl",
            note_name="A4",
            fundamental=440.0,
            harmonics=harmonics(3, 440.0),
            overtone_confidence=1.0,
            energy_centres=centres(-30.0),
            averaged_spectrum=spectrum,
            timestamp=1000.0,
        )

        assert profile.instrument_id == "singing-bowl"
        assert profile.timestamp == 1000.0
        assert profile.compatibility_score == compute_compatibility_score(
            centres(-30.0), centres(DEFAULT_NOISE_DB), 1.0, harmonics(3, 440.0)
        )
        assert all(v == pytest.approx(50 / 80) for v in profile.centre_coverage.values())
        assert profile.summary.startswith("Your A4 Singing Bowl")

    def test_noise_floor_lowers_score(self):
        kwargs = dict(
            instrument_id="gong",
            instrument_name="Gong",
            note_name="C2",
            fundamental=65.4,
            harmonics=[],
            overtone_confidence=0.5,
            energy_centres=centres(-40.0),
            averaged_spectrum=np.zeros(0),
            timestamp=0.0,
        )
        loud_room = NoiseFloorResult(-30.0, -25.0, -27.0, centres(-45.0), "poor")

        quiet = build_instrument_profile(**kwargs)
        loud = build_instrument_profile(noise_floor=loud_room, **kwargs)
        assert loud.compatibility_score < quiet.compatibility_score


def test_band_levels_or_default_fills_missing():
    partial = NoiseFloorResult(-50.0, -45.0, -47.0, {EnergyCentre.ROOT: -30.0}, "good")
    levels = band_levels_or_default(partial)
    assert levels[EnergyCentre.ROOT] == -30.0
    assert levels[EnergyCentre.CROWN] == DEFAULT_NOISE_DB
    assert band_levels_or_default(None) == centres(DEFAULT_NOISE_DB)
