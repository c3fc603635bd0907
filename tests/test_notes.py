"""Tests for Hz/note conversion."""

import math

import pytest

from resonara.audio.notes import NOTE_NAMES, frequency_to_note, note_to_frequency


def test_concert_a():
    note = frequency_to_note(440.0)
    assert note.name == "A4"
    assert note.note_name == "A"
    assert note.octave == 4
    assert note.exact_frequency == 440.0
    assert note.cents == 0


def test_middle_c():
    note = frequency_to_note(261.63)
    assert note.name == "C4"
    assert note.cents == 0
    assert note.exact_frequency == pytest.approx(261.6256, abs=1e-4)


def test_sharp_names():
    assert frequency_to_note(185.0).name == "F#3"
    assert frequency_to_note(466.16).name == "A#4"


@pytest.mark.parametrize("hz,cents", [
    (446.0, 23),
    (434.0, -24),
])
def test_cents_deviation(hz, cents):
    note = frequency_to_note(hz)
    assert note.name == "A4"
    assert note.cents == cents


def test_cents_bounded():
    for hz in range(30, 4000, 7):
        note = frequency_to_note(float(hz))
        assert -50 <= note.cents <= 50


def test_octave_boundary():
    # B3 -> C4 changes octave number
    assert frequency_to_note(246.94).name == "B3"
    assert frequency_to_note(261.63).name == "C4"


@pytest.mark.parametrize("hz", [0.0, -440.0, float("nan"), float("inf")])
def test_invalid_frequency(hz):
    assert frequency_to_note(hz) is None


def test_note_to_frequency():
    assert note_to_frequency("A", 4) == 440.0
    assert note_to_frequency("A", 5) == pytest.approx(880.0)
    assert note_to_frequency("C", 4) == pytest.approx(261.6256, abs=1e-4)


def test_unknown_note_name():
    assert note_to_frequency("H", 4) == 0.0
    assert note_to_frequency("Bb", 4) == 0.0


def test_round_trip_is_exact():
    for midi in range(12, 120):
        hz = 440.0 * 2 ** ((midi - 69) / 12)
        note = frequency_to_note(hz)
        assert note.cents == 0
        assert note_to_frequency(note.note_name, note.octave) == note.exact_frequency


def test_round_trip_from_detuned_input():
    note = frequency_to_note(300.0)
    assert note_to_frequency(note.note_name, note.octave) == note.exact_frequency
    assert math.isclose(note.exact_frequency, 293.6648, abs_tol=1e-3)


def test_note_names_are_sharps():
    assert len(NOTE_NAMES) == 12
    assert all("b" not in name for name in NOTE_NAMES)
