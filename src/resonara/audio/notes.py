"""Hz to musical note conversion (12-TET, A4 = 440 Hz)."""

import math
from dataclasses import dataclass
from typing import Optional

from .bands import round_half_up


A4_FREQUENCY = 440.0
A4_MIDI = 69

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


@dataclass(frozen=True)
class NoteInfo:
    """Nearest equal-tempered note to a frequency."""
    name: str               # Display name, e.g. "F#3"
    note_name: str          # Pitch class, e.g. "F#"
    octave: int
    exact_frequency: float  # Frequency of the nearest note (Hz)
    cents: int              # Deviation from that note, -50..+50


def _midi_to_frequency(midi: int) -> float:
    return A4_FREQUENCY * 2 ** ((midi - A4_MIDI) / 12)


def frequency_to_note(hz: float) -> Optional[NoteInfo]:
    """
    Convert a frequency to the nearest note.

    Returns None for zero, negative or non-finite input.
    """
    if not math.isfinite(hz) or hz <= 0:
        return None

    semitones = 12 * math.log2(hz / A4_FREQUENCY)
    rounded = round_half_up(semitones)
    cents = round_half_up((semitones - rounded) * 100)

    midi = A4_MIDI + rounded
    note_name = NOTE_NAMES[midi % 12]
    octave = midi // 12 - 1

    return NoteInfo(
        name=f"{note_name}{octave}",
        note_name=note_name,
        octave=octave,
        exact_frequency=_midi_to_frequency(midi),
        cents=cents,
    )


def note_to_frequency(note_name: str, octave: int) -> float:
    """Frequency of a note name and octave; 0.0 for an unknown name."""
    if note_name not in NOTE_NAMES:
        return 0.0
    midi = (octave + 1) * 12 + NOTE_NAMES.index(note_name)
    return _midi_to_frequency(midi)
