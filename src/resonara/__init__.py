"""
Resonara: acoustic assessment of rooms for sound practice.

Measures a room's noise floor and reverberation, profiles instruments
played in it and scores how well each instrument suits the room.
"""

__version__ = "0.1.0"
