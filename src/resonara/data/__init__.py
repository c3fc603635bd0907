"""Static reference data."""

from .instruments import INSTRUMENTS, InstrumentDef, get_instrument

__all__ = ["INSTRUMENTS", "InstrumentDef", "get_instrument"]
