"""Static instrument library for the instrument profiler."""

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class InstrumentDef:
    """An instrument a practitioner can profile."""
    id: str
    name: str
    typical_range: Tuple[float, float]   # Typical frequency range (Hz)
    category: str                        # "bowl", "percussion", "string", "wind", "voice"


INSTRUMENTS: List[InstrumentDef] = [
    InstrumentDef("singing-bowl", "Singing Bowl", (150.0, 800.0), "bowl"),
    InstrumentDef("crystal-bowl", "Crystal Bowl", (200.0, 900.0), "bowl"),
    InstrumentDef("gong", "Gong", (40.0, 300.0), "percussion"),
    InstrumentDef("tuning-fork", "Tuning Fork", (128.0, 4096.0), "percussion"),
    InstrumentDef("monochord", "Monochord", (60.0, 400.0), "string"),
    InstrumentDef("didgeridoo", "Didgeridoo", (50.0, 150.0), "wind"),
    InstrumentDef("voice", "Voice", (80.0, 1200.0), "voice"),
    InstrumentDef("frame-drum", "Frame Drum", (60.0, 300.0), "percussion"),
    InstrumentDef("chimes", "Chimes", (500.0, 4000.0), "percussion"),
    InstrumentDef("tingsha", "Tingsha", (2000.0, 4500.0), "percussion"),
]


def get_instrument(instrument_id: str) -> Optional[InstrumentDef]:
    """Find an instrument by id, None if it is not in the library."""
    for instrument in INSTRUMENTS:
        if instrument.id == instrument_id:
            return instrument
    return None
