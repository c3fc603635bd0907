"""
Room and instrument analysis built on the measurement primitives.

- Compatibility scoring and instrument profiles
- Clap test pipeline and overall room score
- Intention-based instrument recommendations
- Session accumulators for capture passes
- JSON reports
"""

from .compatibility import (
    DEFAULT_NOISE_DB,
    SILENCE_FLOOR_DB,
    InstrumentProfile,
    band_levels_or_default,
    build_instrument_profile,
    compute_centre_coverage,
    compute_compatibility_score,
    generate_summary,
)
from .room import (
    ClapCapture,
    ClapTestResult,
    RoomProfile,
    analyse_clap_recording,
    average_rt60,
    build_room_profile,
    compute_overall_score,
    room_energy_centres,
)
from .intentions import (
    INTENTIONS,
    IntentionConfig,
    Recommendation,
    get_intention,
    positioning_advice,
    recommend_instruments,
)
from .session import (
    AmbientListenSession,
    ClapCaptureSession,
    InstrumentRecordingSession,
    SessionClosedError,
)
from .report import load_report, print_summary, save_report, to_dict

__all__ = [
    # Compatibility
    "DEFAULT_NOISE_DB",
    "SILENCE_FLOOR_DB",
    "InstrumentProfile",
    "band_levels_or_default",
    "build_instrument_profile",
    "compute_centre_coverage",
    "compute_compatibility_score",
    "generate_summary",
    # Room
    "ClapCapture",
    "ClapTestResult",
    "RoomProfile",
    "analyse_clap_recording",
    "average_rt60",
    "build_room_profile",
    "compute_overall_score",
    "room_energy_centres",
    # Intentions
    "INTENTIONS",
    "IntentionConfig",
    "Recommendation",
    "get_intention",
    "positioning_advice",
    "recommend_instruments",
    # Sessions
    "AmbientListenSession",
    "ClapCaptureSession",
    "InstrumentRecordingSession",
    "SessionClosedError",
    # Reports
    "load_report",
    "print_summary",
    "save_report",
    "to_dict",
]
