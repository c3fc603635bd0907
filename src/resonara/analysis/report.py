"""
Serialisation of measurement results.

Converts the result value objects to plain JSON-compatible structures and
back. Numeric sequences (spectra, decay curves) round-trip exactly:
float64 values are written with their shortest exact repr and infinities
are kept as JSON ``Infinity`` / ``-Infinity``.
"""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np

from ..audio.bands import EnergyCentre
from ..audio.noise_floor import NoiseFloorResult
from ..audio.overtones import HarmonicPeak
from ..audio.rt60 import RT60Result
from ..audio.transients import TransientEvent
from .compatibility import InstrumentProfile
from .room import ClapCapture, RoomProfile


def to_dict(obj: Any) -> Any:
    """
    Recursively convert result objects to JSON-compatible structures.

    Handles nested dataclasses, energy centre keys and numpy types.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_dict(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, dict):
        return {_key(k): to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_dict(v) for v in obj]
    elif isinstance(obj, np.ndarray):
        return [float(v) for v in obj.astype(np.float64).ravel()]
    elif isinstance(obj, EnergyCentre):
        return obj.key
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    else:
        return obj


def _key(key: Any) -> Any:
    return key.key if isinstance(key, EnergyCentre) else key


def _centre_map(data: Dict[str, float]) -> Dict[EnergyCentre, float]:
    return {EnergyCentre.from_key(k): float(v) for k, v in data.items()}


def _array(values: Any) -> np.ndarray:
    array = np.array(values if values is not None else [], dtype=np.float64)
    array.flags.writeable = False
    return array


def noise_floor_from_dict(data: Dict[str, Any]) -> NoiseFloorResult:
    return NoiseFloorResult(
        average_db=float(data["average_db"]),
        peak_db=float(data["peak_db"]),
        estimated_dba=float(data["estimated_dba"]),
        band_levels=_centre_map(data.get("band_levels", {})),
        rating=data["rating"],
    )


def transient_from_dict(data: Dict[str, Any]) -> TransientEvent:
    return TransientEvent(
        sample_index=int(data["sample_index"]),
        time_seconds=float(data["time_seconds"]),
        peak_amplitude=float(data["peak_amplitude"]),
        energy_ratio=float(data["energy_ratio"]),
    )


def rt60_from_dict(data: Dict[str, Any]) -> RT60Result:
    return RT60Result(
        rt60=float(data["rt60"]),
        decay_curve=_array(data["decay_curve"]),
        quality=data["quality"],
    )


def harmonic_from_dict(data: Dict[str, Any]) -> HarmonicPeak:
    return HarmonicPeak(
        frequency=float(data["frequency"]),
        amplitude=float(data["amplitude"]),
        harmonic_number=int(data["harmonic_number"]),
    )


def clap_capture_from_dict(data: Dict[str, Any]) -> ClapCapture:
    return ClapCapture(
        transient=transient_from_dict(data["transient"]),
        impulse_response=_array(data.get("impulse_response")),
        rt60=rt60_from_dict(data["rt60"]),
    )


def instrument_profile_from_dict(data: Dict[str, Any]) -> InstrumentProfile:
    return InstrumentProfile(
        instrument_id=data["instrument_id"],
        fundamental=float(data["fundamental"]),
        harmonics=[harmonic_from_dict(h) for h in data.get("harmonics", [])],
        energy_centres=_centre_map(data["energy_centres"]),
        compatibility_score=int(data["compatibility_score"]),
        centre_coverage=_centre_map(data["centre_coverage"]),
        summary=data["summary"],
        averaged_spectrum=_array(data.get("averaged_spectrum")),
        timestamp=float(data.get("timestamp", 0.0)),
    )


def room_profile_from_dict(data: Dict[str, Any]) -> RoomProfile:
    noise_floor = data.get("noise_floor")
    return RoomProfile(
        name=data["name"],
        overall_score=int(data["overall_score"]),
        noise_floor=noise_floor_from_dict(noise_floor) if noise_floor else None,
        clap_captures=[clap_capture_from_dict(c) for c in data.get("clap_captures", [])],
        instrument_profiles=[
            instrument_profile_from_dict(p) for p in data.get("instrument_profiles", [])
        ],
        energy_centres=_centre_map(data.get("energy_centres", {})),
        created_at=float(data.get("created_at", 0.0)),
    )


def save_report(profile: RoomProfile, output_path: Union[str, Path]) -> None:
    """
    Save a room profile as JSON.

    Args:
        profile: RoomProfile to save
        output_path: Path for the output JSON file
    """
    with open(output_path, "w") as f:
        json.dump(to_dict(profile), f, indent=2)


def load_report(input_path: Union[str, Path]) -> RoomProfile:
    """Load a room profile written by :func:`save_report`."""
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Report not found: {input_path}")

    with open(path) as f:
        return room_profile_from_dict(json.load(f))


def print_summary(profile: RoomProfile, stream: Optional[Any] = None) -> None:
    """
    Print a formatted summary of a room profile.

    Args:
        profile: RoomProfile to describe
        stream: File-like object (stdout if None)
    """
    def out(line: str = "") -> None:
        print(line, file=stream)

    out("\n" + "=" * 60)
    out(f"ROOM PROFILE: {profile.name}")
    out("=" * 60)
    out(f"\nOverall score: {profile.overall_score}/100")

    out("\n--- NOISE FLOOR ---")
    if profile.noise_floor is not None:
        nf = profile.noise_floor
        out(f"Average: {nf.average_db:.1f} dB (peak {nf.peak_db:.1f} dB, ~{nf.estimated_dba:.1f} dBA)")
        out(f"Rating: {nf.rating}")
    else:
        out("Not measured")

    out("\n--- REVERBERATION ---")
    if profile.clap_captures:
        for capture in profile.clap_captures:
            out(
                f"Clap at {capture.transient.time_seconds:.2f}s: "
                f"RT60 {capture.rt60.rt60:.2f}s ({capture.rt60.quality})"
            )
    else:
        out("No claps captured")

    out("\n--- ENERGY CENTRES (room) ---")
    for centre, level in profile.energy_centres.items():
        out(f"{centre.key:>12}: {level:.1f} dB")

    if profile.instrument_profiles:
        out("\n--- INSTRUMENTS ---")
        for instrument in profile.instrument_profiles:
            out(
                f"{instrument.instrument_id}: {instrument.fundamental:.1f} Hz, "
                f"score {instrument.compatibility_score}/100"
            )
            out(f"  {instrument.summary}")

    out("\n" + "=" * 60)
