"""
Practitioner intentions mapped to energy centres.

Each intention targets a set of energy centres; instrument profiles are
ranked by how well they cover those centres.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..audio.bands import ENERGY_CENTRE_ORDER, EnergyCentre
from .compatibility import InstrumentProfile


@dataclass(frozen=True)
class IntentionConfig:
    """Targets and presentation of one intention."""
    key: str
    label: str
    description: str
    primary_centres: Tuple[EnergyCentre, ...]
    frequency_range: Tuple[float, float]
    colour_hue: int


@dataclass(frozen=True)
class Recommendation:
    """An instrument profile ranked for an intention."""
    profile: InstrumentProfile
    relevance: float
    reason: str


INTENTIONS: Dict[str, IntentionConfig] = {
    "grounding": IntentionConfig(
        key="grounding",
        label="Grounding",
        description="Anchoring into the body with deep, resonant tones",
        primary_centres=(EnergyCentre.ROOT, EnergyCentre.SACRAL),
        frequency_range=(32.0, 256.0),
        colour_hue=15,
    ),
    "release": IntentionConfig(
        key="release",
        label="Release",
        description="Letting go of held tension and stagnant energy",
        primary_centres=(EnergyCentre.SACRAL, EnergyCentre.SOLAR_PLEXUS),
        frequency_range=(128.0, 384.0),
        colour_hue=30,
    ),
    "energising": IntentionConfig(
        key="energising",
        label="Energising",
        description="Activating vitality and clear expression",
        primary_centres=(EnergyCentre.SOLAR_PLEXUS, EnergyCentre.THROAT),
        frequency_range=(256.0, 768.0),
        colour_hue=55,
    ),
    "heartOpening": IntentionConfig(
        key="heartOpening",
        label="Heart Opening",
        description="Cultivating compassion and emotional connection",
        primary_centres=(EnergyCentre.HEART, EnergyCentre.THROAT),
        frequency_range=(384.0, 768.0),
        colour_hue=140,
    ),
    "integration": IntentionConfig(
        key="integration",
        label="Integration",
        description="Harmonising all centres into coherent wholeness",
        primary_centres=ENERGY_CENTRE_ORDER,
        frequency_range=(32.0, 4000.0),
        colour_hue=270,
    ),
}

CENTRE_DISPLAY_NAMES: Dict[EnergyCentre, str] = {
    EnergyCentre.ROOT: "Root",
    EnergyCentre.SACRAL: "Sacral",
    EnergyCentre.SOLAR_PLEXUS: "Solar Plexus",
    EnergyCentre.HEART: "Heart",
    EnergyCentre.THROAT: "Throat",
    EnergyCentre.THIRD_EYE: "Third Eye",
    EnergyCentre.CROWN: "Crown",
}

POSITIONING_ADVICE: Dict[str, str] = {
    "grounding": (
        "Place instruments close to the ground. Position the recipient lying down "
        "if possible, with bowls near the feet and lower body."
    ),
    "release": (
        "Position instruments around the torso. Allow space for the recipient to "
        "breathe deeply. Gentle movement between sacral and solar plexus zones works well."
    ),
    "energising": (
        "Elevate instruments to mid-body height. A seated position works well for the "
        "recipient. Direct sound toward the core and throat area."
    ),
    "heartOpening": (
        "Position instruments at chest height. The recipient should be comfortable and "
        "open, supine with arms uncrossed. Place primary instruments near the heart space."
    ),
    "integration": (
        "Distribute instruments at multiple heights around the body. Begin low and "
        "gradually introduce higher-pitched instruments. The recipient should be fully "
        "reclined for whole-body reception."
    ),
}


def get_intention(key: str) -> IntentionConfig:
    """
    Look up an intention by key.

    Raises:
        ValueError: If the intention is not recognised.
    """
    if key not in INTENTIONS:
        valid = ", ".join(INTENTIONS)
        raise ValueError(f"Unknown intention: '{key}'. Valid options are: {valid}")
    return INTENTIONS[key]


def recommend_instruments(
    intention: str,
    profiles: Sequence[InstrumentProfile],
) -> List[Recommendation]:
    """
    Rank instrument profiles for an intention.

    Relevance is the mean coverage of the intention's primary centres. The
    sort is stable, so equally relevant profiles keep their input order.

    Args:
        intention: Intention key, e.g. "grounding"
        profiles: Instrument profiles measured in the room

    Returns:
        Recommendations, most relevant first
    """
    config = get_intention(intention)
    centres = config.primary_centres

    scored = []
    for profile in profiles:
        coverage = profile.centre_coverage
        relevance = sum(coverage.get(c, 0.0) for c in centres) / len(centres)

        strongest = centres[0]
        for centre in centres[1:]:
            if coverage.get(centre, 0.0) > coverage.get(strongest, 0.0):
                strongest = centre

        centre_label = CENTRE_DISPLAY_NAMES[strongest]
        if relevance > 0.5:
            reason = f"Strong {centre_label} resonance, ideal for {config.label.lower()}"
        elif relevance > 0.25:
            reason = f"Moderate {centre_label} support"
        else:
            reason = f"Light contribution to {config.label.lower()} work"

        scored.append(Recommendation(profile=profile, relevance=relevance, reason=reason))

    return sorted(scored, key=lambda r: r.relevance, reverse=True)


def positioning_advice(intention: str) -> str:
    """Where to place instruments and the recipient for an intention."""
    return POSITIONING_ADVICE[get_intention(intention).key]
