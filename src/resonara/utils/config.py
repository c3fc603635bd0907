"""Engine configuration loaded from YAML."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..audio.transients import TransientDetectorConfig


DEFAULT_CONFIG_PATH = "configs/engine.yaml"


@dataclass(frozen=True)
class EngineConfig:
    """Capture metadata and analysis settings shared by the pipeline."""
    sample_rate: int = 44100
    fft_size: int = 8192
    smoothing: float = 0.8
    hop_length: int = 2048
    listen_duration_seconds: float = 15.0
    decay_capture_seconds: float = 3.0
    num_harmonics: int = 5
    transients: TransientDetectorConfig = field(default_factory=TransientDetectorConfig)

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.fft_size <= 0 or self.fft_size % 2:
            raise ValueError(f"fft_size must be a positive even number, got {self.fft_size}")
        if self.num_harmonics < 1:
            raise ValueError(f"num_harmonics must be >= 1, got {self.num_harmonics}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "EngineConfig":
        """
        Build from the ``engine`` section of a loaded config.

        Unknown keys are rejected so typos do not silently fall back to
        defaults.
        """
        engine = dict(config.get("engine", config))
        transients = engine.pop("transients", None) or {}

        known = {f for f in cls.__dataclass_fields__ if f != "transients"}
        unknown = set(engine) - known
        if unknown:
            raise ValueError(f"Unknown engine config keys: {', '.join(sorted(unknown))}")

        return cls(transients=TransientDetectorConfig(**transients), **engine)

    @classmethod
    def from_yaml(cls, config_path: Optional[str] = None) -> "EngineConfig":
        """Load from a YAML file (``configs/engine.yaml`` under the project root by default)."""
        if config_path is None:
            config_path = str(get_project_root() / DEFAULT_CONFIG_PATH)
        return cls.from_dict(load_config(config_path))


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        config = yaml.safe_load(f)

    return config or {}


def get_project_root() -> Path:
    """Get the project root directory."""
    # Assumes this file is at src/resonara/utils/config.py
    return Path(__file__).parent.parent.parent.parent
