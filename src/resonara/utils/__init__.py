"""Configuration and file helpers."""

from .config import EngineConfig, get_project_root, load_config
from .audio import load_audio, write_audio

__all__ = ["EngineConfig", "get_project_root", "load_config", "load_audio", "write_audio"]
