"""Audio file I/O."""

from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import librosa
import soundfile as sf


def load_audio(path: Union[str, Path], sample_rate: Optional[int] = 44100) -> Tuple[np.ndarray, int]:
    """
    Load a recording as mono float samples in [-1, 1].

    Args:
        path: Audio file (wav, flac, mp3, ...)
        sample_rate: Resample to this rate, None keeps the file's rate

    Returns:
        (samples, sample_rate)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    audio, sr = librosa.load(path, sr=sample_rate, mono=True)
    return audio.astype(np.float64), int(sr)


def write_audio(path: Union[str, Path], audio: np.ndarray, sample_rate: int) -> None:
    """Write mono samples to a WAV (or any soundfile-supported) file."""
    sf.write(str(path), np.asarray(audio, dtype=np.float64), sample_rate)
