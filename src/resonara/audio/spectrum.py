"""
Offline front end producing analyser-style frames from recordings.

Reproduces what a browser AnalyserNode hands the engine during live
capture: Blackman-windowed magnitude spectra scaled by 1/fft_size,
smoothed over time and converted to dB, plus the matching time-domain
blocks. Lets recorded files and synthetic test signals drive the engine
exactly like a live stream.
"""

from typing import List, Sequence

import numpy as np
import librosa


DB_FLOOR = 1e-10


class SpectrumAnalyser:
    """
    Frame generator for a single recording.

    Args:
        sample_rate: Sample rate of the audio in Hz
        fft_size: FFT size (frames carry fft_size // 2 bins)
        smoothing: Exponential smoothing constant between frames (0 = off)
    """

    def __init__(self, sample_rate: int = 44100, fft_size: int = 8192, smoothing: float = 0.8):
        if fft_size <= 0 or fft_size % 2:
            raise ValueError(f"fft_size must be a positive even number, got {fft_size}")
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")

        self.sample_rate = sample_rate
        self.fft_size = fft_size
        self.smoothing = smoothing

    @property
    def frequency_resolution(self) -> float:
        """Hz per bin."""
        return self.sample_rate / self.fft_size

    def _pad(self, audio: np.ndarray) -> np.ndarray:
        if len(audio) < self.fft_size:
            audio = np.pad(audio, (0, self.fft_size - len(audio)))
        return audio

    def frequency_frames(self, audio: Sequence[float], hop_length: int = 2048) -> np.ndarray:
        """
        dB magnitude frames, shape ``(n_frames, fft_size // 2)``.
        """
        y = self._pad(np.asarray(audio, dtype=np.float64))

        stft = librosa.stft(
            y,
            n_fft=self.fft_size,
            hop_length=hop_length,
            window="blackman",
            center=False,
        )
        magnitude = np.abs(stft[: self.fft_size // 2]).T / self.fft_size

        # Smooth each bin over time like the live analyser
        if self.smoothing > 0:
            smoothed = np.empty_like(magnitude)
            previous = np.zeros(magnitude.shape[1])
            for i, frame in enumerate(magnitude):
                previous = self.smoothing * previous + (1 - self.smoothing) * frame
                smoothed[i] = previous
            magnitude = smoothed

        return 20 * np.log10(np.maximum(magnitude, DB_FLOOR))

    def time_domain_frames(self, audio: Sequence[float], hop_length: int = 2048) -> np.ndarray:
        """
        Time-domain blocks of fft_size samples, shape ``(n_frames, fft_size)``.

        Uses the same framing as :meth:`frequency_frames`, so row ``i`` of
        both arrays describes the same stretch of audio.
        """
        y = self._pad(np.asarray(audio, dtype=np.float64))
        frames = librosa.util.frame(y, frame_length=self.fft_size, hop_length=hop_length)
        return np.ascontiguousarray(frames.T)


def average_spectrum(frames: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Mean dB spectrum over a set of frames.

    Frames of different lengths are truncated to the shortest one.
    Returns an empty array when no frames are given.
    """
    if len(frames) == 0:
        return np.zeros(0, dtype=np.float64)

    length = min(len(frame) for frame in frames)
    stacked = np.stack([np.asarray(frame, dtype=np.float64)[:length] for frame in frames])
    averaged = np.mean(stacked, axis=0)
    averaged.flags.writeable = False
    return averaged


def split_blocks(audio: Sequence[float], block_size: int = 4096) -> List[np.ndarray]:
    """Chop a recording into capture-sized blocks (last block may be short)."""
    y = np.asarray(audio, dtype=np.float64)
    return [y[start:start + block_size] for start in range(0, len(y), block_size)]
