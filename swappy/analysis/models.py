"""Core data models for audio analysis."""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class AudioInfo:
    """Description of a decoded buffer."""
    duration: float  # seconds
    sample_rate: int
    channels: int


@dataclass(frozen=True)
class DecodedAudio:
    """A fully decoded sample buffer.

    ``samples`` is float32, shaped ``(channels, n_samples)``, and read-only.
    """
    samples: np.ndarray
    sample_rate: int

    @property
    def channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        return self.n_samples / self.sample_rate

    @property
    def mono(self) -> np.ndarray:
        """The analysis channel (channel 0)."""
        return self.samples[0]

    @property
    def info(self) -> AudioInfo:
        return AudioInfo(
            duration=self.duration,
            sample_rate=self.sample_rate,
            channels=self.channels,
        )


@dataclass
class AnalysisResult:
    """Complete offline analysis of one buffer."""
    info: AudioInfo
    beats: list[float] = field(default_factory=list)  # seconds, increasing
    bpm: float | None = None
    transients: list[float] = field(default_factory=list)  # seconds, increasing
