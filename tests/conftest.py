"""Shared test fixtures for audio analysis tests."""

import io

import numpy as np
import pytest
import soundfile as sf
from fastapi.testclient import TestClient

from swappy.main import app

FRAME = 2048
SR = 22050


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


def constant_frame(amplitude: float, n: int = FRAME) -> np.ndarray:
    """Frame whose energy is exactly ``amplitude ** 2`` (up to float32 rounding)."""
    return np.full(n, amplitude, dtype=np.float32)


def warmup_then_spike(
    base_amplitude: float = 0.1,
    ratio: float = 2.0,
    n: int = FRAME,
) -> list[np.ndarray]:
    """Nine constant frames followed by one whose energy is *ratio* times higher."""
    frames = [constant_frame(base_amplitude, n) for _ in range(9)]
    frames.append(constant_frame(base_amplitude * np.sqrt(ratio), n))
    return frames


def generate_pulse_track(
    bpm: float = 120.0,
    duration_seconds: float = 4.0,
    sr: int = SR,
    amplitude: float = 1.0,
) -> np.ndarray:
    """Full-scale pulses, each one 0.1 s bucket long, starting on every beat.

    At the default rate and tempo every pulse starts exactly on a bucket
    boundary, so each one fills a single energy-map bucket.
    """
    n_samples = int(duration_seconds * sr)
    audio = np.zeros(n_samples, dtype=np.float32)
    pulse = int(sr * 0.1)

    beat_interval = 60.0 / bpm
    time = 0.0
    while time < duration_seconds:
        start = int(round(time * sr))
        end = min(start + pulse, n_samples)
        audio[start:end] = amplitude
        time += beat_interval
    return audio


def wav_bytes(audio: np.ndarray, sr: int = SR) -> bytes:
    """Encode float samples (``(n,)`` or ``(n, channels)``) as a float WAV."""
    buf = io.BytesIO()
    sf.write(buf, audio, sr, format="WAV", subtype="FLOAT")
    return buf.getvalue()


@pytest.fixture
def pulse_wav():
    """4 seconds of 120 BPM pulses as WAV bytes."""
    return wav_bytes(generate_pulse_track())
