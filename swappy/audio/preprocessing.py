"""Audio preprocessing utilities."""

from __future__ import annotations

import numpy as np
from scipy.signal import butter, sosfilt


def high_pass_filter(
    audio: np.ndarray,
    sr: int,
    cutoff: float = 200.0,
) -> np.ndarray:
    """Apply a 4th-order Butterworth high-pass filter."""
    sos = butter(N=4, Wn=cutoff, btype="high", fs=sr, output="sos")
    return sosfilt(sos, audio).astype(np.float32)


def low_pass_filter(
    audio: np.ndarray,
    sr: int,
    cutoff: float = 200.0,
) -> np.ndarray:
    """Apply a 4th-order Butterworth low-pass filter."""
    sos = butter(N=4, Wn=cutoff, btype="low", fs=sr, output="sos")
    return sosfilt(sos, audio).astype(np.float32)


def split_stems(
    audio: np.ndarray,
    sr: int,
    crossover: float = 200.0,
) -> dict[str, np.ndarray]:
    """Split mono audio into two bands around *crossover* Hz.

    This is a plain crossover, not source separation: ``"vocals"`` is the
    band above the crossover and ``"instrumental"`` the band below it.

    Raises
    ------
    ValueError
        If *crossover* is not strictly between 0 and the Nyquist frequency.
    """
    nyquist = sr / 2.0
    if not 0 < crossover < nyquist:
        raise ValueError(f"crossover must be in (0, {nyquist}) Hz, got {crossover}")

    audio = np.asarray(audio, dtype=np.float32)
    return {
        "vocals": high_pass_filter(audio, sr, cutoff=crossover),
        "instrumental": low_pass_filter(audio, sr, cutoff=crossover),
    }
