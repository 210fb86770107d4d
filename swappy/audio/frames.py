"""Frame primitives shared by the streaming and offline paths."""

from collections.abc import Iterator

import numpy as np

DEFAULT_FRAME_SIZE = 2048


def frame_energy(frame: np.ndarray) -> float:
    """Mean of squared sample values."""
    frame = np.asarray(frame, dtype=np.float64)
    return float(np.dot(frame, frame) / len(frame))


def iter_frames(
    samples: np.ndarray,
    frame_size: int = DEFAULT_FRAME_SIZE,
    pad: bool = True,
) -> Iterator[np.ndarray]:
    """Yield contiguous, non-overlapping frames of *samples*.

    The final partial frame is zero-padded to ``frame_size`` when *pad* is
    true (what an audio device delivers past the end of a buffer), and
    dropped otherwise.
    """
    if frame_size <= 0:
        raise ValueError(f"frame_size must be positive, got {frame_size}")

    samples = np.asarray(samples, dtype=np.float32).ravel()
    n_full = len(samples) // frame_size
    for k in range(n_full):
        yield samples[k * frame_size:(k + 1) * frame_size]

    tail = samples[n_full * frame_size:]
    if pad and len(tail) > 0:
        frame = np.zeros(frame_size, dtype=np.float32)
        frame[:len(tail)] = tail
        yield frame
