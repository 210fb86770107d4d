"""Offline beat detection from a coarse RMS energy map."""

import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

BUCKET_SECONDS = 0.1
DEFAULT_PEAK_THRESHOLD = 0.75
DEFAULT_RELATIVE_THRESHOLD = 0.5


def bucket_size(sample_rate: float) -> int:
    """Samples per energy-map bucket (0.1 s, rounded down)."""
    size = int(math.floor(sample_rate * BUCKET_SECONDS))
    if size <= 0:
        raise ValueError(f"sample rate {sample_rate} too low for {BUCKET_SECONDS}s buckets")
    return size


def energy_map(samples: np.ndarray, sample_rate: float) -> np.ndarray:
    """RMS energy per 0.1 s bucket.

    The last bucket may be partial; its sum of squares is still divided by
    the nominal bucket size, so a short tail reads quieter than it is.
    """
    samples = np.asarray(samples, dtype=np.float64).ravel()
    bucket = bucket_size(sample_rate)
    n_buckets = math.ceil(len(samples) / bucket)

    padded = np.zeros(n_buckets * bucket, dtype=np.float64)
    padded[:len(samples)] = samples
    sums = np.sum(padded.reshape(n_buckets, bucket) ** 2, axis=1)
    return np.sqrt(sums / bucket).astype(np.float32)


def _is_strict_local_max(energy: np.ndarray, i: int, window: int) -> bool:
    lo, hi = i - window, i + window + 1
    neighbors = np.concatenate([energy[lo:i], energy[i + 1:hi]])
    return bool(np.all(neighbors < energy[i]))


def detect_beats(
    samples: np.ndarray,
    sample_rate: float,
    peak_threshold: float = DEFAULT_PEAK_THRESHOLD,
    relative_threshold: float = DEFAULT_RELATIVE_THRESHOLD,
) -> list[float]:
    """Return beat times (seconds, increasing) for a mono sample buffer.

    A bucket is a beat when it is a strict local maximum within a
    0.1 s half-window (any tie disqualifies it), its RMS exceeds
    *peak_threshold*, and it exceeds *relative_threshold* times the loudest
    bucket of the whole buffer.
    """
    bucket = bucket_size(sample_rate)
    energy = energy_map(samples, sample_rate)
    if len(energy) == 0:
        return []

    window = int(math.floor(BUCKET_SECONDS * sample_rate / bucket))
    global_max = float(np.max(energy))

    beats: list[float] = []
    for i in range(window, len(energy) - window):
        local = float(energy[i])
        if not _is_strict_local_max(energy, i, window):
            continue
        if local > peak_threshold and local > relative_threshold * global_max:
            beats.append((i * bucket) / sample_rate)

    logger.info(f"Detected {len(beats)} beats over {len(energy)} buckets")
    return beats


def estimate_bpm(
    beat_times: list[float],
    min_bpm: float = 40,
    max_bpm: float = 300,
) -> float | None:
    """Estimate tempo from the median of plausible inter-beat intervals."""
    if len(beat_times) < 3:
        return None

    ibis = np.diff(np.asarray(beat_times, dtype=np.float64))
    valid = ibis[(ibis > 60.0 / max_bpm) & (ibis < 60.0 / min_bpm)]
    if len(valid) < 2:
        return None

    median_ibi = float(np.median(valid))
    return round(60.0 / median_ibi, 1)
