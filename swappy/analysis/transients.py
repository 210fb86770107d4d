"""Streaming transient (onset) detection on fixed-size frames."""

import logging
from collections import deque

import numpy as np

from swappy.audio.frames import frame_energy

logger = logging.getLogger(__name__)

HISTORY_LENGTH = 10
DEFAULT_THRESHOLD = 0.15
DEFAULT_MIN_GAP = 0.05  # seconds between accepted transients
MIN_THRESHOLD = 0.01
MAX_THRESHOLD = 1.0


def clamp_threshold(value: float) -> float:
    return max(MIN_THRESHOLD, min(MAX_THRESHOLD, float(value)))


class TransientDetector:
    """Flag frames whose energy jumps above the recent average.

    Each call to :meth:`process` appends the frame energy to a rolling
    history of the last 10 frames. Once the history is full, the newest
    energy is compared against the mean of the previous 9; a rise of more
    than ``threshold`` (relative) is a transient, unless one was already
    reported less than ``min_gap`` seconds before.

    By default the reported time is the frame *duration*
    (``len(frame) / sample_rate``), not its position in the stream, so a
    fixed-size stream reports the same time for every transient and the
    gap check only passes for the first one. This matches the editor's
    existing marker behavior. Pass ``track_position=True`` to report the
    start time of the frame instead, from a running sample counter.

    Instances are not thread-safe; feed one stream per detector.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        min_gap: float = DEFAULT_MIN_GAP,
        track_position: bool = False,
    ):
        self._threshold = clamp_threshold(threshold)
        self._min_gap = float(min_gap)
        self._track_position = track_position
        self._history: deque[float] = deque(maxlen=HISTORY_LENGTH)
        self._last_transient_time = 0.0
        self._samples_seen = 0

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def min_gap(self) -> float:
        return self._min_gap

    @property
    def history(self) -> tuple[float, ...]:
        """Energy history, oldest first."""
        return tuple(self._history)

    @property
    def last_transient_time(self) -> float:
        return self._last_transient_time

    def set_threshold(self, value: float) -> None:
        """Set the sensitivity threshold, clamped to [0.01, 1.0]."""
        self._threshold = clamp_threshold(value)

    def reset(self) -> None:
        self._history.clear()
        self._last_transient_time = 0.0
        self._samples_seen = 0

    def process(self, frame: np.ndarray, sample_rate: float) -> list[float]:
        """Analyze one frame; return the transient times it produced (0 or 1)."""
        frame_start = self._samples_seen / sample_rate
        self._samples_seen += len(frame)

        self._history.append(frame_energy(frame))
        if len(self._history) < HISTORY_LENGTH:
            return []

        energies = list(self._history)
        current_energy = energies[-1]
        recent_average = sum(energies[:-1]) / (HISTORY_LENGTH - 1)

        if self._track_position:
            current_time = frame_start
        else:
            current_time = len(frame) / sample_rate

        if (current_energy > recent_average * (1 + self._threshold)
                and current_time - self._last_transient_time >= self._min_gap):
            self._last_transient_time = current_time
            logger.debug(f"Transient at {current_time:.3f}s "
                         f"(energy {current_energy:.4g} vs avg {recent_average:.4g})")
            return [current_time]

        return []
