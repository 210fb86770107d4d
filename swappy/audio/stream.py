"""Frame assembly for live audio streaming."""

from __future__ import annotations

import numpy as np

from swappy.audio.frames import DEFAULT_FRAME_SIZE


class FrameAssembler:
    """Re-chunk arbitrarily sized audio chunks into fixed-size frames.

    Network clients deliver PCM in whatever chunk size suits them; the
    transient detector expects frames of exactly ``frame_size`` samples in
    strict arrival order. Leftover samples are carried over to the next
    ``append`` call.

    Parameters
    ----------
    frame_size:
        Samples per emitted frame. Defaults to 2048.
    """

    def __init__(self, frame_size: int = DEFAULT_FRAME_SIZE) -> None:
        if frame_size <= 0:
            raise ValueError(f"frame_size must be positive, got {frame_size}")
        self._frame_size = frame_size
        self._pending = np.zeros(frame_size, dtype=np.float32)
        self._length = 0  # how many valid samples are pending
        self._frames_emitted = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, chunk: np.ndarray) -> list[np.ndarray]:
        """Append an audio chunk and return every frame it completes."""
        chunk = np.asarray(chunk, dtype=np.float32).ravel()
        frames: list[np.ndarray] = []

        pos = 0
        n = len(chunk)
        while pos < n:
            take = min(self._frame_size - self._length, n - pos)
            self._pending[self._length:self._length + take] = chunk[pos:pos + take]
            self._length += take
            pos += take

            if self._length == self._frame_size:
                frames.append(self._pending.copy())
                self._length = 0

        self._frames_emitted += len(frames)
        return frames

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def pending(self) -> int:
        """Number of samples waiting for the next frame."""
        return self._length

    @property
    def frames_emitted(self) -> int:
        return self._frames_emitted
