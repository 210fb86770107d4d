"""Audio session: playback graph around the transient detector."""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from swappy.analysis.beats import detect_beats
from swappy.analysis.models import AudioInfo, DecodedAudio
from swappy.analysis.transients import TransientDetector
from swappy.audio.loader import load_audio
from swappy.audio.preprocessing import split_stems
from swappy.config import settings
from swappy.errors import AudioNotLoadedError, NotInitializedError

logger = logging.getLogger(__name__)

TransientCallback = Callable[[float], None]


class _PlaybackSource:
    """One-shot reader over a retained buffer, starting at *offset*."""

    def __init__(self, samples: np.ndarray, offset: int = 0):
        self._samples = samples
        self.position = offset

    @property
    def ended(self) -> bool:
        return self.position >= len(self._samples)

    def read(self, n: int) -> np.ndarray:
        """Return the next *n* samples, zero-padded past the end."""
        chunk = self._samples[self.position:self.position + n]
        self.position += len(chunk)
        if len(chunk) < n:
            frame = np.zeros(n, dtype=np.float32)
            frame[:len(chunk)] = chunk
            return frame
        return np.array(chunk, dtype=np.float32)


class AudioSessionController:
    """Owns one live audio graph: buffer, playback source, gain and analysis tap.

    Frames are delivered either by the playback cadence (:meth:`render_frame`,
    called once per hardware buffer) or directly from a capture pipeline
    (:meth:`process_frame`). Either way the *raw* mono samples go to the
    detector, so output volume never shifts the thresholds. Every detected
    transient is passed synchronously, in order, to the single observer
    registered with :meth:`on_transient`.

    The detector belongs to the session, not the transport: pausing and
    resuming keeps its energy history.
    """

    def __init__(
        self,
        detector: TransientDetector | None = None,
        frame_size: int | None = None,
        sample_rate: int | None = None,
        track_position: bool = False,
    ):
        if detector is None:
            detector = TransientDetector(
                threshold=settings.transient_threshold,
                min_gap=settings.min_transient_gap,
                track_position=track_position,
            )
        self.detector = detector
        self.frame_size = frame_size or settings.frame_size
        self._target_sr = sample_rate if sample_rate is not None else settings.sample_rate

        self._audio: DecodedAudio | None = None
        self._source: _PlaybackSource | None = None
        self._gain = 1.0
        self._playing = False
        self._closed = False
        self._on_transient: TransientCallback | None = None
        self.beat_positions: list[float] = []

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_audio(self, data: bytes) -> AudioInfo:
        """Decode *data* and make it the session's playback buffer.

        Raises
        ------
        NotInitializedError
            If the session has been cleaned up.
        UnsupportedAudioError
            If *data* is not decodable audio.
        """
        if self._closed:
            raise NotInitializedError("Audio session is closed")

        audio = load_audio(data, sr=self._target_sr)

        self._playing = False
        self._audio = audio
        self._source = _PlaybackSource(audio.mono)
        self.beat_positions = []
        logger.info(f"Session loaded {audio.duration:.2f}s at {audio.sample_rate}Hz")
        return audio.info

    @property
    def audio(self) -> DecodedAudio | None:
        return self._audio

    @property
    def sample_rate(self) -> int | None:
        return self._audio.sample_rate if self._audio is not None else self._target_sr

    # ------------------------------------------------------------------
    # Analysis tap
    # ------------------------------------------------------------------

    def on_transient(self, callback: TransientCallback | None) -> None:
        """Register the transient observer; ``None`` deregisters it."""
        self._on_transient = callback

    def set_transient_threshold(self, value: float) -> None:
        self.detector.set_threshold(value)

    def process_frame(self, frame: np.ndarray, sample_rate: int | None = None) -> list[float]:
        """Run one raw mono frame through the detector and notify the observer."""
        if self._closed:
            raise NotInitializedError("Audio session is closed")
        sr = sample_rate if sample_rate is not None else self.sample_rate
        if sr is None:
            raise NotInitializedError("Sample rate unknown: load audio or pass sample_rate")

        transients = self.detector.process(frame, sr)
        for t in transients:
            if self._on_transient is not None:
                self._on_transient(t)
        return transients

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def position(self) -> float:
        """Playback position in seconds."""
        if self._source is None or self._audio is None:
            return 0.0
        return min(self._source.position, self._audio.n_samples) / self._audio.sample_rate

    def play(self) -> None:
        if self._audio is None or self._source is None:
            raise AudioNotLoadedError("No audio loaded")
        if self._playing:
            return
        if self._source.ended:
            self._source = _PlaybackSource(self._audio.mono)
        self._playing = True

    def pause(self) -> None:
        """Stop delivery; the source is rebuilt at the current position."""
        if self._audio is None or self._source is None:
            return
        self._playing = False
        self._source = _PlaybackSource(self._audio.mono, offset=self._source.position)

    def set_volume(self, volume: float) -> None:
        self._gain = max(0.0, min(1.0, float(volume)))

    @property
    def volume(self) -> float:
        return self._gain

    def render_frame(self) -> np.ndarray | None:
        """Deliver one hardware buffer: analyze the raw frame, return gained output.

        Returns ``None`` while paused or stopped. Playback stops after the
        frame that reaches the end of the buffer.
        """
        if not self._playing or self._source is None:
            return None

        frame = self._source.read(self.frame_size)
        self.process_frame(frame, self._audio.sample_rate)

        if self._source.ended:
            self._playing = False
            logger.info("Playback reached end of buffer")
        return frame * self._gain

    # ------------------------------------------------------------------
    # Offline analysis on the retained buffer
    # ------------------------------------------------------------------

    def detect_beats(
        self,
        peak_threshold: float | None = None,
        relative_threshold: float | None = None,
    ) -> list[float]:
        if self._audio is None:
            raise AudioNotLoadedError()

        if peak_threshold is None:
            peak_threshold = settings.beat_peak_threshold
        if relative_threshold is None:
            relative_threshold = settings.beat_relative_threshold

        self.beat_positions = detect_beats(
            self._audio.mono,
            self._audio.sample_rate,
            peak_threshold=peak_threshold,
            relative_threshold=relative_threshold,
        )
        return self.beat_positions

    def split_stems(self, crossover_hz: float | None = None) -> dict[str, np.ndarray]:
        if self._audio is None:
            raise AudioNotLoadedError("No audio file loaded")
        if crossover_hz is None:
            crossover_hz = settings.stem_crossover_hz
        return split_stems(self._audio.mono, self._audio.sample_rate, crossover=crossover_hz)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def cleanup(self) -> None:
        """Release the buffer, source and observer. Safe to call repeatedly."""
        if self._closed:
            return
        self._playing = False
        self._source = None
        self._audio = None
        self._on_transient = None
        self._closed = True
        logger.info("Audio session closed")
