"""Analysis orchestrator - runs beat and transient analysis over a whole buffer."""

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

from swappy.analysis.beats import detect_beats, estimate_bpm
from swappy.analysis.models import AnalysisResult, DecodedAudio
from swappy.analysis.transients import TransientDetector
from swappy.audio.frames import iter_frames
from swappy.audio.loader import load_audio
from swappy.config import settings

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """Offline pipeline: decode, detect beats, stream frames for transients.

    Transient detection replays the buffer frame by frame through a fresh
    :class:`TransientDetector` that tracks stream position, so markers land
    at real times in the file.
    """

    def __init__(
        self,
        sensitivity: float | None = None,
        peak_threshold: float | None = None,
        relative_threshold: float | None = None,
        frame_size: int | None = None,
    ):
        self.sensitivity = settings.transient_threshold if sensitivity is None else sensitivity
        self.peak_threshold = settings.beat_peak_threshold if peak_threshold is None else peak_threshold
        self.relative_threshold = (
            settings.beat_relative_threshold if relative_threshold is None else relative_threshold
        )
        self.frame_size = frame_size or settings.frame_size

    def analyze_file(self, source: Union[bytes, str, Path, BytesIO]) -> AnalysisResult:
        """Decode and analyze an audio file, buffer or raw bytes."""
        audio = load_audio(source, sr=settings.sample_rate)
        return self.analyze_audio(audio)

    def analyze_audio(self, audio: DecodedAudio) -> AnalysisResult:
        """Analyze an already decoded buffer."""
        logger.info(f"Analyzing {audio.duration:.1f}s of audio at {audio.sample_rate}Hz")

        # Step 1: Beats
        beats = detect_beats(
            audio.mono,
            audio.sample_rate,
            peak_threshold=self.peak_threshold,
            relative_threshold=self.relative_threshold,
        )
        bpm = estimate_bpm(beats)
        logger.info(f"  {len(beats)} beats, bpm={bpm}")

        # Step 2: Transients
        transients = self.stream_transients(audio)
        logger.info(f"  {len(transients)} transients")

        return AnalysisResult(info=audio.info, beats=beats, bpm=bpm, transients=transients)

    def stream_transients(self, audio: DecodedAudio) -> list[float]:
        detector = TransientDetector(
            threshold=self.sensitivity,
            min_gap=settings.min_transient_gap,
            track_position=True,
        )
        transients: list[float] = []
        for frame in iter_frames(audio.mono, self.frame_size):
            transients.extend(detector.process(frame, audio.sample_rate))
        return transients
