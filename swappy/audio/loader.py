"""Audio decoding utilities."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import librosa
import numpy as np
import soundfile as sf

from swappy.analysis.models import DecodedAudio
from swappy.errors import UnsupportedAudioError

logger = logging.getLogger(__name__)

# Errors raised by libsndfile when the input is not audio.
_DECODE_ERRORS = (sf.SoundFileError, RuntimeError, EOFError, ValueError)


def load_audio(
    source: Union[bytes, str, Path, BytesIO],
    sr: int | None = None,
) -> DecodedAudio:
    """Decode audio bytes, a file path or a BytesIO buffer.

    Parameters
    ----------
    source:
        Encoded audio (raw bytes, a path, or a BytesIO buffer).
    sr:
        Target sample rate. ``None`` keeps the native rate.

    Returns
    -------
    DecodedAudio
        Float32 samples shaped ``(channels, n_samples)``.

    Raises
    ------
    UnsupportedAudioError
        If the input is not a supported audio container/codec.
    """
    # Decode from memory so libsndfile is the only backend involved.
    if isinstance(source, (str, Path)):
        source = Path(source).read_bytes()
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)

    try:
        audio, sample_rate = librosa.load(source, sr=sr, mono=False)
    except _DECODE_ERRORS as e:
        raise UnsupportedAudioError(f"Could not decode audio: {e}") from e

    audio = np.atleast_2d(np.asarray(audio, dtype=np.float32))
    if audio.shape[1] == 0:
        raise UnsupportedAudioError("Decoded audio contains no samples")

    audio.setflags(write=False)
    decoded = DecodedAudio(samples=audio, sample_rate=int(sample_rate))
    logger.info(f"Decoded {decoded.duration:.2f}s of audio, "
                f"{decoded.channels} channel(s) at {decoded.sample_rate}Hz")
    return decoded
