"""Tests for decoding, framing and frame assembly."""

import numpy as np
import pytest

from swappy.audio.frames import frame_energy, iter_frames
from swappy.audio.loader import load_audio
from swappy.audio.preprocessing import split_stems
from swappy.audio.stream import FrameAssembler
from swappy.errors import UnsupportedAudioError
from tests.conftest import SR, wav_bytes


# ----------------------------------------------------------------------
# Frames
# ----------------------------------------------------------------------

def test_frame_energy_is_mean_square():
    assert frame_energy(np.array([1.0, -1.0, 0.0, 0.0])) == pytest.approx(0.5)
    assert frame_energy(np.full(2048, 0.5, dtype=np.float32)) == pytest.approx(0.25)


def test_iter_frames_pads_tail():
    samples = np.arange(5000, dtype=np.float32)
    frames = list(iter_frames(samples, 2048))

    assert [len(f) for f in frames] == [2048, 2048, 2048]
    np.testing.assert_array_equal(frames[1], samples[2048:4096])
    np.testing.assert_array_equal(frames[2][:904], samples[4096:])
    assert not frames[2][904:].any()


def test_iter_frames_can_drop_tail():
    frames = list(iter_frames(np.zeros(5000), 2048, pad=False))
    assert len(frames) == 2


def test_iter_frames_rejects_bad_size():
    with pytest.raises(ValueError):
        list(iter_frames(np.zeros(10), 0))


# ----------------------------------------------------------------------
# FrameAssembler
# ----------------------------------------------------------------------

def test_assembler_carries_samples_across_chunks():
    samples = np.arange(2100, dtype=np.float32)
    assembler = FrameAssembler(frame_size=2048)

    assert assembler.append(samples[:1000]) == []
    assert assembler.append(samples[1000:2000]) == []
    frames = assembler.append(samples[2000:])

    assert len(frames) == 1
    np.testing.assert_array_equal(frames[0], samples[:2048])
    assert assembler.pending == 52
    assert assembler.frames_emitted == 1


def test_assembler_splits_large_chunk():
    samples = np.arange(5000, dtype=np.float32)
    assembler = FrameAssembler(frame_size=2048)
    frames = assembler.append(samples)

    assert len(frames) == 2
    np.testing.assert_array_equal(frames[1], samples[2048:4096])
    assert assembler.pending == 904

    rest = assembler.append(np.zeros(2048 - 904, dtype=np.float32))
    assert len(rest) == 1
    np.testing.assert_array_equal(rest[0][:904], samples[4096:])
    assert assembler.pending == 0
    assert assembler.frames_emitted == 3


def test_assembler_frames_are_independent_copies():
    assembler = FrameAssembler(frame_size=4)
    first = assembler.append(np.ones(4))[0]
    assembler.append(np.zeros(4))
    assert first.tolist() == [1.0, 1.0, 1.0, 1.0]


# ----------------------------------------------------------------------
# Loader
# ----------------------------------------------------------------------

def test_load_mono_wav_bytes():
    audio = np.linspace(-0.5, 0.5, SR, dtype=np.float32)
    decoded = load_audio(wav_bytes(audio))

    assert decoded.sample_rate == SR
    assert decoded.channels == 1
    assert decoded.duration == pytest.approx(1.0)
    np.testing.assert_allclose(decoded.mono, audio, atol=1e-6)
    assert decoded.info.channels == 1


def test_load_stereo_keeps_channels():
    left = np.full(1000, 0.25, dtype=np.float32)
    right = np.full(1000, -0.75, dtype=np.float32)
    decoded = load_audio(wav_bytes(np.stack([left, right], axis=1)))

    assert decoded.channels == 2
    assert decoded.samples.shape == (2, 1000)
    np.testing.assert_allclose(decoded.mono, left)


def test_load_from_path(tmp_path):
    path = tmp_path / "clip.wav"
    path.write_bytes(wav_bytes(np.zeros(SR // 2, dtype=np.float32)))

    decoded = load_audio(path)
    assert decoded.duration == pytest.approx(0.5)


def test_load_resamples_when_asked():
    decoded = load_audio(wav_bytes(np.zeros(SR, dtype=np.float32)), sr=11025)
    assert decoded.sample_rate == 11025
    assert decoded.n_samples == pytest.approx(11025, abs=2)


def test_decoded_samples_are_read_only():
    decoded = load_audio(wav_bytes(np.zeros(100, dtype=np.float32)))
    with pytest.raises(ValueError):
        decoded.samples[0, 0] = 1.0


def test_load_garbage_raises_unsupported():
    with pytest.raises(UnsupportedAudioError):
        load_audio(b"definitely not audio" * 50)


def test_unsupported_audio_error_is_a_value_error():
    with pytest.raises(ValueError):
        load_audio(b"")


# ----------------------------------------------------------------------
# Stem split
# ----------------------------------------------------------------------

def _rms(x):
    return float(np.sqrt(np.mean(np.square(x))))


def test_split_stems_separates_bands():
    t = np.arange(SR) / SR
    low = np.sin(2 * np.pi * 50 * t).astype(np.float32)
    high = np.sin(2 * np.pi * 2000 * t).astype(np.float32)
    tail = slice(SR // 2, None)  # skip the filter warm-up

    stems = split_stems(low, SR, crossover=200.0)
    assert set(stems) == {"vocals", "instrumental"}
    assert _rms(stems["instrumental"][tail]) > 0.6
    assert _rms(stems["vocals"][tail]) < 0.05

    stems = split_stems(high, SR, crossover=200.0)
    assert _rms(stems["vocals"][tail]) > 0.6
    assert _rms(stems["instrumental"][tail]) < 0.05


def test_split_stems_rejects_crossover_above_nyquist():
    with pytest.raises(ValueError):
        split_stems(np.zeros(100, dtype=np.float32), 1000, crossover=600.0)
