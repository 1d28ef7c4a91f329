"""Tests for audio sources and frames."""

import sys

import numpy as np
import pytest

from carevoice.core.stream import AudioConfig, AudioFrame, AudioSource
from carevoice.sources import (
    ArraySource,
    MicrophoneSource,
    NoiseSource,
    SilenceSource,
    SineSource,
    SquareSource,
)

from conftest import FakeInputStream


class TestAudioFrame:
    def test_from_bytes(self):
        raw = np.array([0, 16384, -32768], dtype=np.int16).tobytes()
        frame = AudioFrame.from_bytes(raw, frame_id=0, timestamp_ms=0, config=AudioConfig())
        assert frame.data.tolist() == [0.0, 0.5, -1.0]
        assert frame.peak == 1.0

    def test_silence(self):
        frame = AudioFrame.silence(0, 0, AudioConfig())
        assert len(frame.data) == 320
        assert frame.rms == 0.0

    def test_mono_takes_first_channel(self):
        data = np.array([[0.1, 0.9], [0.2, 0.8]], dtype=np.float32)
        frame = AudioFrame(data=data, frame_id=0, timestamp_ms=0, config=AudioConfig(channels=2))
        assert frame.mono.tolist() == pytest.approx([0.1, 0.2])


class TestSyntheticSources:
    @pytest.mark.parametrize("source", [
        SineSource(duration_ms=100),
        SquareSource(duration_ms=100),
        NoiseSource(duration_ms=100, seed=1),
        SilenceSource(duration_ms=100),
    ])
    def test_frame_count(self, source):
        assert isinstance(source, AudioSource)
        frames = list(source.frames())
        assert len(frames) == 5
        assert [f.timestamp_ms for f in frames] == [0, 20, 40, 60, 80]
        assert all(len(f.data) == 320 for f in frames)

    def test_array_source_normalizes(self):
        source = ArraySource(np.array([0.0, 2.0, -4.0] * 400))
        data = np.concatenate([f.data for f in source.frames()])
        assert data.min() == -1.0
        assert data.max() == 0.5

    def test_square_period(self):
        source = SquareSource(period_samples=8, amplitude=0.5, duration_ms=20)
        data = next(source.frames()).data
        assert data[:8].tolist() == [0.5] * 4 + [-0.5] * 4

    def test_square_rejects_tiny_period(self):
        with pytest.raises(ValueError):
            SquareSource(period_samples=1)

    def test_close_stops_iteration(self):
        source = SineSource(duration_ms=1000)
        frames = source.frames()
        next(frames)
        source.close()
        assert list(frames) == []


class TestMicrophoneSource:
    def test_start_is_idempotent(self, fake_sounddevice):
        source = MicrophoneSource(sample_rate=16000)
        source.start()
        source.start()

        assert len(FakeInputStream.instances) == 1
        stream = FakeInputStream.instances[0]
        assert stream.started
        assert stream.kwargs["blocksize"] == 320
        assert stream.kwargs["samplerate"] == 16000
        assert stream.kwargs["dtype"] == "float32"

    def test_callback_frames(self, fake_sounddevice):
        source = MicrophoneSource(max_duration_s=0.04)
        source.start()
        block = np.full((320, 1), 0.25, dtype=np.float32)
        source._audio_callback(block, 320, None, None)
        source._audio_callback(block, 320, None, None)

        assert source.pending_frames == 2
        frames = list(source.frames())

        assert [f.frame_id for f in frames] == [0, 1]
        assert frames[0].data.tolist() == [0.25] * 320
        assert FakeInputStream.instances[0].closed

    def test_close_is_idempotent(self, fake_sounddevice):
        source = MicrophoneSource()
        source.start()
        source.close()
        source.close()

        assert not source.is_open
        assert source.pending_frames == 0

    def test_missing_sounddevice(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "sounddevice", None)
        with pytest.raises(ImportError):
            MicrophoneSource().start()

    def test_default_device(self, fake_sounddevice):
        from carevoice.sources import get_default_device
        assert get_default_device()["kind"] == "input"
