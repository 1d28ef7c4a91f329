"""Pytest fixtures for carevoice tests."""

from __future__ import annotations

import sys
import types

import numpy as np
import pytest

from carevoice.analyzers.emotion import DetectorConfig, EmotionDetector
from carevoice.sources import SilenceSource

BIN_COUNT = 1024
SAMPLE_RATE = 44100


def square_wave(period: int, length: int = BIN_COUNT, low: int = 64, high: int = 192) -> np.ndarray:
    """Byte waveform, high for the first half of each period."""
    n = np.arange(length)
    return np.where((n % period) < period // 2, high, low).astype(np.uint8)


def flat_wave(length: int = BIN_COUNT) -> np.ndarray:
    return np.full(length, 128, dtype=np.uint8)


class FakeAnalyser:
    """Analysis node that plays back queued byte frames."""

    def __init__(self, sample_rate: int = SAMPLE_RATE, bin_count: int = BIN_COUNT) -> None:
        self._sample_rate = sample_rate
        self._bin_count = bin_count
        self._queue: list[tuple[np.ndarray, np.ndarray]] = []
        self._current = (
            np.zeros(bin_count, dtype=np.uint8),
            flat_wave(bin_count),
        )
        self.captures = 0
        self.closed = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frequency_bin_count(self) -> int:
        return self._bin_count

    def queue(self, energy: int, waveform: np.ndarray | None = None) -> None:
        spectrum = np.full(self._bin_count, energy, dtype=np.uint8)
        if waveform is None:
            waveform = flat_wave(self._bin_count)
        self._queue.append((spectrum, waveform))

    def capture(self) -> None:
        self.captures += 1
        if self._queue:
            self._current = self._queue.pop(0)

    def get_byte_frequency_data(self) -> np.ndarray:
        return self._current[0].copy()

    def get_byte_time_domain_data(self) -> np.ndarray:
        return self._current[1].copy()

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def fake_analyser():
    return FakeAnalyser()


@pytest.fixture
def detector(fake_analyser):
    """Initialized detector reading from fake_analyser."""
    built = []

    def factory(source, fft_size):
        built.append((source, fft_size))
        return fake_analyser

    det = EmotionDetector(DetectorConfig(), analyser_factory=factory)
    det.initialize(SilenceSource(duration_ms=100))
    det.factory_calls = built
    yield det
    det.cleanup()


class FakeInputStream:
    """Stands in for sounddevice.InputStream."""

    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.started = False
        self.closed = False
        FakeInputStream.instances.append(self)

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True


@pytest.fixture
def fake_sounddevice(monkeypatch):
    FakeInputStream.instances = []
    module = types.SimpleNamespace(
        InputStream=FakeInputStream,
        query_devices=lambda kind=None: {"name": "fake mic", "kind": kind},
    )
    monkeypatch.setitem(sys.modules, "sounddevice", module)
    return module
