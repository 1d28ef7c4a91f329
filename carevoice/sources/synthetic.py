"""Synthetic audio sources for testing and demos."""

from __future__ import annotations

from typing import Iterator
import numpy as np

from carevoice.core.stream import AudioConfig, AudioFrame, AudioSource


class _BufferedSource(AudioSource):
    """Slices a pre-rendered sample buffer into frames."""

    def __init__(
        self,
        data: np.ndarray,
        sample_rate: int,
        frame_duration_ms: int,
    ) -> None:
        self._config = AudioConfig(
            sample_rate=sample_rate,
            frame_duration_ms=frame_duration_ms,
        )
        self._data = data.astype(np.float32)
        self._position = 0
        self._frame_id = 0
        self._closed = False

    @property
    def config(self) -> AudioConfig:
        return self._config

    @property
    def is_closed(self) -> bool:
        return self._closed

    def frames(self) -> Iterator[AudioFrame]:
        samples_per_frame = self._config.frame_size

        while self._position + samples_per_frame <= len(self._data) and not self._closed:
            frame_data = self._data[self._position:self._position + samples_per_frame]
            timestamp_ms = int(self._position / self._config.sample_rate * 1000)

            yield AudioFrame(
                data=frame_data,
                frame_id=self._frame_id,
                timestamp_ms=timestamp_ms,
                config=self._config,
            )

            self._position += samples_per_frame
            self._frame_id += 1

    def close(self) -> None:
        self._closed = True


def _render_samples(sample_rate: int, duration_ms: int) -> int:
    return int(sample_rate * duration_ms / 1000)


class ArraySource(_BufferedSource):
    """Audio source from numpy array. Peaks beyond full scale are normalized."""

    def __init__(
        self,
        data: np.ndarray,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        data = data.astype(np.float32)
        if data.size and (data.max() > 1.0 or data.min() < -1.0):
            data = data / max(abs(data.max()), abs(data.min()))
        super().__init__(data, sample_rate, frame_duration_ms)


class SineSource(_BufferedSource):
    """Generate sine wave audio."""

    def __init__(
        self,
        frequency_hz: float = 440.0,
        amplitude: float = 0.5,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        t = np.arange(_render_samples(sample_rate, duration_ms)) / sample_rate
        data = amplitude * np.sin(2 * np.pi * frequency_hz * t)
        super().__init__(data, sample_rate, frame_duration_ms)


class SquareSource(_BufferedSource):
    """
    Generate a square wave with an exact period in samples.

    The first half of each period is high, the second half low.
    """

    def __init__(
        self,
        period_samples: int = 64,
        amplitude: float = 0.5,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        if period_samples < 2:
            raise ValueError(f"period_samples must be at least 2, got {period_samples}")
        n = np.arange(_render_samples(sample_rate, duration_ms))
        high = (n % period_samples) < period_samples // 2
        data = np.where(high, amplitude, -amplitude)
        super().__init__(data, sample_rate, frame_duration_ms)


class NoiseSource(_BufferedSource):
    """Generate white noise audio."""

    def __init__(
        self,
        amplitude: float = 0.1,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
        seed: int | None = None,
    ) -> None:
        rng = np.random.default_rng(seed)
        data = amplitude * rng.standard_normal(_render_samples(sample_rate, duration_ms))
        super().__init__(np.clip(data, -1.0, 1.0), sample_rate, frame_duration_ms)


class SilenceSource(_BufferedSource):
    """Generate silence."""

    def __init__(
        self,
        duration_ms: int = 1000,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
    ) -> None:
        data = np.zeros(_render_samples(sample_rate, duration_ms), dtype=np.float32)
        super().__init__(data, sample_rate, frame_duration_ms)
