"""
Audio stream abstractions.

Frame-based capture: 20-40ms chunks of float32 samples.
No dependency on specific audio libraries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol, runtime_checkable
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class AudioConfig:
    """Audio stream configuration."""
    sample_rate: int = 16000
    channels: int = 1
    frame_duration_ms: int = 20
    dtype: str = "float32"

    @property
    def frame_size(self) -> int:
        """Samples per frame."""
        return int(self.sample_rate * self.frame_duration_ms / 1000)


@dataclass(slots=True)
class AudioFrame:
    """
    Single audio frame.

    Attributes:
        data: Audio samples as float32 numpy array, normalized to [-1.0, 1.0].
            Multi-channel frames are shaped (samples, channels).
        frame_id: Monotonically increasing frame identifier
        timestamp_ms: Timestamp in milliseconds from stream start
        config: Audio configuration
    """
    data: NDArray[np.float32]
    frame_id: int
    timestamp_ms: int
    config: AudioConfig

    @property
    def duration_ms(self) -> int:
        """Frame duration in milliseconds."""
        return self.config.frame_duration_ms

    @property
    def mono(self) -> NDArray[np.float32]:
        """First channel of the frame."""
        if self.data.ndim > 1:
            return self.data[:, 0]
        return self.data

    @property
    def rms(self) -> float:
        """Root mean square energy."""
        if self.data.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(self.data ** 2)))

    @property
    def peak(self) -> float:
        """Peak absolute amplitude."""
        if self.data.size == 0:
            return 0.0
        return float(np.max(np.abs(self.data)))

    @classmethod
    def from_bytes(
        cls,
        raw: bytes,
        frame_id: int,
        timestamp_ms: int,
        config: AudioConfig,
    ) -> AudioFrame:
        """Create frame from raw PCM16 bytes."""
        samples = np.frombuffer(raw, dtype=np.int16).astype(np.float32)
        samples /= 32768.0
        if config.channels > 1:
            samples = samples.reshape(-1, config.channels)
        return cls(data=samples, frame_id=frame_id, timestamp_ms=timestamp_ms, config=config)

    @classmethod
    def silence(cls, frame_id: int, timestamp_ms: int, config: AudioConfig) -> AudioFrame:
        """Create a silent frame."""
        return cls(
            data=np.zeros(config.frame_size, dtype=np.float32),
            frame_id=frame_id,
            timestamp_ms=timestamp_ms,
            config=config,
        )


@runtime_checkable
class AudioSource(Protocol):
    """Protocol for audio sources."""

    @property
    def config(self) -> AudioConfig:
        """Return audio configuration."""
        ...

    def frames(self) -> Iterator[AudioFrame]:
        """Yield audio frames."""
        ...

    def close(self) -> None:
        """Close the source."""
        ...


class SampleWindow:
    """
    Fixed-size window over the most recent samples.

    Starts zero-filled, like an analysis node that has heard only silence.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"window size must be positive, got {size}")
        self._size = size
        self._samples = np.zeros(size, dtype=np.float32)

    @property
    def size(self) -> int:
        return self._size

    def push(self, samples: NDArray[np.float32]) -> None:
        """Append samples, dropping the oldest ones beyond the window size."""
        n = len(samples)
        if n == 0:
            return
        if n >= self._size:
            self._samples = np.asarray(samples[-self._size:], dtype=np.float32).copy()
            return
        self._samples = np.concatenate([self._samples[n:], samples.astype(np.float32)])

    @property
    def samples(self) -> NDArray[np.float32]:
        """Current window contents, oldest first."""
        return self._samples.copy()

    def clear(self) -> None:
        self._samples = np.zeros(self._size, dtype=np.float32)
