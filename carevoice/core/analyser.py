"""
Byte-resolution analysis node.

Reproduces the behaviour of the browser analysis node the emotion
heuristics were tuned against: a rolling transform window, a smoothed
spectrum quantized to 0-255 over a decibel range, and a waveform
quantized to 0-255 around a midpoint of 128.
"""

from __future__ import annotations

import logging
from typing import Iterator, Protocol, runtime_checkable
import numpy as np
from numpy.typing import NDArray

from carevoice.core.stream import AudioFrame, AudioSource, SampleWindow

logger = logging.getLogger(__name__)

MIN_FFT_SIZE = 32
MAX_FFT_SIZE = 32768


@runtime_checkable
class Analyser(Protocol):
    """What the emotion detector needs from an analysis node."""

    @property
    def sample_rate(self) -> int:
        ...

    @property
    def frequency_bin_count(self) -> int:
        ...

    def capture(self) -> None:
        """Take in whatever audio arrived since the last capture."""
        ...

    def get_byte_frequency_data(self) -> NDArray[np.uint8]:
        ...

    def get_byte_time_domain_data(self) -> NDArray[np.uint8]:
        ...

    def close(self) -> None:
        ...


def blackman_window(size: int) -> NDArray[np.float64]:
    """Blackman window with alpha = 0.16, as used by web audio analysers."""
    alpha = 0.16
    a0 = 0.5 * (1 - alpha)
    a1 = 0.5
    a2 = 0.5 * alpha
    n = np.arange(size, dtype=np.float64)
    return a0 - a1 * np.cos(2 * np.pi * n / size) + a2 * np.cos(4 * np.pi * n / size)


class AnalyserNode:
    """
    Analysis node bound to one audio source.

    Usage:
        node = AnalyserNode(MicrophoneSource(), fft_size=2048)
        node.capture()
        spectrum = node.get_byte_frequency_data()
        waveform = node.get_byte_time_domain_data()
        node.close()

    Both reads describe the window as of the last capture().
    """

    def __init__(
        self,
        source: AudioSource,
        fft_size: int = 2048,
        smoothing_time_constant: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
    ) -> None:
        if fft_size < MIN_FFT_SIZE or fft_size > MAX_FFT_SIZE or fft_size & (fft_size - 1):
            raise ValueError(
                f"fft_size must be a power of two in [{MIN_FFT_SIZE}, {MAX_FFT_SIZE}], got {fft_size}"
            )
        if not (0.0 <= smoothing_time_constant <= 1.0):
            raise ValueError(f"smoothing_time_constant must be in [0, 1], got {smoothing_time_constant}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be lower than max_decibels")

        self._source = source
        self._fft_size = fft_size
        self._smoothing = smoothing_time_constant
        self._min_db = min_decibels
        self._max_db = max_decibels

        self._window = SampleWindow(fft_size)
        self._blackman = blackman_window(fft_size)
        self._smoothed = np.zeros(fft_size // 2, dtype=np.float64)

        # Live sources open their device here so acquisition errors surface at bind time.
        start = getattr(source, "start", None)
        self._owns_source = callable(start)
        if self._owns_source:
            start()
        self._frames: Iterator[AudioFrame] | None = iter(source.frames())
        self._exhausted = False

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def frequency_bin_count(self) -> int:
        return self._fft_size // 2

    @property
    def sample_rate(self) -> int:
        return self._source.config.sample_rate

    @property
    def is_closed(self) -> bool:
        return self._frames is None

    def capture(self) -> None:
        """
        Pull fresh audio into the window.

        Reads until a full window of new samples has arrived, then drains
        frames the source already has queued so the window is as recent as
        possible. A finished source leaves the window as it was.
        """
        if self._frames is None or self._exhausted:
            return

        received = 0
        while received < self._fft_size or self._source_pending() > 0:
            try:
                frame = next(self._frames)
            except StopIteration:
                self._exhausted = True
                logger.debug("Audio source exhausted")
                break
            samples = frame.mono
            self._window.push(samples)
            received += len(samples)

    def _source_pending(self) -> int:
        return getattr(self._source, "pending_frames", 0)

    def get_byte_time_domain_data(self) -> NDArray[np.uint8]:
        """Waveform bytes: 128 is silence, 0 and 255 are full scale."""
        samples = self._window.samples[:self.frequency_bin_count].astype(np.float64)
        scaled = np.floor(128.0 * (1.0 + samples))
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def get_byte_frequency_data(self) -> NDArray[np.uint8]:
        """Smoothed spectrum bytes spanning min_decibels..max_decibels."""
        windowed = self._window.samples.astype(np.float64) * self._blackman
        spectrum = np.fft.rfft(windowed)[:self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self._fft_size

        self._smoothed = self._smoothing * self._smoothed + (1.0 - self._smoothing) * magnitude

        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(self._smoothed)

        scale = 255.0 / (self._max_db - self._min_db)
        scaled = np.floor(scale * (decibels - self._min_db))
        scaled = np.nan_to_num(scaled, nan=0.0, neginf=0.0, posinf=255.0)
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def close(self) -> None:
        """
        Release the frame iterator, and the device if this node started it.

        Safe to call more than once, and before any capture().
        """
        if self._frames is None:
            return
        frames, self._frames = self._frames, None
        close = getattr(frames, "close", None)
        if close is not None:
            close()
        self._window.clear()
        self._smoothed = np.zeros(self.frequency_bin_count, dtype=np.float64)

        # An unstarted generator never runs its finally block; close the device directly.
        if self._owns_source:
            self._source.close()
