"""
Real-time microphone audio source.

Requires: pip install sounddevice
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterator
from collections import deque
from threading import Event
import numpy as np

from carevoice.core.stream import AudioConfig, AudioFrame, AudioSource

logger = logging.getLogger(__name__)


def _import_sounddevice():
    try:
        import sounddevice as sd
    except ImportError:
        raise ImportError(
            "sounddevice is required for microphone input.\n"
            "Install with: pip install sounddevice"
        )
    return sd


class MicrophoneSource(AudioSource):
    """
    Real-time microphone input using sounddevice.

    Usage:
        source = MicrophoneSource()
        source.start()          # raises if the device cannot be opened

        for frame in source.frames():
            ...

        source.close()

    The sounddevice callback thread only appends to a bounded queue;
    frames() hands them out on the caller's thread.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        frame_duration_ms: int = 20,
        channels: int = 1,
        device: int | str | None = None,
        max_duration_s: float | None = None,
        buffer_size: int = 100,
    ) -> None:
        """
        Initialize microphone source.

        Args:
            sample_rate: Audio sample rate (default 16kHz)
            frame_duration_ms: Frame duration in ms (default 20ms)
            channels: Number of audio channels (default 1 = mono)
            device: Audio device index or name (None = default)
            max_duration_s: Maximum recording duration (None = unlimited)
            buffer_size: Frames held before the oldest are dropped
        """
        self._config = AudioConfig(
            sample_rate=sample_rate,
            frame_duration_ms=frame_duration_ms,
            channels=channels,
        )
        self._device = device
        self._max_duration_s = max_duration_s

        self._frame_buffer: deque[np.ndarray] = deque(maxlen=buffer_size)
        self._frame_id = 0
        self._timestamp_ms = 0
        self._stop_event = Event()
        self._stream = None

    @property
    def config(self) -> AudioConfig:
        return self._config

    @property
    def pending_frames(self) -> int:
        """Frames captured but not yet handed out."""
        return len(self._frame_buffer)

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def _audio_callback(self, indata, frames, time_info, status) -> None:
        """Called by sounddevice for each audio block."""
        if status:
            logger.warning(f"Audio status: {status}")

        audio_data = indata[:, 0].copy().astype(np.float32)
        self._frame_buffer.append(audio_data)

    def start(self) -> None:
        """
        Open and start the input stream. Idempotent.

        Raises:
            ImportError: sounddevice is not installed
            sounddevice.PortAudioError: the device could not be opened
        """
        if self._stream is not None:
            return

        sd = _import_sounddevice()
        self._stop_event.clear()

        stream = sd.InputStream(
            samplerate=self._config.sample_rate,
            blocksize=self._config.frame_size,
            channels=self._config.channels,
            dtype=self._config.dtype,
            device=self._device,
            callback=self._audio_callback,
        )
        stream.start()
        self._stream = stream
        logger.info(
            f"Microphone started: {self._config.sample_rate}Hz, "
            f"{self._config.channels}ch, device={self._device}"
        )

    def frames(self) -> Iterator[AudioFrame]:
        """
        Yield audio frames from microphone.

        This is a blocking generator that yields frames as they arrive.
        Call close() to stop.
        """
        self.start()

        max_ms = int(self._max_duration_s * 1000) if self._max_duration_s else None

        try:
            while not self._stop_event.is_set():
                if self._frame_buffer:
                    frame_data = self._frame_buffer.popleft()

                    frame = AudioFrame(
                        data=frame_data,
                        frame_id=self._frame_id,
                        timestamp_ms=self._timestamp_ms,
                        config=self._config,
                    )

                    yield frame

                    self._frame_id += 1
                    self._timestamp_ms += self._config.frame_duration_ms

                    if max_ms and self._timestamp_ms >= max_ms:
                        break
                else:
                    time.sleep(0.001)
        finally:
            self.close()

    def close(self) -> None:
        """Stop recording and clean up. Safe to call more than once."""
        self._stop_event.set()

        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()
            logger.info("Microphone stopped")
        self._frame_buffer.clear()


def list_audio_devices() -> Any:
    """Return the devices sounddevice can see."""
    sd = _import_sounddevice()
    return sd.query_devices()


def get_default_device() -> dict:
    """Get default input device info."""
    sd = _import_sounddevice()
    return dict(sd.query_devices(kind='input'))
