"""
Vocal emotion detector.

Estimates an emotional state from pitch, energy and speech-rate features
sampled off a live audio stream. The caller polls; the detector keeps a
short rolling history and compares each reading against it.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable
import numpy as np
from numpy.typing import NDArray

from carevoice.core.analysis import AudioFeatures, Emotion, EmotionAnalysis
from carevoice.core.analyser import Analyser, AnalyserNode
from carevoice.core.stream import AudioSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DetectorConfig:
    """Emotion detector configuration."""
    fft_size: int = 2048
    history_size: int = 10
    fallback_sample_rate: int = 44100
    energy_gate: float = 20.0
    pitch_gate: float = 50.0

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise ValueError(f"history_size must be positive, got {self.history_size}")
        if self.fallback_sample_rate <= 0:
            raise ValueError(f"fallback_sample_rate must be positive, got {self.fallback_sample_rate}")


AnalyserFactory = Callable[[AudioSource, int], Analyser]


def _default_analyser(source: AudioSource, fft_size: int) -> Analyser:
    return AnalyserNode(source, fft_size=fft_size)


def estimate_energy(spectrum: NDArray[np.uint8]) -> float:
    """Mean byte magnitude of the spectrum, 0-255."""
    if len(spectrum) == 0:
        return 0.0
    return float(np.mean(spectrum, dtype=np.float64))


def select_pitch_lag(waveform: NDArray[np.uint8]) -> int:
    """
    Lag whose shifted copy differs most from the waveform.

    Every lag below half the buffer compares the first half of the
    buffer with the same span shifted by the lag. The first lag with the
    largest summed absolute difference wins; a flat buffer yields 0.

    This is the lag of maximum difference, not the minimum-distance lag
    a conventional autocorrelation detector would pick. On a square wave
    of period P it lands on P / 2.
    """
    n = len(waveform)
    half = (n + 1) // 2
    if half == 0:
        return 0

    samples = waveform.astype(np.int64)
    shifted = np.lib.stride_tricks.sliding_window_view(samples, half)[:half]
    differences = np.abs(shifted - samples[:half]).sum(axis=1)

    # argmax keeps the first of equal maxima, and lag 0 always scores 0
    return int(np.argmax(differences))


class EmotionDetector:
    """
    Rolling-history emotion estimator.

    Lifecycle:
        detector = EmotionDetector()
        detector.initialize(source)      # bind to a live stream
        analysis = detector.analyze_emotion()   # poll, e.g. every 500 ms
        detector.cleanup()               # release audio, clear history

    analyze_emotion() is safe in either state: without a bound stream it
    returns EmotionAnalysis.default(). Access is expected to be sequential
    from one caller; there is no internal locking.
    """

    def __init__(
        self,
        config: DetectorConfig | None = None,
        analyser_factory: AnalyserFactory | None = None,
    ) -> None:
        self._config = config or DetectorConfig()
        self._analyser_factory = analyser_factory or _default_analyser
        self._analyser: Analyser | None = None

        self._pitch_history: deque[float] = deque(maxlen=self._config.history_size)
        self._energy_history: deque[float] = deque(maxlen=self._config.history_size)

    @property
    def config(self) -> DetectorConfig:
        return self._config

    @property
    def is_active(self) -> bool:
        return self._analyser is not None

    @property
    def pitch_history(self) -> tuple[float, ...]:
        return tuple(self._pitch_history)

    @property
    def energy_history(self) -> tuple[float, ...]:
        return tuple(self._energy_history)

    @property
    def sample_rate(self) -> int:
        """Rate used to turn lags into Hz."""
        if self._analyser is not None and self._analyser.sample_rate:
            return self._analyser.sample_rate
        return self._config.fallback_sample_rate

    def initialize(self, stream: AudioSource | None) -> None:
        """
        Bind to a live audio stream.

        Raises:
            ValueError: if no stream is given.
            Any error from building the analysis node is passed through;
            the detector stays uninitialized.
        """
        if stream is None:
            raise ValueError("an audio stream is required to initialize the emotion detector")

        if self._analyser is not None:
            logger.debug("Re-initializing active emotion detector, releasing previous analyser")
            self.cleanup()

        self._analyser = self._analyser_factory(stream, self._config.fft_size)
        logger.debug(
            f"Emotion detector bound: fft_size={self._config.fft_size}, "
            f"sample_rate={self.sample_rate}"
        )

    def analyze_emotion(self) -> EmotionAnalysis:
        """Take one reading and classify it against the rolling history."""
        if self._analyser is None:
            return EmotionAnalysis.default()

        self._analyser.capture()
        spectrum = self._analyser.get_byte_frequency_data()
        waveform = self._analyser.get_byte_time_domain_data()

        energy = estimate_energy(spectrum)
        self._energy_history.append(energy)

        pitch = self._estimate_pitch(waveform)
        self._pitch_history.append(pitch)

        speech_rate = self._estimate_speech_rate()

        emotion = self._classify(pitch, energy, speech_rate)
        confidence = self._confidence(pitch, energy)

        logger.debug(
            f"pitch={pitch:.1f}Hz energy={energy:.1f} speech_rate={speech_rate:.0f} "
            f"-> {emotion.value} ({confidence:.2f})"
        )

        return EmotionAnalysis(
            emotion=emotion,
            confidence=confidence,
            features=AudioFeatures(pitch=pitch, energy=energy, speech_rate=speech_rate),
        )

    def _estimate_pitch(self, waveform: NDArray[np.uint8]) -> float:
        lag = select_pitch_lag(waveform)
        return self.sample_rate / lag if lag > 0 else 0.0

    def _estimate_speech_rate(self) -> float:
        """Count energy peaks standing clear of the rolling average."""
        history = self._energy_history
        if len(history) < 2:
            return 0.0

        threshold = self._average_energy() * 1.2
        values = list(history)
        peaks = 0
        for i in range(1, len(values) - 1):
            if (
                values[i] > threshold
                and values[i] > values[i - 1]
                and values[i] > values[i + 1]
            ):
                peaks += 1

        return float(peaks)

    def _average_energy(self) -> float:
        if not self._energy_history:
            return 0.0
        return sum(self._energy_history) / len(self._energy_history)

    def _average_pitch(self) -> float:
        if not self._pitch_history:
            return 0.0
        return sum(self._pitch_history) / len(self._pitch_history)

    def _pitch_variation(self) -> float:
        """Mean absolute difference between successive pitch readings."""
        if len(self._pitch_history) < 2:
            return 0.0
        values = list(self._pitch_history)
        total = sum(abs(values[i] - values[i - 1]) for i in range(1, len(values)))
        return total / (len(values) - 1)

    def _classify(self, pitch: float, energy: float, speech_rate: float) -> Emotion:
        """First matching rule wins."""
        avg_pitch = self._average_pitch()
        avg_energy = self._average_energy()

        if pitch > avg_pitch * 1.2 and energy > avg_energy * 1.3 and speech_rate > 3:
            return Emotion.EXCITED

        if pitch > avg_pitch * 1.15 and energy > avg_energy * 1.1:
            return Emotion.HAPPY

        if pitch < avg_pitch * 0.85 and energy < avg_energy * 0.8 and speech_rate < 2:
            return Emotion.SAD

        if self._pitch_variation() > 50 and energy > avg_energy * 1.2:
            return Emotion.ANXIOUS

        if energy < avg_energy * 0.9 and self._pitch_variation() < 30:
            return Emotion.CALM

        return Emotion.NEUTRAL

    def _confidence(self, pitch: float, energy: float) -> float:
        """0.75 when the signal is loud and voiced enough, otherwise 0.5."""
        has_good_signal = energy > self._config.energy_gate and pitch > self._config.pitch_gate
        return 0.75 if has_good_signal else 0.5

    def cleanup(self) -> None:
        """Release the analysis node and forget all history. Never raises."""
        analyser, self._analyser = self._analyser, None
        if analyser is not None:
            try:
                analyser.close()
            except Exception as e:
                logger.warning(f"Failed to close audio analyser cleanly: {e}")
        self._pitch_history.clear()
        self._energy_history.clear()
