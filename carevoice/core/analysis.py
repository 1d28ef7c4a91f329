"""
EmotionAnalysis - The sole output of the emotion detector.

This is a heuristic reading of the voice, not a diagnosis.
It colours the assistant's tone and tags stored conversations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Emotion(str, Enum):
    """Closed set of detectable emotional states."""
    CALM = "calm"
    HAPPY = "happy"
    SAD = "sad"
    ANXIOUS = "anxious"
    EXCITED = "excited"
    NEUTRAL = "neutral"


@dataclass(frozen=True, slots=True)
class AudioFeatures:
    """
    Acoustic features extracted from one poll.

    - pitch: estimated fundamental frequency in Hz (0.0 when no lag is found)
    - energy: mean byte magnitude of the spectrum, 0-255
    - speech_rate: peak count over recent energy, a proxy for utterance density
    """
    pitch: float = 0.0
    energy: float = 0.0
    speech_rate: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "pitch": self.pitch,
            "energy": self.energy,
            "speech_rate": self.speech_rate,
        }


@dataclass(frozen=True, slots=True)
class EmotionAnalysis:
    """
    Classification result for a single poll.

    confidence is a signal-quality gate, not a probability.
    """
    emotion: Emotion = Emotion.NEUTRAL
    confidence: float = 0.0
    features: AudioFeatures = field(default_factory=AudioFeatures)

    def __post_init__(self) -> None:
        if isinstance(self.emotion, str) and not isinstance(self.emotion, Emotion):
            object.__setattr__(self, 'emotion', Emotion(self.emotion))
        if not (0.0 <= self.confidence <= 1.0):
            object.__setattr__(self, 'confidence', max(0.0, min(1.0, self.confidence)))

    @classmethod
    def default(cls) -> EmotionAnalysis:
        """Result reported when no audio is bound."""
        return cls()

    @property
    def is_default(self) -> bool:
        return self == EmotionAnalysis.default()

    def to_dict(self) -> dict[str, Any]:
        return {
            "emotion": self.emotion.value,
            "confidence": self.confidence,
            "features": self.features.to_dict(),
        }
