"""Behavior layer - emotion to tone and display translation."""

from carevoice.behavior.tone import ToneMapper, ToneSignal, empathetic_guidance
from carevoice.behavior.labels import emotion_emoji, emotion_label, language_name

__all__ = [
    "ToneMapper",
    "ToneSignal",
    "empathetic_guidance",
    "emotion_emoji",
    "emotion_label",
    "language_name",
]
