"""
Emotion → Tone Mapping Layer.

Turns a detected emotion into the tone-of-response instruction the
companion assistant is given. This layer only builds text; it does not
talk to any chat service.
"""

from __future__ import annotations

from dataclasses import dataclass

from carevoice.core.analysis import Emotion, EmotionAnalysis


COMPANION_PERSONA = (
    "You are an empathetic and gentle AI companion for elders. "
    "Your goal is to make them feel heard, cared for, and valued. "
    "Speak naturally, like a close friend or grandchild who listens "
    "patiently and responds with warmth."
)

EMPATHETIC_GUIDANCE: dict[Emotion, str] = {
    Emotion.SAD: (
        "comforting, understanding, and supportive. "
        "Acknowledge their feelings and offer gentle encouragement"
    ),
    Emotion.HAPPY: "warm and celebratory. Share in their joy and positivity",
    Emotion.ANXIOUS: "calm, reassuring, and patient. Help them feel safe and understood",
    Emotion.EXCITED: "enthusiastic and engaged. Match their energy while keeping them grounded",
    Emotion.CALM: "peaceful and reflective. Maintain a soothing presence",
    Emotion.NEUTRAL: "warm and welcoming. Be ready to adapt to their emotional needs",
}


def empathetic_guidance(emotion: Emotion | str | None) -> str:
    """Tone instruction for an emotion; anything unrecognized gets the neutral one."""
    try:
        return EMPATHETIC_GUIDANCE[Emotion(emotion)]
    except ValueError:
        return EMPATHETIC_GUIDANCE[Emotion.NEUTRAL]


@dataclass(frozen=True)
class ToneSignal:
    """
    Tone recommendation for the assistant's next reply.

    emotion is None when the reading was too weak to act on.
    """
    emotion: Emotion | None
    guidance: str
    confidence: float

    def to_system_prompt(self, language: str | None = None) -> str:
        """Build the companion system prompt for the chat service."""
        parts = [COMPANION_PERSONA]

        if language:
            parts.append(f"Respond in {language} language.")
        else:
            parts.append("Respond in the same language as the user.")

        if self.emotion is not None:
            parts.append(
                f"The user seems to be feeling {self.emotion.value} right now. "
                f"Adjust your tone to be especially {self.guidance}."
            )

        return " ".join(parts)


class ToneMapper:
    """
    Maps emotion analyses to tone signals.

    Usage:
        mapper = ToneMapper(min_confidence=0.5)
        signal = mapper.map(session.latest)
        system_prompt = signal.to_system_prompt("Hindi")
    """

    def __init__(self, min_confidence: float = 0.0) -> None:
        if not (0.0 <= min_confidence <= 1.0):
            raise ValueError(f"min_confidence must be in [0, 1], got {min_confidence}")
        self._min_confidence = min_confidence

    @property
    def min_confidence(self) -> float:
        return self._min_confidence

    def map(self, analysis: EmotionAnalysis) -> ToneSignal:
        if analysis.confidence < self._min_confidence:
            return ToneSignal(
                emotion=None,
                guidance=empathetic_guidance(Emotion.NEUTRAL),
                confidence=analysis.confidence,
            )

        return ToneSignal(
            emotion=analysis.emotion,
            guidance=empathetic_guidance(analysis.emotion),
            confidence=analysis.confidence,
        )
