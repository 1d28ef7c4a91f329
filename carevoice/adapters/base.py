"""
Base adapter protocol.

Adapters transform EmotionAnalyses for downstream systems.
The chat service and the conversation store are external; adapters
only build the payloads they expect.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from carevoice.behavior.labels import emotion_emoji, language_name
from carevoice.core.analysis import EmotionAnalysis


T = TypeVar("T")


class Adapter(ABC, Generic[T]):
    """
    Abstract base for output adapters.

    Usage:
        class MyAdapter(Adapter[MyOutputType]):
            def transform(self, analysis: EmotionAnalysis) -> MyOutputType:
                return MyOutputType(...)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name."""
        ...

    @abstractmethod
    def transform(self, analysis: EmotionAnalysis) -> T:
        """
        Transform an EmotionAnalysis to target format.

        Args:
            analysis: The EmotionAnalysis to transform

        Returns:
            Transformed output in target format
        """
        ...

    def batch_transform(self, analyses: list[EmotionAnalysis]) -> list[T]:
        """Transform multiple analyses. Override for optimization."""
        return [self.transform(a) for a in analyses]


class DictAdapter(Adapter[dict[str, Any]]):
    """
    Converts an EmotionAnalysis to a plain dictionary.

    Useful for JSON serialization or simple integrations.
    """

    @property
    def name(self) -> str:
        return "dict"

    def transform(self, analysis: EmotionAnalysis) -> dict[str, Any]:
        data = analysis.to_dict()
        data["emoji"] = emotion_emoji(analysis.emotion)
        return data


class CallbackAdapter(Adapter[None]):
    """
    Adapter that invokes a callback for each analysis.

    Fits ListeningSession.on_analysis for event-driven consumers.
    """

    def __init__(self, callback: Callable[[EmotionAnalysis], None]) -> None:
        self._callback = callback

    @property
    def name(self) -> str:
        return "callback"

    def transform(self, analysis: EmotionAnalysis) -> None:
        self._callback(analysis)


class ChatPayloadAdapter(Adapter[dict[str, str]]):
    """
    Attaches emotion and spoken language to outgoing messages.

    Builds the request body for the chat service and the row written to
    the conversation store, both tagged with the emotion in effect when
    the user spoke.
    """

    def __init__(self, locale: str = "en-US") -> None:
        self._language = language_name(locale)
        self._locale = locale

    @property
    def name(self) -> str:
        return "chat_payload"

    @property
    def language(self) -> str:
        return self._language

    def transform(self, analysis: EmotionAnalysis) -> dict[str, str]:
        return {
            "language": self._language,
            "emotion": analysis.emotion.value,
        }

    def chat_request(self, message: str, analysis: EmotionAnalysis) -> dict[str, str]:
        """Request body for the chat-completion service."""
        if not message or not message.strip():
            raise ValueError("message must not be blank")
        return {"message": message, **self.transform(analysis)}

    def conversation_record(
        self,
        elder_id: str,
        question: str,
        answer: str,
        analysis: EmotionAnalysis,
        conversation_type: str = "voice",
    ) -> dict[str, str]:
        """Row for the conversation store."""
        if not question or not question.strip():
            raise ValueError("question must not be blank")
        return {
            "elder_id": elder_id,
            "question": question,
            "answer": answer,
            "conversation_type": conversation_type,
            **self.transform(analysis),
        }
