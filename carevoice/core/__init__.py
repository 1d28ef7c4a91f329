"""Core data structures, analysis node and listening session."""

from carevoice.core.analysis import EmotionAnalysis, AudioFeatures, Emotion
from carevoice.core.stream import AudioFrame, AudioConfig, AudioSource
from carevoice.core.analyser import Analyser, AnalyserNode
from carevoice.core.session import ListeningSession, SessionConfig

__all__ = [
    "EmotionAnalysis",
    "AudioFeatures",
    "Emotion",
    "AudioFrame",
    "AudioConfig",
    "AudioSource",
    "Analyser",
    "AnalyserNode",
    "ListeningSession",
    "SessionConfig",
]
