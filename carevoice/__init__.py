"""
carevoice - Vocal emotion estimation for a caregiving companion

carevoice listens to a live audio stream and estimates how the speaker
is feeling. It does not transcribe, store, or reply. It only colours.
"""

from carevoice.core.analysis import EmotionAnalysis, AudioFeatures, Emotion
from carevoice.core.stream import AudioFrame, AudioConfig, AudioSource
from carevoice.core.analyser import Analyser, AnalyserNode
from carevoice.core.session import ListeningSession, SessionConfig
from carevoice.analyzers.emotion import EmotionDetector, DetectorConfig
from carevoice.adapters.base import Adapter

__version__ = "0.1.0"
__all__ = [
    # Core data structures
    "EmotionAnalysis",
    "AudioFeatures",
    "Emotion",
    "AudioFrame",
    "AudioConfig",
    "AudioSource",
    # Estimator
    "EmotionDetector",
    "DetectorConfig",
    "Analyser",
    "AnalyserNode",
    # Session
    "ListeningSession",
    "SessionConfig",
    # Extension protocols
    "Adapter",
]
