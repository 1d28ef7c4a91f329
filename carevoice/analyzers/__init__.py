"""Audio analyzers for feature extraction and classification."""

from carevoice.analyzers.emotion import (
    DetectorConfig,
    EmotionDetector,
    estimate_energy,
    select_pitch_lag,
)

__all__ = [
    "DetectorConfig",
    "EmotionDetector",
    "estimate_energy",
    "select_pitch_lag",
]
