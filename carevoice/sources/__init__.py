"""Audio sources for the emotion detector."""

from carevoice.sources.synthetic import (
    ArraySource,
    SineSource,
    SquareSource,
    NoiseSource,
    SilenceSource,
)
from carevoice.sources.microphone import MicrophoneSource, list_audio_devices, get_default_device

__all__ = [
    "ArraySource",
    "SineSource",
    "SquareSource",
    "NoiseSource",
    "SilenceSource",
    "MicrophoneSource",
    "list_audio_devices",
    "get_default_device",
]
