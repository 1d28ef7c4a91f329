"""
carevoice Basic Usage Example

Demonstrates the detector and listening session with synthetic audio.
"""

import asyncio
import json

import numpy as np

from carevoice import EmotionDetector, ListeningSession, SessionConfig
from carevoice.adapters import ChatPayloadAdapter, DictAdapter
from carevoice.behavior import ToneMapper
from carevoice.sources import ArraySource, SineSource, SquareSource


def example_direct_polling():
    """Drive the detector by hand, the way a UI timer would."""
    print("=" * 60)
    print("Direct Polling Example")
    print("=" * 60)

    detector = EmotionDetector()
    print(f"\nBefore initialize: {detector.analyze_emotion().to_dict()}")

    detector.initialize(SquareSource(period_samples=80, amplitude=0.4, duration_ms=3000))
    adapter = DictAdapter()

    try:
        for i in range(5):
            output = adapter.transform(detector.analyze_emotion())
            print(f"Poll {i + 1}: {output['emoji']} {output['emotion']} "
                  f"(confidence: {output['confidence']:.2f}, "
                  f"pitch: {output['features']['pitch']:.1f} Hz, "
                  f"energy: {output['features']['energy']:.1f})")
    finally:
        detector.cleanup()

    print(f"After cleanup: {detector.analyze_emotion().to_dict()}\n")


def rising_voice(duration_ms: int = 6000, sample_rate: int = 16000) -> np.ndarray:
    """Tone that gets louder and higher over time."""
    t = np.arange(int(sample_rate * duration_ms / 1000)) / sample_rate
    frequency = np.linspace(150, 400, len(t))
    amplitude = np.linspace(0.05, 0.8, len(t))
    phase = 2 * np.pi * np.cumsum(frequency) / sample_rate
    return amplitude * np.sin(phase)


def example_session_with_payload():
    """Run a session, then tag the transcribed message with its emotion."""
    print("=" * 60)
    print("Session and Chat Payload Example")
    print("=" * 60)

    session = ListeningSession(
        ArraySource(rising_voice()),
        SessionConfig(poll_interval_ms=500),
    )
    session.on_analysis(lambda a: print(f"  {a.emotion.value:8s} {a.confidence:.2f}"))

    list(session.run_sync(max_polls=12, sleep=lambda s: None))

    adapter = ChatPayloadAdapter("en-US")
    request = adapter.chat_request("I had a lovely walk today", session.latest)
    prompt = ToneMapper().map(session.latest).to_system_prompt(adapter.language)

    print(f"\nChat request: {json.dumps(request)}")
    print(f"System prompt: {prompt}\n")


async def example_async_session():
    """Async polling, as a web backend would run it."""
    print("=" * 60)
    print("Async Session Example")
    print("=" * 60)

    session = ListeningSession(
        SineSource(frequency_hz=220, amplitude=0.3, duration_ms=3000),
        SessionConfig(poll_interval_ms=50),
    )

    async for analysis in session.run(max_polls=5):
        print(f"  poll {session.polls}: {analysis.emotion.value}")
    print()


if __name__ == "__main__":
    example_direct_polling()
    example_session_with_payload()
    asyncio.run(example_async_session())
