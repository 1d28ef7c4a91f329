#!/usr/bin/env python3
"""
carevoice Microphone Demo

Speak into the microphone and watch the detected emotion update every
500 ms, along with the tone instruction the companion would be given.

Usage:
    python examples/microphone_demo.py [en-US|hi-IN]

Requires:
    pip install sounddevice

Stop with Ctrl+C.
"""

import logging
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from carevoice import ListeningSession, SessionConfig
from carevoice.behavior import ToneMapper, emotion_emoji, emotion_label, language_name


def format_bar(value: float, width: int = 20, filled: str = "#", empty: str = ".") -> str:
    """Create a visual bar."""
    filled_count = int(max(0.0, min(1.0, value)) * width)
    return filled * filled_count + empty * (width - filled_count)


def print_analysis_live(analysis, locale: str, poll: int) -> None:
    """Print one analysis in a live-updating format."""
    features = analysis.features
    label = emotion_label(analysis.emotion, locale)

    print(f"\n{'='*60}")
    print(f"  Poll: {poll:5d}  |  {emotion_emoji(analysis.emotion)} {label}")
    print(f"{'='*60}")
    print(f"     Confidence: [{format_bar(analysis.confidence)}] {analysis.confidence:.0%}")
    print(f"     Energy:     [{format_bar(features.energy / 255)}] {features.energy:.1f}")
    print(f"     Pitch:      {features.pitch:.1f} Hz")
    print(f"     Peaks:      {features.speech_rate:.0f}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    locale = sys.argv[1] if len(sys.argv) > 1 else "en-US"

    print("\n" + "="*60)
    print("  [MIC] carevoice Microphone Demo")
    print("="*60)
    print("\n  Speak into the microphone. Stop with Ctrl+C.\n")

    from carevoice.sources.microphone import MicrophoneSource, list_audio_devices

    try:
        print("  Available audio devices:")
        print("-" * 40)
        print(list_audio_devices())
        print("-" * 40)
    except ImportError as e:
        print(f"\n  [ERROR] {e}\n")
        return

    session = ListeningSession(
        MicrophoneSource(sample_rate=44100, frame_duration_ms=20),
        SessionConfig(poll_interval_ms=500),
    )
    session.on_analysis(lambda a: print_analysis_live(a, locale, session.polls))

    try:
        for _ in session.run_sync():
            pass
    except KeyboardInterrupt:
        print("\n\n  [STOP] Listening stopped.")
    finally:
        session.stop()

    signal = ToneMapper().map(session.latest)
    print(f"  [INFO] {session.polls} polls.")
    print(f"  [PROMPT] {signal.to_system_prompt(language_name(locale))}\n")


if __name__ == "__main__":
    main()
