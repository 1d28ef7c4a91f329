"""Display labels for emotions and spoken languages."""

from __future__ import annotations

from carevoice.core.analysis import Emotion

SUPPORTED_LOCALES = ("en-US", "hi-IN")

_LANGUAGE_NAMES = {
    "en-US": "English",
    "hi-IN": "Hindi",
}

_EMOJI = {
    Emotion.CALM: "\U0001F60C",
    Emotion.HAPPY: "\U0001F60A",
    Emotion.SAD: "\U0001F622",
    Emotion.ANXIOUS: "\U0001F630",
    Emotion.EXCITED: "\U0001F917",
    Emotion.NEUTRAL: "\U0001F610",
}

_LABELS = {
    Emotion.CALM: {"en-US": "Calm", "hi-IN": "शांत"},
    Emotion.HAPPY: {"en-US": "Happy", "hi-IN": "खुश"},
    Emotion.SAD: {"en-US": "Sad", "hi-IN": "उदास"},
    Emotion.ANXIOUS: {"en-US": "Anxious", "hi-IN": "चिंतित"},
    Emotion.EXCITED: {"en-US": "Excited", "hi-IN": "उत्साहित"},
    Emotion.NEUTRAL: {"en-US": "Neutral", "hi-IN": "सामान्य"},
}


def _check_locale(locale: str) -> None:
    if locale not in SUPPORTED_LOCALES:
        raise ValueError(f"unsupported locale {locale!r}, expected one of {SUPPORTED_LOCALES}")


def emotion_emoji(emotion: Emotion | str) -> str:
    return _EMOJI[Emotion(emotion)]


def emotion_label(emotion: Emotion | str, locale: str = "en-US") -> str:
    """Localized display name, e.g. ("sad", "hi-IN") -> "उदास"."""
    _check_locale(locale)
    return _LABELS[Emotion(emotion)][locale]


def language_name(locale: str) -> str:
    """Language name sent alongside messages, e.g. "hi-IN" -> "Hindi"."""
    _check_locale(locale)
    return _LANGUAGE_NAMES[locale]
