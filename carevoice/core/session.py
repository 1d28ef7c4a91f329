"""
Listening session.

A session owns one audio source and one emotion detector for as long as
the user is being listened to. It polls the detector on a fixed timer and
guarantees the detector is cleaned up however the session ends.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Iterator

from carevoice.analyzers.emotion import DetectorConfig, EmotionDetector
from carevoice.core.analysis import EmotionAnalysis
from carevoice.core.stream import AudioSource

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    """Session configuration."""
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    poll_interval_ms: int = 500

    def __post_init__(self) -> None:
        if self.poll_interval_ms <= 0:
            raise ValueError(f"poll_interval_ms must be positive, got {self.poll_interval_ms}")


class ListeningSession:
    """
    Polls an emotion detector while a source is live.

    Usage:
        session = ListeningSession(MicrophoneSource())
        session.on_analysis(lambda a: print(a.emotion))

        async for analysis in session.run():
            if user_finished_speaking:
                session.stop()

        send_to_chat(text, emotion=session.latest.emotion)

    A session is single-use: once stopped, build a new one (and with it a
    fresh detector and empty history) for the next listening period.
    """

    def __init__(
        self,
        source: AudioSource,
        config: SessionConfig | None = None,
        detector: EmotionDetector | None = None,
    ) -> None:
        self._source = source
        self._config = config or SessionConfig()
        self._detector = detector or EmotionDetector(self._config.detector)
        self._callbacks: list[Callable[[EmotionAnalysis], None]] = []
        self._latest = EmotionAnalysis.default()
        self._running = False
        self._stopped = False
        self._polls = 0

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def detector(self) -> EmotionDetector:
        return self._detector

    @property
    def latest(self) -> EmotionAnalysis:
        """Most recent analysis; kept after stop() so it can tag the message."""
        return self._latest

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def polls(self) -> int:
        return self._polls

    def on_analysis(self, callback: Callable[[EmotionAnalysis], None]) -> ListeningSession:
        """Register a callback for each analysis. Returns self for chaining."""
        self._callbacks.append(callback)
        return self

    def start(self) -> None:
        """
        Bind the detector to the source.

        Any failure (no stream, device unavailable) tears the session down
        before being re-raised.
        """
        if self._running:
            return
        if self._stopped:
            raise RuntimeError("listening session already stopped; create a new one")

        try:
            self._detector.initialize(self._source)
        except Exception:
            logger.exception("Failed to start listening session")
            self.stop()
            raise

        self._running = True
        logger.info(f"Listening session started, polling every {self._config.poll_interval_ms}ms")

    def poll(self) -> EmotionAnalysis:
        """Take one reading and notify callbacks."""
        analysis = self._detector.analyze_emotion()
        self._latest = analysis
        self._polls += 1

        for callback in self._callbacks:
            try:
                callback(analysis)
            except Exception as e:
                logger.warning(f"Analysis callback failed on poll {self._polls}: {e}")

        return analysis

    async def run(self, max_polls: int | None = None) -> AsyncIterator[EmotionAnalysis]:
        """
        Start the session and poll on the configured interval.

        Yields each analysis. Stops on stop(), after max_polls, or when the
        consumer abandons the iterator. Each poll blocks while the analyser
        waits for fresh audio, so it runs in a worker thread and the event
        loop stays free; polls remain strictly sequential.
        """
        self.start()
        interval_s = self._config.poll_interval_ms / 1000

        try:
            while self._running:
                yield await asyncio.to_thread(self.poll)

                if max_polls is not None and self._polls >= max_polls:
                    break

                await asyncio.sleep(interval_s)
        finally:
            self.stop()

    def run_sync(
        self,
        max_polls: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Iterator[EmotionAnalysis]:
        """
        Blocking variant of run().

        Use list(session.run_sync(max_polls=n)) for batch processing.
        """
        self.start()
        interval_s = self._config.poll_interval_ms / 1000

        try:
            while self._running:
                yield self.poll()

                if max_polls is not None and self._polls >= max_polls:
                    break

                sleep(interval_s)
        finally:
            self.stop()

    def stop(self) -> None:
        """End the session and release audio. Safe to call more than once."""
        was_running = self._running
        self._running = False
        if self._stopped:
            return
        self._stopped = True

        self._detector.cleanup()
        try:
            self._source.close()
        except Exception as e:
            logger.warning(f"Failed to close audio source: {e}")

        if was_running:
            logger.info(f"Listening session stopped after {self._polls} polls")
