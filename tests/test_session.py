"""Tests for the listening session."""

import asyncio
import time

import pytest

from carevoice.analyzers.emotion import EmotionDetector
from carevoice.core.analysis import Emotion, EmotionAnalysis
from carevoice.core.session import ListeningSession, SessionConfig
from carevoice.sources import SilenceSource, SquareSource

from conftest import FakeAnalyser, square_wave


def make_session(fake, source=None, **config):
    detector = EmotionDetector(analyser_factory=lambda s, size: fake)
    source = source or SilenceSource(duration_ms=100)
    return ListeningSession(source, SessionConfig(**config), detector=detector), source


class TestListeningSession:
    def test_run_sync_polls_and_cleans_up(self):
        fake = FakeAnalyser()
        session, source = make_session(fake)
        sleeps = []

        results = list(session.run_sync(max_polls=3, sleep=sleeps.append))

        assert len(results) == 3
        assert sleeps == [0.5, 0.5]
        assert fake.closed == 1
        assert source.is_closed
        assert session.is_running is False
        assert session.detector.energy_history == ()

    def test_history_grows_across_polls(self):
        fake = FakeAnalyser()
        session, _ = make_session(fake)
        lengths = []
        session.on_analysis(lambda a: lengths.append(len(session.detector.energy_history)))

        list(session.run_sync(max_polls=3, sleep=lambda s: None))

        assert lengths == [1, 2, 3]

    def test_async_run(self):
        fake = FakeAnalyser()
        session, source = make_session(fake, poll_interval_ms=1)
        for _ in range(4):
            fake.queue(60, square_wave(64))

        async def collect():
            return [a async for a in session.run(max_polls=4)]

        results = asyncio.run(collect())

        assert len(results) == 4
        assert all(r.confidence == 0.75 for r in results)
        assert fake.closed == 1
        assert source.is_closed

    def test_async_run_keeps_loop_free_while_capturing(self):
        class SlowAnalyser(FakeAnalyser):
            def capture(self):
                time.sleep(0.1)
                super().capture()

        session, _ = make_session(SlowAnalyser(), poll_interval_ms=1)
        ticks = []

        async def ticker():
            while True:
                await asyncio.sleep(0.005)
                ticks.append(1)

        async def main():
            task = asyncio.create_task(ticker())
            results = [a async for a in session.run(max_polls=1)]
            task.cancel()
            return results

        results = asyncio.run(main())

        assert len(results) == 1
        assert len(ticks) > 0

    def test_stop_from_callback(self):
        fake = FakeAnalyser()
        session, _ = make_session(fake)
        session.on_analysis(lambda a: session.stop())

        results = list(session.run_sync(sleep=lambda s: None))

        assert len(results) == 1
        assert fake.closed == 1

    def test_latest_kept_after_stop(self):
        fake = FakeAnalyser()
        session, _ = make_session(fake)
        assert session.latest == EmotionAnalysis.default()

        fake.queue(120, square_wave(64))
        list(session.run_sync(max_polls=1))

        assert session.latest.confidence == 0.75
        assert session.latest.emotion == Emotion.NEUTRAL

    def test_start_failure_tears_down(self):
        def broken(source, fft_size):
            raise OSError("permission denied")

        source = SquareSource()
        session = ListeningSession(source, detector=EmotionDetector(analyser_factory=broken))

        with pytest.raises(OSError):
            session.start()

        assert source.is_closed
        assert session.is_running is False

    def test_cannot_restart(self):
        fake = FakeAnalyser()
        session, _ = make_session(fake)
        list(session.run_sync(max_polls=1))

        with pytest.raises(RuntimeError):
            session.start()

    def test_stop_is_idempotent(self):
        fake = FakeAnalyser()
        session, _ = make_session(fake)
        session.start()
        session.stop()
        session.stop()
        assert fake.closed == 1

    def test_failing_callback_does_not_stop_session(self):
        fake = FakeAnalyser()
        session, _ = make_session(fake)
        seen = []

        def broken(analysis):
            raise RuntimeError("ui went away")

        session.on_analysis(broken).on_analysis(seen.append)
        results = list(session.run_sync(max_polls=2, sleep=lambda s: None))

        assert len(results) == 2
        assert len(seen) == 2

    def test_rejects_bad_interval(self):
        with pytest.raises(ValueError):
            SessionConfig(poll_interval_ms=0)

    def test_default_detector_with_real_source(self):
        session = ListeningSession(SquareSource(period_samples=64, duration_ms=2000))
        results = list(session.run_sync(max_polls=2, sleep=lambda s: None))

        assert [r.features.pitch for r in results] == pytest.approx([500.0, 500.0])
