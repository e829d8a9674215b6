"""Tests for playback position extrapolation."""

import asyncio

from livelyrics.core.models import PlaybackSnapshot
from livelyrics.core.playback import PlaybackTracker


class Recorder:
    def __init__(self):
        self.positions = []
        self.playing = []

    def on_position(self, position):
        self.positions.append(position)

    def on_playing(self, is_playing):
        self.playing.append(is_playing)


def make_tracker(clock, interval_ms=5):
    recorder = Recorder()
    tracker = PlaybackTracker(
        recorder.on_position, recorder.on_playing, poll_interval_ms=interval_ms, clock=clock
    )
    return tracker, recorder


def test_snapshot_position_at():
    snap = PlaybackSnapshot(True, 10000, 5000, 1.5)
    assert snap.position_at(7000) == 13000
    assert PlaybackSnapshot(False, 10000, 5000).position_at(7000) == 10000


def test_paused_snapshot_reports_once(clock):
    async def main():
        tracker, recorder = make_tracker(clock)
        tracker.feed(PlaybackSnapshot(False, 42000, clock.now, 1.0))
        await asyncio.sleep(0.03)
        assert recorder.positions == [42000]
        assert recorder.playing == [False]
        assert not tracker.is_polling

    asyncio.run(main())


def test_playing_snapshot_extrapolates(clock):
    async def main():
        tracker, recorder = make_tracker(clock)
        base_time = clock.now
        clock.advance(1000)
        tracker.feed(PlaybackSnapshot(True, 10000, base_time, 1.0))
        await asyncio.sleep(0)
        assert recorder.positions[0] == 11000
        assert tracker.is_polling

        clock.advance(500)
        await asyncio.sleep(0.02)
        assert recorder.positions[-1] == 11500
        tracker.cancel()

    asyncio.run(main())


def test_speed_is_applied(clock):
    async def main():
        tracker, recorder = make_tracker(clock)
        base_time = clock.now
        clock.advance(1000)
        tracker.feed(PlaybackSnapshot(True, 0, base_time, 2.0))
        await asyncio.sleep(0)
        assert recorder.positions[0] == 2000
        tracker.cancel()

    asyncio.run(main())


def test_new_snapshot_replaces_loop(clock):
    async def main():
        tracker, recorder = make_tracker(clock)
        tracker.feed(PlaybackSnapshot(True, 0, clock.now, 1.0))
        await asyncio.sleep(0.01)
        first_task = tracker._task

        tracker.feed(PlaybackSnapshot(True, 60000, clock.now, 1.0))
        await asyncio.sleep(0.01)
        assert first_task.cancelled() or first_task.done()
        assert tracker.is_polling
        assert recorder.positions[-1] == 60000
        tracker.cancel()

    asyncio.run(main())


def test_pause_stops_polling(clock):
    async def main():
        tracker, recorder = make_tracker(clock)
        tracker.feed(PlaybackSnapshot(True, 0, clock.now, 1.0))
        await asyncio.sleep(0.01)
        tracker.feed(PlaybackSnapshot(False, 3000, clock.now, 1.0))
        count = len(recorder.positions)
        clock.advance(1000)
        await asyncio.sleep(0.02)
        assert not tracker.is_polling
        assert recorder.positions[-1] == 3000
        assert len(recorder.positions) == count
        assert recorder.playing == [True, False]

    asyncio.run(main())


def test_none_stops_polling_without_callbacks(clock):
    async def main():
        tracker, recorder = make_tracker(clock)
        tracker.feed(PlaybackSnapshot(True, 0, clock.now, 1.0))
        await asyncio.sleep(0.01)
        count = len(recorder.positions)
        tracker.feed(None)
        await asyncio.sleep(0.02)
        assert not tracker.is_polling
        assert len(recorder.positions) == count
        assert tracker.current_position() is None

    asyncio.run(main())


def test_current_position_follows_clock(clock):
    tracker, _ = make_tracker(clock)
    assert tracker.current_position() is None
    tracker._latest = PlaybackSnapshot(True, 1000, clock.now, 1.0)
    clock.advance(250)
    assert tracker.current_position() == 1250
