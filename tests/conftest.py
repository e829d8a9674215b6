"""Test configuration and fixtures.

Provides reusable fixtures for:
- A scripted in-memory lyrics provider service
- A controllable wall clock
- Settings stores in temporary directories
- Helpers for waiting on engine state
"""

import asyncio
import os
from typing import Dict, List, Optional, Tuple

import pytest

from livelyrics.core.models import Provider, SongInfo
from livelyrics.core.settings import SettingsStore


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# Provider Fixtures
# =============================================================================


class FakeProviderService:
    """In-memory provider.

    ``songs`` maps a queried (title, artist) to the list of results a search
    returns, paged by offset. ``lyrics`` maps a resolved (title, artist) to
    raw LRC text. Pairs listed in ``errors`` raise on lookup.
    """

    def __init__(self):
        self.songs: Dict[Tuple[str, str], List[SongInfo]] = {}
        self.lyrics: Dict[Tuple[str, str], str] = {}
        self.errors: set = set()
        self.lookups: List[Tuple[str, str, int, Provider]] = []
        self.fetches: List[Tuple[str, str, Provider, bool, bool, bool, bool]] = []
        self.gate: Optional[asyncio.Event] = None

    def add_song(self, title, artist, resolved=None, lrc=None):
        resolved = resolved or (title, artist)
        self.songs.setdefault((title, artist), []).append(SongInfo(*resolved))
        if lrc is not None:
            self.lyrics[resolved] = lrc

    async def lookup_song(self, query, offset, provider):
        key = (query.song_name, query.artist_name)
        self.lookups.append((key[0], key[1], offset, provider))
        if self.gate is not None:
            await self.gate.wait()
        if key in self.errors:
            raise ConnectionError("connection reset by peer")
        results = self.songs.get(key, [])
        return results[offset] if offset < len(results) else None

    async def fetch_synced_lyrics(
        self,
        title,
        artist,
        provider,
        include_translation=False,
        include_romanization=False,
        word_by_word=False,
        unsynced_fallback=False,
    ):
        self.fetches.append(
            (title, artist, provider, include_translation, include_romanization,
             word_by_word, unsynced_fallback)
        )
        return self.lyrics.get((title, artist))


@pytest.fixture
def fake_service():
    return FakeProviderService()


@pytest.fixture
def sample_lrc():
    return (
        "[ti:Heat Waves]\n"
        "[ar:Glass Animals]\n"
        "[00:01.00]Road shimmer wigglin' the vision\n"
        "[00:05.50]Heat, heat waves, I'm swimmin' in a mirror\n"
        "[00:10.25]Sometimes all I think about is you\n"
        "[00:15.00]Late nights in the middle of June\n"
    )


# =============================================================================
# Clock / Settings Fixtures
# =============================================================================


class FakeClock:
    def __init__(self, now: int = 1_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


# =============================================================================
# Async Helpers
# =============================================================================


async def wait_for_state(engine, predicate, timeout: float = 1.0):
    """Wait until the engine publishes a state matching ``predicate``."""

    async def _wait():
        async for state in engine.states.subscribe():
            if predicate(state):
                return state

    return await asyncio.wait_for(_wait(), timeout)


async def settle(rounds: int = 5) -> None:
    """Let pending tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)
