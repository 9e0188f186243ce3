"""
Pytest configuration and fixtures for Articlecast tests.

Provides:
- A deterministic AI provider stub that records its calls
- Channel metadata and settings for tests
- A factory for article directories with controlled modification times
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from articlecast.ai.base import AIProvider
from articlecast.ai.stream import AudioStream
from articlecast.config import Settings
from articlecast.schemas.podcast import ChannelConfig

# Minimal PNG signature, enough for artifact bookkeeping
FAKE_PNG = b"\x89PNG\r\n\x1a\nfake-image"
FAKE_MP3 = b"ID3fake-audio-bytes"


class StubAI(AIProvider):
    """Deterministic provider that counts how often each operation is used.

    Failures can be injected per operation with ``fail``.
    """

    def __init__(self, audio: bytes = FAKE_MP3) -> None:
        self.audio = audio
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[str, tuple[Exception, int]] = {}

    def fail(self, op: str, error: Exception, after: int = 0) -> None:
        """Raise error from op once it has succeeded ``after`` times."""
        self.failures[op] = (error, after)

    def _record(self, op: str, text: str) -> None:
        if op in self.failures:
            error, after = self.failures[op]
            if sum(1 for name, _ in self.calls if name == op) >= after:
                raise error
        self.calls.append((op, text))

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def summary(self, text: str) -> str:
        self._record("summary", text)
        return f"Summary of {len(text.split())} words."

    async def illustration(self, text: str) -> bytes:
        self._record("illustration", text)
        return FAKE_PNG

    async def speech(self, text: str) -> AudioStream:
        self._record("speech", text)
        audio = self.audio

        async def produce(stream: AudioStream) -> None:
            await stream.write(audio)

        stream = AudioStream()
        stream.start(produce)
        return stream


class StubSettings(Settings):
    openai_api_key: str = "test-key"


@pytest.fixture
def stub_ai() -> StubAI:
    """Create a fresh stub provider."""
    return StubAI()


@pytest.fixture
def test_settings() -> Settings:
    """Settings that never read the real environment's API key."""
    return StubSettings(_env_file=None)


@pytest.fixture
def channel() -> ChannelConfig:
    """Sample channel metadata."""
    return ChannelConfig(
        title="Test Podcast",
        link="https://podcast.example.com",
        description="Articles read aloud.",
    )


@pytest.fixture
def make_articles(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing articles into tmp_path, oldest first in dict order."""

    def _make_articles(articles: dict[str, str], base_mtime: int = 1_700_000_000) -> Path:
        for offset, (name, content) in enumerate(articles.items()):
            path = tmp_path / name
            path.write_text(content, encoding="utf-8")
            mtime = base_mtime + offset * 60
            os.utime(path, (mtime, mtime))
        return tmp_path

    return _make_articles


@pytest.fixture
def make_stub_ai() -> Callable[..., StubAI]:
    """Factory for additional stub providers (e.g. a second run)."""
    return StubAI


@pytest.fixture
def fake_png() -> bytes:
    return FAKE_PNG


@pytest.fixture
def fake_mp3() -> bytes:
    return FAKE_MP3
