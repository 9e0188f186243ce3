"""Tests for the command line entry point."""

import asyncio
import os
import signal
import sys
from xml.etree import ElementTree

import pytest
from loguru import logger
from typer.testing import CliRunner

from articlecast import __version__
from articlecast.ai.stream import AudioStream
from articlecast.cli import app
from articlecast.config import get_settings

runner = CliRunner()

CHANNEL_YAML = "title: Test Podcast\nlink: https://podcast.example.com\ndescription: Read aloud.\n"


@pytest.fixture(autouse=True)
def isolated_run(tmp_path, monkeypatch):
    """Run each command from an empty working directory with fresh settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # Sinks added by the command point at the runner's closed streams
    logger.remove()


@pytest.fixture
def stub_provider(monkeypatch, stub_ai):
    """Replace the OpenAI provider with the stub."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setattr("articlecast.ai.openai_ai.OpenAIProvider", lambda settings=None: stub_ai)
    return stub_ai


@pytest.fixture
def articles(tmp_path):
    directory = tmp_path / "articles"
    directory.mkdir()
    (directory / "a.txt").write_text("An article about cats.")
    return directory


class TestVersionAndUsage:
    """Tests for flags that exit early."""

    @pytest.mark.parametrize("flag", ["-v", "--version"])
    def test_version(self, flag):
        """Should print the version and exit cleanly."""
        result = runner.invoke(app, [flag])

        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_missing_directory_argument(self):
        """Should print usage and exit with status 1."""
        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "usage: articlecast" in result.output


class TestRun:
    """Tests for a full run."""

    def test_prints_rss(self, tmp_path, articles, stub_provider):
        """Should generate artifacts and print the feed to stdout."""
        (tmp_path / "channel.yaml").write_text(CHANNEL_YAML)

        result = runner.invoke(app, [str(articles)])

        assert result.exit_code == 0, result.output
        xml = result.stdout[result.stdout.index("<?xml") :]
        root = ElementTree.fromstring(xml.split("\n", 1)[1])
        assert root.findtext("channel/title") == "Test Podcast"
        assert root.findtext("channel/item/title") == "a.txt"
        assert (articles / "a.txt.mp3").exists()
        assert stub_provider.call_count == 3

    def test_debug_flag(self, tmp_path, articles, stub_provider):
        (tmp_path / "channel.yaml").write_text(CHANNEL_YAML)

        result = runner.invoke(app, ["-d", str(articles)])

        assert result.exit_code == 0, result.output
        assert "<rss" in result.stdout

    def test_missing_api_key(self, tmp_path, articles):
        """Should fail before touching the articles."""
        (tmp_path / "channel.yaml").write_text(CHANNEL_YAML)

        result = runner.invoke(app, [str(articles)])

        assert result.exit_code == 1
        assert "run error: 'OPENAI_API_KEY' is required" in result.output
        assert not (articles / "a.txt.summary.txt").exists()

    def test_missing_channel_file(self, articles, stub_provider):
        result = runner.invoke(app, [str(articles)])

        assert result.exit_code == 1
        assert "run error: read channel.yaml" in result.output
        assert stub_provider.call_count == 0

    def test_incomplete_channel_file(self, tmp_path, articles, stub_provider):
        (tmp_path / "channel.yaml").write_text("title: T\nlink: L\n")

        result = runner.invoke(app, [str(articles)])

        assert result.exit_code == 1
        assert "run error: description is required" in result.output

    def test_scan_failure_reports_context(self, tmp_path, articles, stub_provider):
        """Should print the full error chain and no feed."""
        (tmp_path / "channel.yaml").write_text(CHANNEL_YAML)
        (articles / "b.txt").write_text("")

        result = runner.invoke(app, [str(articles)])

        assert result.exit_code == 1
        assert f"run error: scan({articles}): add_episode(b.txt): empty article" in result.output
        assert "<rss" not in result.output


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
class TestInterrupt:
    """Tests for SIGINT/SIGTERM handling during a run."""

    @pytest.mark.parametrize("signum", [signal.SIGINT, signal.SIGTERM])
    def test_signal_cancels_run(self, tmp_path, articles, stub_provider, signum):
        """Should stop mid-narration, keep the partial audio and print no feed."""
        (tmp_path / "channel.yaml").write_text(CHANNEL_YAML)

        async def stalled_speech(text: str) -> AudioStream:
            async def produce(stream: AudioStream) -> None:
                await stream.write(b"part")
                asyncio.get_running_loop().call_later(0.05, os.kill, os.getpid(), signum)
                await asyncio.sleep(3600)

            stream = AudioStream()
            stream.start(produce)
            return stream

        stub_provider.speech = stalled_speech
        handler_before = signal.getsignal(signum)

        result = runner.invoke(app, [str(articles)])

        assert result.exit_code == 1
        assert "run error: interrupted" in result.output
        assert "<rss" not in result.output
        assert (articles / "a.txt.mp3").read_bytes() == b"part"
        assert signal.getsignal(signum) == handler_before
