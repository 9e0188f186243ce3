"""Episode pipeline: turn a directory of articles into podcast episodes.

For every ``<name>.txt`` article the pipeline makes sure three sibling
artifacts exist, generating only the ones that are missing:

- ``<name>.txt.summary.txt`` - short summary (also the episode description)
- ``<name>.txt.png`` - cover illustration, prompted from the summary
- ``<name>.txt.mp3`` - narration of the full article

Once an artifact exists it is never requested again, so re-running on the
same directory makes no remote calls.
"""

import os
import stat
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from articlecast.ai.base import AIProvider
from articlecast.core.datetime_utils import from_timestamp
from articlecast.core.errors import ArticlecastError, RemoteError, StorageError
from articlecast.core.logging import get_logger
from articlecast.podcast.rss_feed import generate_podcast_rss
from articlecast.schemas.podcast import SUMMARY_SUFFIX, Article, ChannelConfig, Episode

logger = get_logger(__name__)

ARTICLE_SUFFIX = ".txt"
FILE_MODE = 0o644


@contextmanager
def open_artifact(path: Path) -> Iterator[BinaryIO]:
    """Open an artifact for writing from scratch (create, truncate, mode 0644)."""
    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, FILE_MODE)
    except OSError as e:
        raise StorageError(f"open {path}: {e}") from e
    with os.fdopen(fd, "wb") as fh:
        yield fh


def write_artifact(path: Path, data: bytes) -> None:
    """Write a complete artifact file."""
    with open_artifact(path) as fh:
        try:
            fh.write(data)
        except OSError as e:
            raise StorageError(f"write {path}: {e}") from e


def has_artifact(path: Path) -> bool:
    """True if path exists and is non-empty."""
    try:
        return path.stat().st_size > 0
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageError(f"stat {path}: {e}") from e


def list_articles(directory: Path) -> list[Path]:
    """
    List article files in a directory, oldest first.

    Articles are regular ``.txt`` files that are not ``.summary.txt``
    sidecars. Order is ascending modification time, ties broken by name.
    """
    try:
        paths = list(directory.iterdir())
    except OSError as e:
        raise StorageError(f"read directory {directory}: {e}") from e

    articles = []
    for path in paths:
        if path.suffix != ARTICLE_SUFFIX:
            logger.bind(file=path.name).debug("scan_skipping_non_txt")
            continue
        if path.name.endswith(SUMMARY_SUFFIX):
            logger.bind(file=path.name).debug("scan_skipping_summary")
            continue

        try:
            info = path.stat()
        except FileNotFoundError:
            logger.bind(file=path.name).debug("scan_skipping_dangling_link")
            continue
        except OSError as e:
            raise StorageError(f"stat {path}: {e}") from e
        if not stat.S_ISREG(info.st_mode):
            continue
        articles.append((info.st_mtime_ns, path.name, path))

    return [path for _, _, path in sorted(articles)]


class FeedManager:
    """
    Build podcast episodes from articles and render them as a feed.

    Handles:
    - Directory scanning in modification-time order
    - Per-article summary, illustration and audio generation
    - RSS rendering of the accumulated episodes
    """

    def __init__(self, ai: AIProvider, channel: ChannelConfig):
        """
        Initialize the feed manager.

        Args:
            ai: Provider used to generate missing artifacts
            channel: Channel metadata for the feed
        """
        self.ai = ai
        self.channel = channel
        self.episodes: list[Episode] = []

    async def scan(self, directory: Path) -> list[Episode]:
        """
        Add an episode for every article in directory.

        The first failing article aborts the scan; episodes added before it
        stay in the list and their artifacts stay on disk.

        Returns:
            All episodes added so far
        """
        try:
            articles = list_articles(directory)
            logger.bind(directory=str(directory), articles=len(articles)).info("scan_started")
            for path in articles:
                await self.add_episode(path)
        except ArticlecastError as e:
            raise e.add_context(f"scan({directory})")

        logger.bind(directory=str(directory), episodes=len(self.episodes)).info("scan_completed")
        return self.episodes

    async def add_episode(self, content_path: Path) -> Episode:
        """
        Materialize all artifacts of one article and add its episode.

        Steps run in order, each one skipped if its artifact already exists:
        summary, then illustration (prompted from the summary), then audio.
        """
        try:
            article = self._load_article(content_path)
            directory = content_path.parent
            episode = Episode.for_article(article)
            log = logger.bind(article=article.name)

            episode.summary = await self._ensure_summary(
                article, directory / episode.summary_file, log
            )
            await self._ensure_illustration(
                episode.summary, directory / episode.illustration_file, log
            )
            episode.updated_at = await self._ensure_audio(
                article, directory / episode.audio_file, log
            )
        except ArticlecastError as e:
            raise e.add_context(f"add_episode({content_path.name})")

        self.episodes.append(episode)
        log.bind(episodes=len(self.episodes)).debug("episode_added")
        return episode

    def generate_rss(self, now: datetime | None = None) -> str:
        """Render the accumulated episodes as an RSS document."""
        return generate_podcast_rss(self.episodes, self.channel, now=now)

    def _load_article(self, path: Path) -> Article:
        try:
            info = path.stat()
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"read {path}: {e}") from e

        if not content:
            raise StorageError(f"empty article {path}")

        return Article(
            name=path.name,
            content=content,
            created_at=from_timestamp(info.st_mtime),
        )

    async def _ensure_summary(self, article: Article, path: Path, log) -> str:
        try:
            summary = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            summary = ""
        except UnicodeDecodeError:
            log.bind(file=path.name).warning("episode_summary_unreadable")
            summary = ""
        except OSError as e:
            raise StorageError(f"read {path}: {e}") from e

        if summary:
            return summary

        log.info("episode_summary_missing_generating")
        try:
            summary = await self.ai.summary(article.content)
        except ArticlecastError as e:
            raise e.add_context("summary")

        write_artifact(path, summary.encode("utf-8"))
        log.bind(length=len(summary)).debug("episode_summary_written")
        return summary

    async def _ensure_illustration(self, summary: str, path: Path, log) -> None:
        if has_artifact(path):
            return

        log.info("episode_illustration_missing_generating")
        try:
            image = await self.ai.illustration(summary)
        except ArticlecastError as e:
            raise e.add_context("illustration")

        write_artifact(path, image)
        log.bind(size=len(image)).debug("episode_illustration_written")

    async def _ensure_audio(self, article: Article, path: Path, log) -> datetime:
        if not has_artifact(path):
            log.info("episode_audio_missing_generating")
            try:
                written = await self._write_audio(article.content, path)
            except ArticlecastError as e:
                raise e.add_context("speech")
            log.bind(size=written).info("episode_audio_written")

        try:
            info = path.stat()
        except OSError as e:
            raise StorageError(f"stat {path}: {e}") from e
        return from_timestamp(info.st_mtime)

    async def _write_audio(self, content: str, path: Path) -> int:
        stream = await self.ai.speech(content)
        written = 0
        async with stream:
            with open_artifact(path) as fh:
                async for block in stream:
                    try:
                        fh.write(block)
                    except OSError as e:
                        raise StorageError(f"write {path}: {e}") from e
                    written += len(block)

        if not written:
            raise RemoteError("no audio received")
        return written
