"""
Articlecast CLI - turn a directory of articles into a podcast feed.

Usage:
    articlecast <directory>       Generate missing artifacts, print RSS to stdout
    articlecast -d <directory>    Same, with debug logging on stderr
    articlecast -v                Print version and exit

Requires OPENAI_API_KEY (environment or .env) and channel.yaml in the
working directory.
"""

import asyncio
import contextlib
import signal
from pathlib import Path

import typer

from articlecast import __version__

app = typer.Typer(
    name="articlecast",
    help="Narrate a directory of articles and publish them as a podcast feed.",
    add_completion=False,
)


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(message, err=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


async def _run(directory: Path) -> str:
    """Scan directory and render the feed, cancelling cleanly on SIGINT/SIGTERM."""
    from articlecast.ai.openai_ai import OpenAIProvider
    from articlecast.config import get_settings, load_channel_config
    from articlecast.core.errors import CanceledError
    from articlecast.podcast.feed_manager import FeedManager

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Not available on every platform (e.g. Windows)
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, task.cancel)

    try:
        settings = get_settings()
        ai = OpenAIProvider(settings=settings)
        channel = load_channel_config(Path(settings.channel_file))

        manager = FeedManager(ai, channel)
        await manager.scan(directory)
        return manager.generate_rss()
    except asyncio.CancelledError:
        raise CanceledError("interrupted") from None
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(sig)


@app.command()
def main(
    directory: Path | None = typer.Argument(None, help="Directory of .txt articles to scan"),
    debug: bool = typer.Option(False, "-d", "--debug", help="Enable debug output"),
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Generate summaries, illustrations and audio for articles, then print an RSS feed."""
    from articlecast.core.errors import ArticlecastError
    from articlecast.core.logging import get_logger, setup_logging

    if directory is None:
        _print_error("usage: articlecast [-d] [-v] <directory>")
        raise typer.Exit(1)

    setup_logging(debug)
    logger = get_logger(__name__)
    logger.debug("debug_output_enabled")

    try:
        rss = asyncio.run(_run(directory))
    except ArticlecastError as e:
        _print_error(f"run error: {e}")
        raise typer.Exit(1)

    typer.echo(rss)
    logger.debug("clean_exit")


if __name__ == "__main__":
    app()
