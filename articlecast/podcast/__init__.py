"""Podcast episode pipeline and feed generation."""

from articlecast.podcast.feed_manager import FeedManager
from articlecast.podcast.rss_feed import generate_podcast_rss

__all__ = [
    "FeedManager",
    "generate_podcast_rss",
]
