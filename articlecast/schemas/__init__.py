"""Pydantic schemas for Articlecast."""

from articlecast.schemas.podcast import Article, ChannelConfig, Episode

__all__ = [
    "Article",
    "ChannelConfig",
    "Episode",
]
