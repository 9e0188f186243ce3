"""Pydantic schemas for articles, episodes and channel metadata."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

# -----------------------------------------------------------------------------
# Channel Schemas
# -----------------------------------------------------------------------------


class ChannelConfig(BaseModel):
    """Channel metadata from channel.yaml."""

    title: str
    link: str
    description: str
    image: str | None = Field(default=None, description="Optional channel artwork URL")

    @field_validator("title", "link", "description", mode="before")
    @classmethod
    def _required_text(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            raise PydanticCustomError("required", "must be a non-empty string")
        return value


# -----------------------------------------------------------------------------
# Episode Schemas
# -----------------------------------------------------------------------------

SUMMARY_SUFFIX = ".summary.txt"
ILLUSTRATION_SUFFIX = ".png"
AUDIO_SUFFIX = ".mp3"


class Article(BaseModel):
    """A source .txt file in the scanned directory."""

    name: str
    content: str
    created_at: datetime  # source file mtime at scan time


class Episode(BaseModel):
    """An article together with its derived artifacts.

    File names are relative to the scanned directory; they double as the
    path component of the URLs in the feed.
    """

    content_file: str
    summary_file: str
    illustration_file: str
    audio_file: str
    summary: str = ""
    created_at: datetime
    updated_at: datetime | None = None  # audio file mtime after materialization

    @classmethod
    def for_article(cls, article: Article) -> "Episode":
        """Derive the sibling artifact names for an article."""
        return cls(
            content_file=article.name,
            summary_file=article.name + SUMMARY_SUFFIX,
            illustration_file=article.name + ILLUSTRATION_SUFFIX,
            audio_file=article.name + AUDIO_SUFFIX,
            created_at=article.created_at,
        )
