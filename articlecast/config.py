from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from articlecast.core.errors import InvalidArgumentError, StorageError
from articlecast.schemas.podcast import ChannelConfig

# Validation errors reported as a missing field (absent, null or blank)
REQUIRED_ERROR_TYPES = ("missing", "required")


class Settings(BaseSettings):
    """Application settings from environment variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Keys
    openai_api_key: str = Field(default="")

    # Remote service choices
    chat_model: str = Field(default="gpt-3.5-turbo")
    image_model: str = Field(default="dall-e-2")
    image_size: str = Field(default="512x512")
    speech_model: str = Field(default="tts-1-hd")
    speech_voice: str = Field(default="alloy")
    speech_speed: float = Field(default=1.0)
    http_timeout: float = Field(default=10.0)  # seconds, illustration download

    # Channel metadata file, relative to the working directory
    channel_file: str = Field(default="channel.yaml")

    def require_api_key(self) -> str:
        """Return the OpenAI API key or fail if it is not configured."""
        if not self.openai_api_key:
            raise InvalidArgumentError("'OPENAI_API_KEY' is required")
        return self.openai_api_key


def load_channel_config(path: Path) -> ChannelConfig:
    """
    Load channel metadata from a YAML file.

    Args:
        path: Path to the channel file (usually channel.yaml)

    Returns:
        Validated ChannelConfig

    Raises:
        StorageError: If the file cannot be read
        InvalidArgumentError: If the YAML is malformed or a field is missing, empty or invalid
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise StorageError(f"read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidArgumentError(f"parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidArgumentError(f"parse {path}: expected a mapping")

    try:
        return ChannelConfig.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        if error["type"] in REQUIRED_ERROR_TYPES:
            raise InvalidArgumentError(f"{field} is required") from e
        raise InvalidArgumentError(f"{field}: {error['msg']}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
