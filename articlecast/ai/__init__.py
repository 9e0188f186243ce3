"""AI providers for summaries, illustrations and narration."""

from articlecast.ai.base import AIProvider
from articlecast.ai.openai_ai import OpenAIProvider
from articlecast.ai.stream import AudioStream

__all__ = [
    "AIProvider",
    "AudioStream",
    "OpenAIProvider",
]
