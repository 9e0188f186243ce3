"""Base class for AI providers."""

from abc import ABC, abstractmethod

from articlecast.ai.stream import AudioStream

SUMMARY_PROMPT = (
    "Summarize the following text into one or two sentences. No more than 50 words in total."
)
ILLUSTRATION_PROMPT = "An illustration for a podcast with covering the following:\n"

# The speech backend caps input at 4096 bytes; leave headroom for framing
SPEECH_MAX_BYTES = 4000


class AIProvider(ABC):
    """The three operations the episode pipeline needs from an AI backend."""

    @abstractmethod
    async def summary(self, text: str) -> str:
        """
        Summarize an article.

        Args:
            text: Full article text

        Returns:
            A summary of one or two sentences, no more than about 50 words
        """
        pass

    @abstractmethod
    async def illustration(self, text: str) -> bytes:
        """
        Generate a cover illustration.

        Args:
            text: Text describing the episode (the summary)

        Returns:
            PNG image bytes
        """
        pass

    @abstractmethod
    async def speech(self, text: str) -> AudioStream:
        """
        Narrate text.

        Args:
            text: Full article text

        Returns:
            An AudioStream yielding MP3 bytes while later parts are still
            being synthesized
        """
        pass
