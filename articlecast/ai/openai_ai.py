"""OpenAI provider for summaries, illustrations and speech."""

import httpx
from openai import AsyncOpenAI, OpenAIError

from articlecast.ai.base import (
    ILLUSTRATION_PROMPT,
    SPEECH_MAX_BYTES,
    SUMMARY_PROMPT,
    AIProvider,
)
from articlecast.ai.stream import AudioStream
from articlecast.config import Settings, get_settings
from articlecast.core.errors import RemoteError
from articlecast.core.logging import get_logger
from articlecast.text.chunker import split_text

logger = get_logger(__name__)


class OpenAIProvider(AIProvider):
    """
    OpenAI-backed provider.

    Uses chat completions for summaries, image generation plus an HTTP
    download for illustrations, and text-to-speech for narration. Long texts
    are split so each speech request stays within the backend's input limit.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the OpenAI provider.

        Args:
            client: Optional OpenAI client (defaults to one built from settings)
            settings: Optional settings (defaults to the cached settings)
            http_client: Optional HTTP client for downloading generated images
        """
        self.settings = settings or get_settings()
        self.client = client or AsyncOpenAI(api_key=self.settings.require_api_key())
        self.http_client = http_client

    async def summary(self, text: str) -> str:
        """Summarize text with a chat completion."""
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.chat_model,
                messages=[
                    {"role": "system", "content": SUMMARY_PROMPT},
                    {"role": "user", "content": text},
                ],
            )
        except OpenAIError as e:
            raise RemoteError(f"chat.completions.create: {e}") from e

        if not response.choices:
            raise RemoteError("no choices in response")

        summary = (response.choices[0].message.content or "").strip()
        if not summary:
            raise RemoteError("empty summary in response")

        logger.bind(model=self.settings.chat_model, length=len(summary)).debug(
            "openai_summary_generated"
        )
        return summary

    async def illustration(self, text: str) -> bytes:
        """Generate an image for text and download it as PNG bytes."""
        try:
            response = await self.client.images.generate(
                model=self.settings.image_model,
                prompt=ILLUSTRATION_PROMPT + text,
                size=self.settings.image_size,
                n=1,
            )
        except OpenAIError as e:
            raise RemoteError(f"images.generate: {e}") from e

        if not response.data or not response.data[0].url:
            raise RemoteError("no data in response")

        payload = await self._download(response.data[0].url)
        logger.bind(model=self.settings.image_model, size=len(payload)).debug(
            "openai_illustration_generated"
        )
        return payload

    async def speech(self, text: str) -> AudioStream:
        """
        Narrate text, one speech request per chunk.

        The text is split before any request is made, so an oversized
        sentence fails here without calling the backend.
        """
        chunks = split_text(SPEECH_MAX_BYTES, text)
        logger.bind(chunks=len(chunks), length=len(text)).debug("openai_speech_split")

        async def produce(stream: AudioStream) -> None:
            for i, chunk in enumerate(chunks, start=1):
                try:
                    response = await self.client.audio.speech.create(
                        model=self.settings.speech_model,
                        voice=self.settings.speech_voice,
                        input=chunk,
                        speed=self.settings.speech_speed,
                    )
                except OpenAIError as e:
                    raise RemoteError(f"audio.speech.create (chunk {i}/{len(chunks)}): {e}") from e

                audio = response.content
                await stream.write(audio)
                logger.bind(chunk=i, total=len(chunks), size=len(audio)).debug(
                    "openai_speech_chunk_synthesized"
                )

        stream = AudioStream()
        stream.start(produce)
        return stream

    async def _download(self, url: str) -> bytes:
        """Fetch a generated asset, requiring HTTP 200 and a non-empty body."""
        try:
            if self.http_client is not None:
                response = await self.http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.settings.http_timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as e:
            raise RemoteError(f"download illustration: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise RemoteError(f"bad status code downloading illustration: {response.status_code}")
        if not response.content:
            raise RemoteError("empty illustration payload")
        return response.content
