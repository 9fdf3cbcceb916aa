"""Async generation service backed by Vertex AI and Claude."""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional, Sequence

from anthropic import APIError

from ..errors import ServiceError
from ..models import Asset, AspectRatio, ImageResolution, Scene
from .image import VertexImageClient
from .speech import VertexSpeechClient

if TYPE_CHECKING:
    from ..agents import PromptRevisionAgent

logger = logging.getLogger(__name__)


class VertexGenerationService:
    """GenerationService running the blocking clients in worker threads.

    The event loop only waits at these calls, so frames for other scenes
    and slots keep progressing while one request is outstanding.
    """

    def __init__(
        self,
        image_client: Optional[VertexImageClient] = None,
        speech_client: Optional[VertexSpeechClient] = None,
        prompt_agent: Optional["PromptRevisionAgent"] = None,
    ) -> None:
        self._image_client = image_client
        self._speech_client = speech_client
        self._prompt_agent = prompt_agent

    @property
    def image_client(self) -> VertexImageClient:
        if self._image_client is None:
            self._image_client = VertexImageClient()
        return self._image_client

    @property
    def speech_client(self) -> VertexSpeechClient:
        if self._speech_client is None:
            self._speech_client = VertexSpeechClient()
        return self._speech_client

    @property
    def prompt_agent(self) -> "PromptRevisionAgent":
        if self._prompt_agent is None:
            from ..agents import PromptRevisionAgent

            self._prompt_agent = PromptRevisionAgent()
        return self._prompt_agent

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: ImageResolution,
        references: Sequence[Asset],
    ) -> Asset:
        return await asyncio.to_thread(
            self.image_client.generate_image,
            prompt,
            aspect_ratio,
            resolution,
            list(references),
        )

    async def generate_speech(self, text: str, voice: str) -> Asset:
        return await asyncio.to_thread(self.speech_client.generate_speech, text, voice)

    async def revise_prompt(self, scene: Scene) -> str:
        try:
            return await asyncio.to_thread(self.prompt_agent.run, scene)
        except APIError as e:
            raise ServiceError(f"Claude API error: {e}") from e
