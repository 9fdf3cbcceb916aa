"""External service integrations."""

from .anthropic import AnthropicClient
from .base import GenerationService
from .gateway import VertexGenerationService
from .image import VertexImageClient
from .speech import VertexSpeechClient, pcm_to_wav

__all__ = [
    "AnthropicClient",
    "GenerationService",
    "VertexGenerationService",
    "VertexImageClient",
    "VertexSpeechClient",
    "pcm_to_wav",
]
