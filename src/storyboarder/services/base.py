"""Contract of the external generation service."""

from typing import Protocol, Sequence

from ..models import Asset, AspectRatio, ImageResolution, Scene


class GenerationService(Protocol):
    """Asynchronous generative backend used by the orchestrator.

    Every method either returns its payload or raises ``ServiceError``
    (quota, content policy, network). Each call is a suspension point.
    """

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: ImageResolution,
        references: Sequence[Asset],
    ) -> Asset:
        """Generate one image, anchored on ``references`` in order."""
        ...

    async def generate_speech(self, text: str, voice: str) -> Asset:
        """Synthesize ``text`` with a prebuilt voice."""
        ...

    async def revise_prompt(self, scene: Scene) -> str:
        """Rebuild the structured generation prompt from the scene's narrative."""
        ...
