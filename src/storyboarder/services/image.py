"""Gemini image generation client via Vertex AI."""

import base64
import logging
from typing import Optional, Sequence

from ..config import config
from ..errors import QuotaExceededError, ServiceError
from ..models import Asset, AspectRatio, ImageResolution
from .vertex import VertexClient, inline_parts

logger = logging.getLogger(__name__)


class VertexImageClient(VertexClient):
    """Client wrapper for Gemini image models on Vertex AI."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the image client.

        Args:
            project_id: Google Cloud project ID.
            location: Vertex AI location.
            model: Primary image model name.
            fallback_model: Model tried once when the primary quota is exhausted.
                Pass an empty string to disable the fallback.
            timeout: HTTP timeout in seconds.
        """
        super().__init__(project_id=project_id, location=location, timeout=timeout)
        self._model = model or config.image_model
        self._fallback_model = (
            config.image_fallback_model if fallback_model is None else fallback_model
        )

    @property
    def model(self) -> str:
        return self._model

    def build_request(
        self,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: Optional[ImageResolution],
        references: Sequence[Asset],
    ) -> dict:
        """Build the request body; references precede the text, in order."""
        parts = [
            {"inlineData": {"mimeType": ref.mime_type, "data": ref.b64}}
            for ref in references
        ]
        parts.append({"text": prompt})

        image_config = {"aspectRatio": aspect_ratio.value}
        if resolution is not None:
            image_config["imageSize"] = resolution.value

        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": image_config,
            },
        }

    def generate_image(
        self,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.PORTRAIT,
        resolution: ImageResolution = ImageResolution.RES_2K,
        references: Sequence[Asset] = (),
    ) -> Asset:
        """Generate an image from a prompt and ordered reference images.

        Args:
            prompt: Text (or structured JSON) description of the frame.
            aspect_ratio: Frame aspect ratio.
            resolution: Requested fidelity tier.
            references: Reference images, most important first.

        Returns:
            The generated image asset.

        Raises:
            ServiceError: If generation fails on every model tried.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        logger.info(f"Generating image with {self._model}: {prompt[:50]}...")
        try:
            return self._generate(self._model, prompt, aspect_ratio, resolution, references)
        except QuotaExceededError:
            if not self._fallback_model:
                raise
            logger.warning(f"Quota exhausted for {self._model}, retrying with {self._fallback_model}")

        # The fallback model has a single fixed size
        return self._generate(self._fallback_model, prompt, aspect_ratio, None, references)

    def _generate(
        self,
        model: str,
        prompt: str,
        aspect_ratio: AspectRatio,
        resolution: Optional[ImageResolution],
        references: Sequence[Asset],
    ) -> Asset:
        body = self.build_request(prompt, aspect_ratio, resolution, references)
        data = self.generate_content(model, body)

        for inline in inline_parts(data):
            mime_type = inline.get("mimeType", "image/png")
            if mime_type.startswith("image/") and inline.get("data"):
                logger.debug(f"Received {mime_type} image from {model}")
                return Asset.image(base64.b64decode(inline["data"]), mime_type=mime_type)

        raise ServiceError("No image data in response")
