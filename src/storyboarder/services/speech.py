"""Gemini text-to-speech client via Vertex AI."""

import base64
import io
import logging
import re
import wave
from typing import Optional

from ..config import config
from ..errors import ServiceError
from ..models import Asset
from .vertex import VertexClient, inline_parts

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 24000


def pcm_to_wav(pcm: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    """Wrap 16-bit mono PCM samples in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()


def _sample_rate(mime_type: str) -> int:
    match = re.search(r"rate=(\d+)", mime_type)
    return int(match.group(1)) if match else DEFAULT_SAMPLE_RATE


class VertexSpeechClient(VertexClient):
    """Client wrapper for Gemini speech synthesis on Vertex AI."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(project_id=project_id, location=location, timeout=timeout)
        self._model = model or config.tts_model

    @property
    def model(self) -> str:
        return self._model

    def build_request(self, text: str, voice: str) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}},
                },
            },
        }

    def generate_speech(self, text: str, voice: str) -> Asset:
        """Synthesize speech for ``text``.

        Returns:
            A WAV audio asset.

        Raises:
            ServiceError: If the service returns no audio.
        """
        logger.info(f"Synthesizing speech with voice {voice}: {text[:50]}...")
        data = self.generate_content(self._model, self.build_request(text, voice))

        for inline in inline_parts(data):
            mime_type = inline.get("mimeType", "")
            if not mime_type.startswith("audio/") or not inline.get("data"):
                continue
            raw = base64.b64decode(inline["data"])
            if mime_type.startswith("audio/wav"):
                return Asset.audio(raw)
            # Gemini returns raw little-endian PCM (audio/L16)
            return Asset.audio(pcm_to_wav(raw, _sample_rate(mime_type)))

        raise ServiceError("No audio data in response")
