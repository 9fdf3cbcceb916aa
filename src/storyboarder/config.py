"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from .constants import (
    DEFAULT_VOICE,
    MODEL_ANALYSIS,
    MODEL_ANALYSIS_FALLBACK,
    MODEL_IMAGE,
    MODEL_IMAGE_FALLBACK,
    MODEL_TTS,
)

# Load environment variables
load_dotenv()


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key"
    )
    google_application_credentials: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_APPLICATION_CREDENTIALS", ""),
        description="Path to Google Cloud service account JSON"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID"
    )
    google_cloud_location: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_LOCATION", "global"),
        description="Vertex AI location for Gemini models"
    )

    # Model settings
    default_model: str = Field(
        default=MODEL_ANALYSIS,
        description="Claude model used for prompt revision"
    )
    fallback_model: str = Field(
        default=MODEL_ANALYSIS_FALLBACK,
        description="Claude model used when the default model is rate limited"
    )
    image_model: str = Field(default=MODEL_IMAGE, description="Gemini image model")
    image_fallback_model: str = Field(
        default=MODEL_IMAGE_FALLBACK,
        description="Gemini image model used when the primary quota is exhausted"
    )
    tts_model: str = Field(default=MODEL_TTS, description="Gemini speech model")
    default_voice: str = Field(default=DEFAULT_VOICE, description="Prebuilt TTS voice")
    request_timeout: float = Field(default=180.0, description="HTTP timeout in seconds")

    # Failure message language
    locale: str = Field(
        default_factory=lambda: os.getenv("STORYBOARDER_LOCALE", "en"),
        description="Language of scene failure messages ('en' or 'zh')"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that required credentials are set."""
        if not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")

    def validate_vertex_required(self) -> None:
        """Validate that Vertex AI / Google Cloud settings are present.

        Raises:
            ValueError: If any required Vertex configuration is missing.
        """
        missing: list[str] = []

        if not self.google_cloud_project:
            missing.append("GOOGLE_CLOUD_PROJECT")
        if not self.google_cloud_location:
            missing.append("GOOGLE_CLOUD_LOCATION")

        if missing:
            raise ValueError(
                f"Missing required Vertex AI configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )

        if self.google_application_credentials and not Path(
            self.google_application_credentials
        ).exists():
            raise ValueError(
                "GOOGLE_APPLICATION_CREDENTIALS points to a missing file: "
                f"{self.google_application_credentials}"
            )


# Global config instance
config = Config()
