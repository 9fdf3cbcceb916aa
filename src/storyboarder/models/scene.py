"""Scene data model."""

from typing import Optional
from pydantic import BaseModel, Field

from .asset import Asset
from .settings import Slot


class Scene(BaseModel):
    """Represents a single scene of the storyboard.

    Narrative fields come in pairs: the plain field is shown to the user,
    the ``_en`` field feeds the generation models.
    """

    id: str = Field(..., description="Unique scene identifier")

    # Narrative
    visual: str = Field(default="", description="Visual description")
    visual_en: str = Field(default="", description="Visual description (English)")
    action: str = Field(default="", description="Action")
    action_en: str = Field(default="", description="Action (English)")
    camera: str = Field(default="", description="Camera directive")
    camera_en: str = Field(default="", description="Camera directive (English)")
    dialogue: str = Field(default="", description="Dialogue in the target language")
    dialogue_cn: str = Field(default="", description="Dialogue in the reference language")
    prompt: str = Field(default="", description="Structured image generation prompt")

    # Assets
    start_image: Optional[Asset] = Field(None, description="Start frame")
    middle_image: Optional[Asset] = Field(None, description="Draft middle frame")
    end_image: Optional[Asset] = Field(None, description="End frame")
    audio: Optional[Asset] = Field(None, description="Synthesized dialogue")

    # Transient state
    generating_start: bool = False
    generating_middle: bool = False
    generating_end: bool = False
    generating_audio: bool = False
    updating_prompt: bool = False
    error: Optional[str] = Field(None, description="Last failure message")

    class Config:
        """Pydantic config."""
        frozen = False

    def asset(self, slot: Slot) -> Optional[Asset]:
        """Return the asset occupying ``slot``, if any."""
        return getattr(self, slot.field)

