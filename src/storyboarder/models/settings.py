"""Storyboard-wide generation settings."""

from enum import Enum
from pydantic import BaseModel, Field


class AspectRatio(str, Enum):
    """Output frame aspect ratio."""
    PORTRAIT = "9:16"
    LANDSCAPE = "16:9"
    SQUARE = "1:1"
    CLASSIC = "4:3"
    PORTRAIT_CLASSIC = "3:4"


class ImageResolution(str, Enum):
    """Image fidelity tier, lowest first."""
    RES_1K = "1K"
    RES_2K = "2K"
    RES_4K = "4K"

    @classmethod
    def lowest(cls) -> "ImageResolution":
        return cls.RES_1K


class Slot(str, Enum):
    """Image frame slot of a scene."""
    START = "start"
    MIDDLE = "middle"
    END = "end"

    @property
    def field(self) -> str:
        """Scene attribute holding this slot's asset."""
        return f"{self.value}_image"

    @property
    def flag(self) -> str:
        """Scene attribute that is true while this slot is generating."""
        return f"generating_{self.value}"

    @property
    def label(self) -> str:
        """Short name used in exported file names."""
        return "mid" if self is Slot.MIDDLE else self.value


class VideoMode(str, Enum):
    """Which frames a scene needs."""
    STANDARD = "standard"          # start frame only
    START_END = "start_end"        # start + end
    INTERMEDIATE = "intermediate"  # start + draft middle + end

    @property
    def slots(self) -> tuple[Slot, ...]:
        if self is VideoMode.INTERMEDIATE:
            return (Slot.START, Slot.MIDDLE, Slot.END)
        if self is VideoMode.START_END:
            return (Slot.START, Slot.END)
        return (Slot.START,)

    @property
    def chains_continuity(self) -> bool:
        """Whether an end frame becomes the next scene's start frame."""
        return self is not VideoMode.STANDARD


class StoryboardSettings(BaseModel):
    """Settings chosen once per storyboard."""

    aspect_ratio: AspectRatio = Field(default=AspectRatio.PORTRAIT, description="Frame aspect ratio")
    resolution: ImageResolution = Field(default=ImageResolution.RES_2K, description="Configured fidelity")
    video_mode: VideoMode = Field(default=VideoMode.STANDARD, description="Frames per scene")

    class Config:
        """Pydantic config."""
        frozen = False
