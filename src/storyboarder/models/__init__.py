"""Data models for the storyboard generator."""

from .asset import Asset, AssetKind
from .references import ReferencePools
from .scene import Scene
from .settings import AspectRatio, ImageResolution, Slot, StoryboardSettings, VideoMode
from .storyboard import Storyboard

__all__ = [
    "Asset",
    "AssetKind",
    "AspectRatio",
    "ImageResolution",
    "ReferencePools",
    "Scene",
    "Slot",
    "Storyboard",
    "StoryboardSettings",
    "VideoMode",
]
