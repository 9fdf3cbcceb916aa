"""Storyboard document model."""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field
import yaml

from ..constants import DEFAULT_VOICE
from .asset import Asset
from .references import ReferencePools
from .scene import Scene
from .settings import StoryboardSettings

# Scene attributes stored as file paths in the YAML document
ASSET_FIELDS = {
    "start": "start_image",
    "middle": "middle_image",
    "end": "end_image",
    "audio": "audio",
}

TRANSIENT_FIELDS = {
    "generating_start",
    "generating_middle",
    "generating_end",
    "generating_audio",
    "updating_prompt",
    "error",
}


class ReferencePaths(BaseModel):
    """Reference image files, relative to the storyboard file."""

    model: List[str] = Field(default_factory=list)
    background: List[str] = Field(default_factory=list)
    product: List[str] = Field(default_factory=list)


class Storyboard(BaseModel):
    """A product video storyboard as stored on disk."""

    project_name: str = Field(..., description="Project name")
    settings: StoryboardSettings = Field(default_factory=StoryboardSettings)
    assigned_voice: str = Field(default=DEFAULT_VOICE, description="Voice used for every scene")
    references: ReferencePaths = Field(default_factory=ReferencePaths)
    scenes: List[Scene] = Field(default_factory=list, description="Scenes in playback order")

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def from_yaml(cls, path: Path) -> "Storyboard":
        """Load a storyboard from YAML, reading asset files it points to."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        base_dir = path.parent
        for scene_data in data.get("scenes", []):
            for field_name in ASSET_FIELDS.values():
                value = scene_data.get(field_name)
                if isinstance(value, str):
                    scene_data[field_name] = Asset.from_file(base_dir / value)
        return cls(**data)

    def to_yaml(
        self,
        path: Path,
        asset_paths: Optional[Dict[Tuple[str, str], Path]] = None,
    ) -> None:
        """Save the storyboard to YAML.

        Asset bytes are never written to the document. Pass the mapping
        returned by ``export_assets`` to record where each asset lives.
        """
        asset_paths = asset_paths or {}
        exclude = TRANSIENT_FIELDS | set(ASSET_FIELDS.values())
        data = self.model_dump(mode="json", exclude={"scenes": {"__all__": exclude}})

        for scene_data in data["scenes"]:
            for name, field_name in ASSET_FIELDS.items():
                asset_path = asset_paths.get((scene_data["id"], name))
                if asset_path is not None:
                    scene_data[field_name] = _relative_to(asset_path, path.parent)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def load_references(self, base_dir: Path) -> ReferencePools:
        """Load the reference pools listed in this storyboard."""
        return ReferencePools.from_paths(
            model=[base_dir / p for p in self.references.model],
            background=[base_dir / p for p in self.references.background],
            product=[base_dir / p for p in self.references.product],
        )


def _relative_to(path: Path, base_dir: Path) -> str:
    try:
        return Path(os.path.relpath(path, base_dir)).as_posix()
    except ValueError:
        # different drive on Windows
        return str(path)
