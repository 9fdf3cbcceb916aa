"""Storyboard-wide reference image pools."""

import logging
from pathlib import Path
from typing import List, Sequence
from pydantic import BaseModel, Field

from ..constants import MAX_REFERENCE_IMAGES
from .asset import Asset, AssetKind

logger = logging.getLogger(__name__)


class ReferencePools(BaseModel):
    """Previously uploaded images sent along with every frame request.

    Read-only from the orchestrator's side; any number of concurrent
    generation calls may read the same pools.
    """

    model: List[Asset] = Field(default_factory=list, description="Model / talent references")
    background: List[Asset] = Field(default_factory=list, description="Background references")
    product: List[Asset] = Field(default_factory=list, description="Product shots")

    class Config:
        """Pydantic config."""
        frozen = True

    @classmethod
    def from_paths(
        cls,
        model: Sequence[Path] = (),
        background: Sequence[Path] = (),
        product: Sequence[Path] = (),
    ) -> "ReferencePools":
        """Load the three pools from image files.

        Each pool keeps at most MAX_REFERENCE_IMAGES images.
        """
        return cls(
            model=_load_pool("model", model),
            background=_load_pool("background", background),
            product=_load_pool("product", product),
        )


def _load_pool(name: str, paths: Sequence[Path]) -> List[Asset]:
    if len(paths) > MAX_REFERENCE_IMAGES:
        logger.warning(
            f"{name} pool has {len(paths)} images, keeping the first {MAX_REFERENCE_IMAGES}"
        )
        paths = paths[:MAX_REFERENCE_IMAGES]

    images: List[Asset] = []
    for path in paths:
        asset = Asset.from_file(Path(path))
        if asset.kind is not AssetKind.IMAGE:
            raise ValueError(f"Reference is not an image: {path}")
        images.append(asset)
    return images
