"""Reference image composition for frame generation."""

from typing import List, Optional

from .constants import MAX_PRODUCT_REFERENCES
from .models import Asset, ReferencePools, Scene, Slot


def compose_references(
    slot: Slot,
    scene: Scene,
    pools: ReferencePools,
    override_source: Optional[Asset] = None,
    product_cap: int = MAX_PRODUCT_REFERENCES,
) -> List[Asset]:
    """Build the ordered reference list for one generation call.

    The image service weights earlier references more heavily, so the
    primary structural anchor always goes first:

    - refinement (``override_source`` given): the image being edited,
      then the pools. The scene's own start/end frames are left out.
    - ``middle``: start frame, pools, then the end frame.
    - ``end``: start frame, then pools.
    - ``start``: pools only.

    Pools are always ordered model, background, product (capped).

    Args:
        slot: Slot being generated.
        scene: Current state of the scene.
        pools: Storyboard-wide reference pools.
        override_source: Existing image to refine, if any.
        product_cap: Maximum number of product references.

    Returns:
        Ordered list of reference images, possibly empty.
    """
    references: List[Asset] = [
        *pools.model,
        *pools.background,
        *pools.product[:product_cap],
    ]

    if override_source is not None:
        return [override_source, *references]

    if slot in (Slot.MIDDLE, Slot.END) and scene.start_image is not None:
        references.insert(0, scene.start_image)
    if slot is Slot.MIDDLE and scene.end_image is not None:
        references.append(scene.end_image)

    return references
