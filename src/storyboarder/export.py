"""Writing generated assets and generation summaries to disk."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Sequence, Tuple, Union

from .models import Asset, Scene, Slot

logger = logging.getLogger(__name__)

AUDIO = "audio"


def asset_filename(index: int, slot: Union[Slot, str], asset: Asset) -> str:
    """Download name for an asset, e.g. ``scene_2_mid.jpg``.

    Args:
        index: Zero-based position of the scene in the storyboard.
        slot: Frame slot, or "audio".
        asset: The asset, which determines the extension.
    """
    label = slot.label if isinstance(slot, Slot) else slot
    return f"scene_{index + 1}_{label}{asset.extension}"


def export_assets(
    scenes: Sequence[Scene],
    output_dir: Path,
) -> Dict[Tuple[str, str], Path]:
    """Write every present frame and audio asset to ``output_dir``.

    Returns:
        Written paths keyed by (scene id, "start" | "middle" | "end" | "audio").
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: Dict[Tuple[str, str], Path] = {}

    for index, scene in enumerate(scenes):
        entries = [(slot.value, slot, scene.asset(slot)) for slot in Slot]
        entries.append((AUDIO, AUDIO, scene.audio))

        for key, slot, asset in entries:
            if asset is None:
                continue
            path = output_dir / asset_filename(index, slot, asset)
            path.write_bytes(asset.data)
            written[(scene.id, key)] = path
            logger.debug(f"Wrote {path}")

    logger.info(f"Exported {len(written)} assets to {output_dir}")
    return written


def save_generation_summary(scenes: Sequence[Scene], output_path: Path) -> None:
    """Save a JSON summary of what each scene has and which ones failed.

    Args:
        scenes: Scenes in storyboard order.
        output_path: Path to save the summary JSON.
    """
    summary = {
        "generated_at": datetime.now().isoformat(),
        "total_scenes": len(scenes),
        "frames": {
            slot.value: sum(1 for s in scenes if s.asset(slot) is not None)
            for slot in Slot
        },
        "audio": sum(1 for s in scenes if s.audio is not None),
        "failed": sum(1 for s in scenes if s.error),
        "scenes": [
            {
                "id": s.id,
                "frames": [slot.value for slot in Slot if s.asset(slot) is not None],
                "audio": s.audio is not None,
                "error": s.error,
            }
            for s in scenes
        ],
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved generation summary to {output_path}")
