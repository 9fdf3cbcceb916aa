"""Generation orchestrator: frames, continuity, prompt revision and speech."""

import asyncio
import logging
from collections import Counter
from typing import Dict, Optional, Tuple

from .composer import compose_references
from .config import config
from .constants import failure_message
from .models import Asset, ImageResolution, ReferencePools, Slot, StoryboardSettings, VideoMode
from .services.base import GenerationService
from .store import SceneStore

logger = logging.getLogger(__name__)


class GenerationOrchestrator:
    """Drives generation calls for a storyboard and writes results to the store.

    Calls are never cancelled or locked. When two calls for the same slot
    overlap, whichever resolves last owns the slot, even if it was issued
    first. A flag stays raised while any call behind it is outstanding and
    is always cleared once the last of them settles, success or failure.
    """

    def __init__(
        self,
        store: SceneStore,
        service: GenerationService,
        settings: Optional[StoryboardSettings] = None,
        references: Optional[ReferencePools] = None,
        voice: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Scene store to read from and patch.
            service: External generation backend.
            settings: Storyboard settings (mode, aspect ratio, fidelity).
            references: Reference pools sent with frame requests.
            voice: Voice assigned to the whole storyboard.
            locale: Language of failure messages. Defaults to config.locale.
        """
        self._store = store
        self._service = service
        self._settings = settings or StoryboardSettings()
        self._references = references or ReferencePools()
        self._voice = voice or config.default_voice
        self._locale = locale or config.locale
        self._in_flight: Counter[Tuple[str, str]] = Counter()

    @property
    def store(self) -> SceneStore:
        return self._store

    @property
    def mode(self) -> VideoMode:
        return self._settings.video_mode

    def resolution_for(self, slot: Slot) -> ImageResolution:
        """Fidelity for a slot; Intermediate drafts always use the lowest tier."""
        if slot is Slot.MIDDLE and self.mode is VideoMode.INTERMEDIATE:
            return ImageResolution.lowest()
        return self._settings.resolution

    def _begin(self, scene_id: str, flag: str, **updates) -> None:
        # unknown ids raise before anything is counted
        self._store.index_of(scene_id)
        self._in_flight[(scene_id, flag)] += 1
        self._store.patch(scene_id, **{flag: True}, **updates)

    def _finish(self, scene_id: str, flag: str) -> None:
        # overlapping calls share one flag; it drops when the last one settles
        key = (scene_id, flag)
        self._in_flight[key] -= 1
        if self._in_flight[key] <= 0:
            del self._in_flight[key]
            self._store.patch(scene_id, **{flag: False})

    async def generate(
        self,
        scene_id: str,
        slot: Slot,
        prompt_override: Optional[str] = None,
        override_source: Optional[Asset] = None,
    ) -> Optional[Asset]:
        """Generate one frame for a scene.

        The in-flight flag is raised before the first suspension point.
        On success the asset is stored in the slot; an ``end`` frame is
        also chained into the next scene (see ``propagate_continuity``).
        On failure the scene error is set and the slot is left untouched.

        Args:
            scene_id: Scene to generate for.
            slot: Frame slot to fill.
            prompt_override: Prompt used instead of the scene's stored prompt.
            override_source: Existing image to refine; becomes the first reference.

        Returns:
            The new asset, or None if the service call failed.

        Raises:
            ValueError: If the video mode has no such slot.
        """
        if slot not in self.mode.slots:
            raise ValueError(f"Slot '{slot.value}' is not used in {self.mode.value} mode")

        self._begin(scene_id, slot.flag, error=None)
        try:
            scene = self._store.get(scene_id)
            prompt = prompt_override or scene.prompt
            resolution = self.resolution_for(slot)
            references = compose_references(slot, scene, self._references, override_source)

            logger.info(
                f"Generating {slot.value} frame for {scene_id} "
                f"({resolution.value}, {len(references)} references)"
            )
            try:
                asset = await self._service.generate_image(
                    prompt,
                    self._settings.aspect_ratio,
                    resolution,
                    references,
                )
            except Exception as e:
                logger.error(f"Frame generation failed for {scene_id}/{slot.value}: {e}")
                self._store.patch(scene_id, error=failure_message("image", e, self._locale))
                return None

            self._store.patch(scene_id, **{slot.field: asset})
            if slot is Slot.END and self.mode.chains_continuity:
                self.propagate_continuity(scene_id, asset)
            return asset
        finally:
            self._finish(scene_id, slot.flag)

    def propagate_continuity(self, scene_id: str, asset: Asset) -> None:
        """Copy an end frame into the next scene's start slot.

        Always overwrites: a start frame the user generated or picked for
        the next scene is replaced. Only the next scene's ``start`` slot is
        ever written.
        """
        next_scene = self._store.next_after(scene_id)
        if next_scene is None:
            return

        if next_scene.start_image is not None and next_scene.start_image != asset:
            logger.info(f"Overwriting start frame of {next_scene.id} with end frame of {scene_id}")
        else:
            logger.debug(f"Chaining end frame of {scene_id} into {next_scene.id}")
        self._store.patch(next_scene.id, start_image=asset)

    async def generate_all(self, scene_id: str) -> Dict[Slot, Optional[Asset]]:
        """Fill every empty slot the video mode needs for one scene.

        The start frame is generated first when missing. In modes that need
        an end frame, a missing start frame stops the batch silently.
        Middle and end frames are then generated concurrently; one failing
        never affects the other.

        Returns:
            The attempted slots mapped to their new asset (None on failure).
        """
        results: Dict[Slot, Optional[Asset]] = {}

        start = self._store.get(scene_id).start_image
        if start is None:
            start = await self.generate(scene_id, Slot.START)
            results[Slot.START] = start

        if start is None and self.mode.chains_continuity:
            logger.info(f"No start frame for {scene_id}; skipping remaining frames")
            return results

        scene = self._store.get(scene_id)
        pending = [
            slot
            for slot in (Slot.MIDDLE, Slot.END)
            if slot in self.mode.slots and scene.asset(slot) is None
        ]
        assets = await asyncio.gather(*(self.generate(scene_id, slot) for slot in pending))
        results.update(zip(pending, assets))
        return results

    async def refine(self, scene_id: str, slot: Slot, instruction: str) -> Optional[Asset]:
        """Regenerate a frame from its current image and a modification request.

        Does nothing when the slot is empty or the instruction is blank.
        """
        source = self._store.get(scene_id).asset(slot)
        if source is None or not instruction.strip():
            return None
        return await self.generate(
            scene_id,
            slot,
            prompt_override=instruction,
            override_source=source,
        )

    def update_prompt(self, scene_id: str, prompt: str) -> None:
        """Replace the stored generation prompt with a hand-edited one."""
        self._store.patch(scene_id, prompt=prompt)

    async def revise_prompt(self, scene_id: str) -> Optional[str]:
        """Rebuild the scene's generation prompt after its narrative changed.

        Returns:
            The new prompt, or None if the service call failed.
        """
        self._begin(scene_id, "updating_prompt")
        try:
            scene = self._store.get(scene_id)
            try:
                prompt = await self._service.revise_prompt(scene)
            except Exception as e:
                logger.error(f"Prompt revision failed for {scene_id}: {e}")
                self._store.patch(scene_id, error=failure_message("prompt", e, self._locale))
                return None

            self._store.patch(scene_id, prompt=prompt)
            return prompt
        finally:
            self._finish(scene_id, "updating_prompt")

    async def synthesize_audio(self, scene_id: str) -> Optional[Asset]:
        """Voice the scene's dialogue with the storyboard voice.

        Returns:
            The audio asset, or None if there is no dialogue or the call failed.
        """
        scene = self._store.get(scene_id)
        if not scene.dialogue.strip():
            return None

        self._begin(scene_id, "generating_audio", error=None)
        try:
            try:
                audio = await self._service.generate_speech(scene.dialogue, self._voice)
            except Exception as e:
                logger.error(f"Speech synthesis failed for {scene_id}: {e}")
                self._store.patch(scene_id, error=failure_message("audio", e, self._locale))
                return None

            self._store.patch(scene_id, audio=audio)
            return audio
        finally:
            self._finish(scene_id, "generating_audio")
