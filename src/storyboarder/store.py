"""Scene store: the single owner of the ordered scene sequence."""

import logging
import threading
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import SceneNotFoundError
from .models import Scene

logger = logging.getLogger(__name__)

SceneListener = Callable[[Scene], None]


class SceneStore:
    """Ordered scenes with one mutation primitive, ``patch``.

    Every patch replaces the scene object wholesale, so a snapshot handed
    out earlier never changes underneath its holder. Patches to the same
    scene apply in call order, last patch wins per field.
    """

    def __init__(self, scenes: Iterable[Scene] = ()) -> None:
        self._scenes: List[Scene] = list(scenes)
        self._lock = threading.Lock()
        self._listeners: List[SceneListener] = []

        ids = [scene.id for scene in self._scenes]
        if len(ids) != len(set(ids)):
            raise ValueError("Scene ids must be unique")

    @property
    def scenes(self) -> Tuple[Scene, ...]:
        """Read-only snapshot of the current sequence."""
        return tuple(self._scenes)

    def __len__(self) -> int:
        return len(self._scenes)

    def index_of(self, scene_id: str) -> int:
        for index, scene in enumerate(self._scenes):
            if scene.id == scene_id:
                return index
        raise SceneNotFoundError(scene_id)

    def get(self, scene_id: str) -> Scene:
        return self._scenes[self.index_of(scene_id)]

    def next_after(self, scene_id: str) -> Optional[Scene]:
        """Return the scene following ``scene_id`` in sequence order, if any."""
        index = self.index_of(scene_id)
        if index + 1 < len(self._scenes):
            return self._scenes[index + 1]
        return None

    def patch(self, scene_id: str, **updates) -> Scene:
        """Apply whole-field updates to one scene.

        Raises:
            SceneNotFoundError: If no scene has this id.
            ValueError: If an update names a field Scene doesn't have.
        """
        unknown = set(updates) - set(Scene.model_fields)
        if unknown:
            raise ValueError(f"Unknown scene fields: {', '.join(sorted(unknown))}")
        if "id" in updates:
            raise ValueError("Scene id cannot be patched")

        with self._lock:
            index = self.index_of(scene_id)
            patched = self._scenes[index].model_copy(update=updates)
            self._scenes[index] = patched

        # a failing observer must not abort the patch it observes
        for listener in list(self._listeners):
            try:
                listener(patched)
            except Exception as e:
                logger.error(f"Scene listener failed for {scene_id}: {e}")
        return patched

    def subscribe(self, listener: SceneListener) -> Callable[[], None]:
        """Call ``listener`` with the new scene after every patch.

        Errors raised by a listener are logged and never undo the patch.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
