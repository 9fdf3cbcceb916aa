"""Exception types."""

from typing import Optional


class StoryboardError(Exception):
    """Base class for storyboarder errors."""


class SceneNotFoundError(StoryboardError, KeyError):
    """Raised when a scene id is not part of the storyboard."""

    def __init__(self, scene_id: str) -> None:
        super().__init__(scene_id)
        self.scene_id = scene_id

    def __str__(self) -> str:
        return f"Unknown scene: {self.scene_id}"


class ServiceError(StoryboardError):
    """An external generation call was rejected.

    Attributes:
        status_code: HTTP status returned by the service, if any.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QuotaExceededError(ServiceError):
    """The service refused the call because a quota or rate limit was hit."""


class ContentBlockedError(ServiceError):
    """The prompt or the generated content was blocked by a safety filter."""
