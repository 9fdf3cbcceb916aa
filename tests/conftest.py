import pytest

from storyboarder.models import ReferencePools, Scene, StoryboardSettings, VideoMode
from storyboarder.orchestrator import GenerationOrchestrator
from storyboarder.store import SceneStore

from fakes import FakeService, image


def make_scenes(count: int = 3) -> list[Scene]:
    return [
        Scene(
            id=f"s{i}",
            visual_en=f"visual {i}",
            action_en=f"action {i}",
            camera_en="slow push in",
            dialogue=f"line {i}",
            prompt=f"prompt {i}",
        )
        for i in range(1, count + 1)
    ]


@pytest.fixture
def pools() -> ReferencePools:
    return ReferencePools(
        model=[image("model-1"), image("model-2")],
        background=[image("bg-1")],
        product=[image("product-1"), image("product-2"), image("product-3")],
    )


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def build(service, pools):
    """Build an orchestrator over fresh scenes for a given mode."""

    def _build(mode: VideoMode = VideoMode.START_END, count: int = 3, **kwargs):
        settings = StoryboardSettings(video_mode=mode, **kwargs)
        store = SceneStore(make_scenes(count))
        return GenerationOrchestrator(
            store, service, settings=settings, references=pools, voice="Puck", locale="en"
        )

    return _build
