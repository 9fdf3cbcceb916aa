import asyncio
from typing import Callable, Dict, List, Optional

from storyboarder.models import Asset


def image(name: str) -> Asset:
    return Asset.image(name.encode())


class FakeService:
    """In-memory GenerationService.

    Image calls are numbered in issue order. ``failures`` maps a call
    number to the exception it raises, ``gates`` to an event the call
    waits on before answering.
    """

    def __init__(self) -> None:
        self.image_calls: List[dict] = []
        self.speech_calls: List[tuple] = []
        self.revise_calls: List[str] = []
        self.failures: Dict[int, Exception] = {}
        self.gates: Dict[int, asyncio.Event] = {}
        self.on_image_call: Optional[Callable[[dict], None]] = None
        self.speech_error: Optional[Exception] = None
        self.revise_error: Optional[Exception] = None
        self.revised_prompt = '{"subject": "revised"}'

    async def generate_image(self, prompt, aspect_ratio, resolution, references):
        index = len(self.image_calls)
        call = {
            "index": index,
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "resolution": resolution,
            "references": list(references),
        }
        self.image_calls.append(call)
        if self.on_image_call:
            self.on_image_call(call)

        if index in self.gates:
            await self.gates[index].wait()
        else:
            await asyncio.sleep(0)

        if index in self.failures:
            raise self.failures[index]
        return image(f"generated-{index}")

    async def generate_speech(self, text, voice):
        self.speech_calls.append((text, voice))
        await asyncio.sleep(0)
        if self.speech_error:
            raise self.speech_error
        return Asset.audio(b"RIFF" + text.encode())

    async def revise_prompt(self, scene):
        self.revise_calls.append(scene.id)
        await asyncio.sleep(0)
        if self.revise_error:
            raise self.revise_error
        return self.revised_prompt


async def settle(rounds: int = 10) -> None:
    """Let every ready task run a few steps."""
    for _ in range(rounds):
        await asyncio.sleep(0)
