"""Prompt revision agent: keeps a scene's generation prompt in sync with its narrative."""

import json
import logging
from pathlib import Path

from ..models import Scene
from .base import BaseAgent

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE_PATH = Path(__file__).parent.parent / "templates" / "revise_prompt.txt"


def _load_system_prompt() -> str:
    """Load the system prompt from template file."""
    if PROMPT_TEMPLATE_PATH.exists():
        return PROMPT_TEMPLATE_PATH.read_text(encoding="utf-8")
    return """You maintain structured image-generation prompts for product video storyboards.
Given a scene's narrative and its current prompt, rewrite the prompt so it matches the narrative.
Keep the structure and keys of the current prompt. Output valid JSON only."""


class PromptRevisionAgent(BaseAgent[Scene, str]):
    """Agent that rewrites a scene's structured prompt after narrative edits.

    The reply is expected to be a JSON object. It is returned
    pretty-printed; a reply without JSON is returned as plain text.
    """

    @property
    def name(self) -> str:
        return "PromptRevisionAgent"

    @property
    def system_prompt(self) -> str:
        return _load_system_prompt()

    def run(self, input_data: Scene) -> str:
        """Return the revised prompt for ``input_data``.

        Raises:
            ValueError: If Claude returns an empty reply.
        """
        self._logger.info(f"Revising prompt for scene {input_data.id}")

        response = self._create_message(
            prompt=self._build_prompt(input_data),
            max_tokens=4096,
            temperature=0.4,
        )

        revised = self._parse_response(response)
        if not revised:
            raise ValueError(f"Empty prompt revision for scene {input_data.id}")
        return revised

    def _build_prompt(self, scene: Scene) -> str:
        """Build the user prompt from the scene's narrative fields."""
        prompt_parts = [
            "Update the image generation prompt of this storyboard scene.",
            "",
            f"VISUAL: {scene.visual_en or scene.visual}",
            f"ACTION: {scene.action_en or scene.action}",
            f"CAMERA: {scene.camera_en or scene.camera}",
        ]

        if scene.dialogue:
            prompt_parts.append(f"DIALOGUE: {scene.dialogue}")

        prompt_parts.extend([
            "",
            "CURRENT PROMPT:",
            scene.prompt or "(none)",
            "",
            "Return the complete updated prompt.",
        ])

        return "\n".join(prompt_parts)

    def _parse_response(self, response: str) -> str:
        json_str = self._extract_json(response)

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError:
            self._logger.debug("Reply is not JSON, keeping it as plain text")
            return response.strip()

        return json.dumps(data, indent=2, ensure_ascii=False)

    def _extract_json(self, response: str) -> str:
        """Extract JSON from a response that may contain markdown or other text."""
        # Try to find JSON in code blocks
        if "```json" in response:
            start = response.find("```json") + 7
            end = response.find("```", start)
            if end > start:
                return response[start:end].strip()

        if "```" in response:
            start = response.find("```") + 3
            end = response.find("```", start)
            if end > start:
                return response[start:end].strip()

        # Raw JSON object
        start = response.find("{")
        if start != -1:
            depth = 0
            for i, char in enumerate(response[start:], start):
                if char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
                    if depth == 0:
                        return response[start:i + 1]

        return response.strip()
