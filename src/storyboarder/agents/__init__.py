"""Claude-backed agents."""

from .base import BaseAgent
from .prompt_revision import PromptRevisionAgent

__all__ = ["BaseAgent", "PromptRevisionAgent"]
