"""Model names, voices and limits shared across the package."""

# Text model for prompt revision
MODEL_ANALYSIS = "claude-sonnet-4-20250514"

# Fallback text model with higher rate limits
MODEL_ANALYSIS_FALLBACK = "claude-3-5-haiku-20241022"

# Gemini image model for storyboard frames
MODEL_IMAGE = "gemini-3-pro-image-preview"

# Fallback image model (does not accept an image size)
MODEL_IMAGE_FALLBACK = "gemini-2.5-flash-image"

# Speech model
MODEL_TTS = "gemini-2.5-flash-preview-tts"

VOICE_OPTIONS = ["Kore", "Fenrir", "Puck", "Charon", "Zephyr"]
DEFAULT_VOICE = VOICE_OPTIONS[0]

# Upload cap per reference pool
MAX_REFERENCE_IMAGES = 8

# Product shots sent with a single generation call
MAX_PRODUCT_REFERENCES = 2

FAILURE_MESSAGES = {
    "en": {
        "image": "Generation failed: {error}",
        "audio": "Speech failed: {error}",
        "prompt": "Prompt update failed: {error}",
    },
    "zh": {
        "image": "生成失败: {error}",
        "audio": "语音失败: {error}",
        "prompt": "提示词更新失败: {error}",
    },
}


def failure_message(kind: str, error: object, locale: str = "en") -> str:
    """Format a scene failure message in the requested language.

    Unknown locales fall back to English.
    """
    table = FAILURE_MESSAGES.get(locale, FAILURE_MESSAGES["en"])
    return table[kind].format(error=error)
