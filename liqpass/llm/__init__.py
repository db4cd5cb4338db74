from liqpass.llm.adapter import (
    GeminiTextModel,
    OpenAICompatibleTextModel,
    TextModel,
    build_text_model,
)

__all__ = [
    "GeminiTextModel",
    "OpenAICompatibleTextModel",
    "TextModel",
    "build_text_model",
]
