"""Text-generation clients, intent extraction and response synthesis."""

from __future__ import annotations

from .client import OllamaClient, OpenAIChatClient, TextGenerationError, TextGenerator, build_text_generator
from .extractor import ExtractionResult, IntentExtractor
from .responses import ResponseSynthesizer, describe_activity

__all__ = [
    "ExtractionResult",
    "IntentExtractor",
    "OllamaClient",
    "OpenAIChatClient",
    "ResponseSynthesizer",
    "TextGenerationError",
    "TextGenerator",
    "build_text_generator",
    "describe_activity",
]
