"""Translation stage and its service client."""

from .client import (
    DeepLTranslator,
    RateLimitError,
    RetryExhaustedError,
    RetryingTranslator,
    TextTranslator,
    TranslationError,
)
from .stage import InputFileError, TranslationStage, TranslationSummary, run_translation

__all__ = [
    "DeepLTranslator",
    "InputFileError",
    "RateLimitError",
    "RetryExhaustedError",
    "RetryingTranslator",
    "TextTranslator",
    "TranslationError",
    "TranslationStage",
    "TranslationSummary",
    "run_translation",
]
