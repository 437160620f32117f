"""Georgian word validation by fusion of crowd, pattern, LLM and embedding signals."""

from .config import Config, load_config, create_default_config
from .models import (
    SignalName,
    ValidationSignal,
    CrowdSignal,
    PatternSignal,
    GPTSignal,
    TranslationSignal,
    SemanticSignal,
    ValidationResult,
    WordStat,
    normalize_word,
)
from .service import WordValidationService

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "create_default_config",
    "SignalName",
    "ValidationSignal",
    "CrowdSignal",
    "PatternSignal",
    "GPTSignal",
    "TranslationSignal",
    "SemanticSignal",
    "ValidationResult",
    "WordStat",
    "normalize_word",
    "WordValidationService",
]
