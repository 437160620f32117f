"""Word validation signals and their orchestration.

- CrowdValidator: distinct-user usage tiers
- PatternValidator: Georgian orthographic heuristics
- LLMClassifier: YES/NO language model judgment
- RoundTripValidator: Georgian -> English -> Georgian comparison
- EmbeddingValidator: similarity to a baseline word bank
- ValidationOrchestrator: staged early-exit fusion of the above
- BatchValidator: paced sequential driver
"""

from .base import SignalValidator
from .patterns import (
    PatternValidator,
    is_georgian_char,
    is_georgian_vowel,
    is_georgian_consonant,
)
from .crowd import CrowdValidator
from .gpt import LLMClassifier
from .translation import RoundTripValidator
from .semantics import (
    EmbeddingValidator,
    EmbeddingCache,
    BASELINE_GEORGIAN_WORDS,
    cosine_similarity,
)
from .orchestrator import ValidationOrchestrator, Phase
from .batch import BatchValidator

__all__ = [
    "SignalValidator",
    "PatternValidator",
    "is_georgian_char",
    "is_georgian_vowel",
    "is_georgian_consonant",
    "CrowdValidator",
    "LLMClassifier",
    "RoundTripValidator",
    "EmbeddingValidator",
    "EmbeddingCache",
    "BASELINE_GEORGIAN_WORDS",
    "cosine_similarity",
    "ValidationOrchestrator",
    "Phase",
    "BatchValidator",
]
