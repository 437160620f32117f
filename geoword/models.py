"""Core data types: LLM messages, validation signals and results."""

from dataclasses import dataclass, field, fields, asdict
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Set, Type


def normalize_word(word: str) -> str:
    """Normalize a word for use as a store or cache key (lowercase + trim)."""
    return word.lower().strip()


def clamp_confidence(value: float) -> float:
    """Clamp a confidence into [0, 1]."""
    return min(1.0, max(0.0, float(value)))


class MessageRole(Enum):
    """Roles in a chat-completion conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """A single chat message."""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class WordStat:
    """Usage statistics for one normalized word."""
    word: str
    key: str
    usage_count: int = 0
    user_ids: Set[str] = field(default_factory=set)
    first_seen: Optional[datetime] = None
    last_seen: Optional[datetime] = None

    @property
    def unique_users(self) -> int:
        """Number of distinct users who have used the word."""
        return len(self.user_ids)


class SignalName(Enum):
    """Independent evidence sources."""
    CROWD = "crowd"
    PATTERNS = "patterns"
    GPT = "gpt"
    TRANSLATION = "translation"
    SEMANTICS = "semantics"


@dataclass
class ValidationSignal:
    """Base class for a single piece of evidence about a word.

    Each subclass is one variant of the signal union and fixes ``name``.
    """
    name: ClassVar[SignalName]

    valid: bool
    confidence: float
    source: str
    error: Optional[str] = None

    def __post_init__(self):
        self.confidence = clamp_confidence(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {"name": self.name.value}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "error" and value is None:
                continue
            data[f.name] = asdict(value) if hasattr(value, "__dataclass_fields__") else value
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ValidationSignal":
        """Rebuild the matching signal variant from ``to_dict`` output."""
        cls = _SIGNAL_TYPES[SignalName(data["name"])]
        kwargs = {f.name: data.get(f.name) for f in fields(cls) if f.name in data}
        if cls is PatternSignal and isinstance(kwargs.get("checks"), dict):
            kwargs["checks"] = PatternChecks(**kwargs["checks"])
        return cls(**kwargs)


@dataclass
class CrowdSignal(ValidationSignal):
    """Evidence from how many distinct users have used the word."""
    name: ClassVar[SignalName] = SignalName.CROWD
    unique_users: int = 0


@dataclass
class PatternChecks:
    """Outcome of each linguistic pattern check."""
    has_only_georgian: bool = False
    has_reasonable_length: bool = False
    has_reasonable_vowel_ratio: bool = False
    has_reasonable_consonants: bool = False
    no_excessive_repetition: bool = False
    has_vowels_and_consonants: bool = False

    def passed(self) -> int:
        """Number of checks that passed."""
        return sum(1 for f in fields(self) if getattr(self, f.name))

    @classmethod
    def total(cls) -> int:
        return len(fields(cls))


@dataclass
class PatternSignal(ValidationSignal):
    """Evidence from Georgian orthographic heuristics."""
    name: ClassVar[SignalName] = SignalName.PATTERNS
    checks: PatternChecks = field(default_factory=PatternChecks)


@dataclass
class GPTSignal(ValidationSignal):
    """Evidence from a YES/NO language model judgment."""
    name: ClassVar[SignalName] = SignalName.GPT
    answer: Optional[str] = None


@dataclass
class TranslationSignal(ValidationSignal):
    """Evidence from a Georgian -> English -> Georgian round trip."""
    name: ClassVar[SignalName] = SignalName.TRANSLATION
    translation: Optional[str] = None
    round_trip: Optional[str] = None


@dataclass
class SemanticSignal(ValidationSignal):
    """Evidence from embedding similarity to known Georgian words."""
    name: ClassVar[SignalName] = SignalName.SEMANTICS
    avg_similarity: Optional[float] = None
    max_similarity: Optional[float] = None
    most_similar: Optional[str] = None


_SIGNAL_TYPES: Dict[SignalName, Type[ValidationSignal]] = {
    SignalName.CROWD: CrowdSignal,
    SignalName.PATTERNS: PatternSignal,
    SignalName.GPT: GPTSignal,
    SignalName.TRANSLATION: TranslationSignal,
    SignalName.SEMANTICS: SemanticSignal,
}


@dataclass
class FusionStats:
    """Vote and confidence summary from weighted fusion."""
    valid_count: int
    invalid_count: int
    avg_confidence: float
    weighted_confidence: float


@dataclass
class ValidationResult:
    """Final verdict for one word."""
    word: str
    valid: bool
    confidence: float
    source: str
    signals: List[ValidationSignal] = field(default_factory=list)
    elapsed_ms: int = 0
    stats: Optional[FusionStats] = None
    error: Optional[str] = None
    cached: bool = False

    def __post_init__(self):
        self.confidence = clamp_confidence(self.confidence)

    @property
    def signal_names(self) -> List[str]:
        return [s.name.value for s in self.signals]

    def get_signal(self, name: SignalName) -> Optional[ValidationSignal]:
        """Return the collected signal with the given name, if any."""
        for signal in self.signals:
            if signal.name is name:
                return signal
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "word": self.word,
            "valid": self.valid,
            "confidence": self.confidence,
            "source": self.source,
            "signals": [s.to_dict() for s in self.signals],
            "elapsed_ms": self.elapsed_ms,
        }
        if self.stats is not None:
            data["stats"] = asdict(self.stats)
        if self.error:
            data["error"] = self.error
        if self.cached:
            data["cached"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationResult":
        stats = data.get("stats")
        return cls(
            word=data["word"],
            valid=data["valid"],
            confidence=data["confidence"],
            source=data["source"],
            signals=[ValidationSignal.from_dict(s) for s in data.get("signals", [])],
            elapsed_ms=data.get("elapsed_ms", 0),
            stats=FusionStats(**stats) if stats else None,
            error=data.get("error"),
            cached=data.get("cached", False),
        )
