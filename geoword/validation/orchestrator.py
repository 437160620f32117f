"""Staged fusion of all validation signals.

Signals run strictly one after another, cheapest first, so a conclusive free
signal stops the pipeline before any paid API call is made. The phases form a
small state machine:

    CROWD -> PATTERNS -> NO_KEY_FALLBACK -> GPT -> CROSS_CHECK -> SEMANTICS -> FUSION

Each phase handler either returns the next phase or a final
``ValidationResult`` (an early exit).
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from ..config import ValidationConfig
from ..models import (
    SignalName,
    ValidationSignal,
    ValidationResult,
    FusionStats,
)
from ..utils.logging import get_logger, set_request_id, get_request_id
from .crowd import CrowdValidator
from .patterns import PatternValidator
from .gpt import LLMClassifier
from .translation import RoundTripValidator
from .semantics import EmbeddingValidator

logger = get_logger(__name__)


class Phase(Enum):
    """Orchestrator phases, in execution order."""
    CROWD = "crowd"
    PATTERNS = "patterns"
    NO_KEY_FALLBACK = "no_key_fallback"
    GPT = "gpt"
    CROSS_CHECK = "cross_check"
    SEMANTICS = "semantics"
    FUSION = "fusion"


@dataclass
class _Run:
    """Mutable state of one validation."""
    word: str
    started: float = field(default_factory=time.monotonic)
    signals: List[ValidationSignal] = field(default_factory=list)
    by_name: Dict[SignalName, ValidationSignal] = field(default_factory=dict)

    def add(self, signal: ValidationSignal) -> ValidationSignal:
        self.signals.append(signal)
        self.by_name[signal.name] = signal
        return signal

    def finish(self, valid: bool, confidence: float, source: str, **extra) -> ValidationResult:
        return ValidationResult(
            word=self.word,
            valid=valid,
            confidence=confidence,
            source=source,
            signals=list(self.signals),
            elapsed_ms=int((time.monotonic() - self.started) * 1000),
            **extra,
        )


Outcome = Union[Phase, ValidationResult]


class ValidationOrchestrator:
    """Decides whether a word is real Georgian from up to five signals."""

    def __init__(
        self,
        crowd: CrowdValidator,
        patterns: Optional[PatternValidator] = None,
        gpt: Optional[LLMClassifier] = None,
        translation: Optional[RoundTripValidator] = None,
        semantics: Optional[EmbeddingValidator] = None,
        config: Optional[ValidationConfig] = None,
    ):
        self.crowd = crowd
        self.patterns = patterns or PatternValidator()
        self.gpt = gpt
        self.translation = translation
        self.semantics = semantics
        self.config = config or ValidationConfig()
        self._handlers: Dict[Phase, Callable[[_Run], Outcome]] = {
            Phase.CROWD: self._crowd_phase,
            Phase.PATTERNS: self._patterns_phase,
            Phase.NO_KEY_FALLBACK: self._no_key_phase,
            Phase.GPT: self._gpt_phase,
            Phase.CROSS_CHECK: self._cross_check_phase,
            Phase.SEMANTICS: self._semantics_phase,
            Phase.FUSION: self._fusion_phase,
        }

    @property
    def has_llm(self) -> bool:
        """Whether paid LLM signals are available."""
        return self.gpt is not None and self.gpt.provider is not None

    def validate(self, word: str) -> ValidationResult:
        """Validate ``word``. Never raises."""
        if not word or not word.strip():
            return ValidationResult(
                word=word or "",
                valid=False,
                confidence=0.0,
                source="master_validation",
                error="Missing word",
            )

        word = word.strip()
        owns_request_id = get_request_id() is None
        if owns_request_id:
            set_request_id(uuid.uuid4().hex[:8])

        run = _Run(word=word)
        phase = Phase.CROWD
        logger.info(f"Validating '{word}'")
        try:
            while True:
                outcome = self._handlers[phase](run)
                if isinstance(outcome, ValidationResult):
                    logger.info(
                        f"'{word}' -> {'VALID' if outcome.valid else 'INVALID'} "
                        f"({outcome.confidence:.2f}, {outcome.source}) after {phase.value}",
                        extra_data={"signals": outcome.signal_names, "elapsed_ms": outcome.elapsed_ms},
                    )
                    return outcome
                phase = outcome
        except Exception as e:
            logger.exception(f"Validation of '{word}' failed during {phase.value}")
            return self._best_effort(run, e)
        finally:
            if owns_request_id:
                set_request_id(None)

    # Phase handlers

    def _crowd_phase(self, run: _Run) -> Outcome:
        crowd = run.add(self.crowd.validate(run.word))
        if crowd.confidence >= self.config.thresholds.crowd_exit:
            return run.finish(True, crowd.confidence, "crowd_strong")
        return Phase.PATTERNS

    def _patterns_phase(self, run: _Run) -> Outcome:
        patterns = run.add(self.patterns.validate(run.word))
        if not patterns.valid and patterns.confidence <= self.config.thresholds.pattern_reject:
            return run.finish(False, patterns.confidence, "patterns_rejected")
        return Phase.NO_KEY_FALLBACK

    def _no_key_phase(self, run: _Run) -> Outcome:
        if self.has_llm:
            return Phase.GPT

        th = self.config.thresholds
        combined = (
            run.by_name[SignalName.CROWD].confidence * th.free_crowd_weight
            + run.by_name[SignalName.PATTERNS].confidence * th.free_pattern_weight
        )
        logger.info("No LLM configured, deciding on free signals only")
        return run.finish(combined >= th.free_min_confidence, combined, "free_signals_only")

    def _gpt_phase(self, run: _Run) -> Outcome:
        th = self.config.thresholds
        gpt = run.add(self.gpt.validate(run.word))
        crowd = run.by_name[SignalName.CROWD]
        patterns = run.by_name[SignalName.PATTERNS]

        if gpt.valid and gpt.confidence >= th.gpt_accept:
            confidence = gpt.confidence
            if crowd.valid and patterns.valid:
                confidence = min(th.boost_cap, confidence + th.agreement_boost)
            return run.finish(True, confidence, "gpt_validated")

        if not gpt.valid and gpt.confidence <= th.gpt_reject and not patterns.valid:
            return run.finish(False, max(gpt.confidence, patterns.confidence), "gpt_rejected")

        return Phase.CROSS_CHECK

    def _cross_check_phase(self, run: _Run) -> Outcome:
        if self.translation is None:
            return Phase.SEMANTICS

        gpt = run.by_name[SignalName.GPT]
        translation = run.add(self.translation.validate(run.word))
        if (translation.confidence >= self.config.thresholds.translation_agreement
                and translation.valid == gpt.valid):
            return run.finish(
                translation.valid,
                (gpt.confidence + translation.confidence) / 2,
                "gpt_translation_agreement",
            )
        return Phase.SEMANTICS

    def _semantics_phase(self, run: _Run) -> Outcome:
        if self.semantics is not None:
            run.add(self.semantics.validate(run.word))
        return Phase.FUSION

    def _fusion_phase(self, run: _Run) -> Outcome:
        stats = self.fuse(run.signals)
        valid = (stats.valid_count > stats.invalid_count
                 and stats.weighted_confidence >= self.config.thresholds.fusion_min_confidence)
        return run.finish(valid, stats.weighted_confidence, "master_validation", stats=stats)

    # Helpers

    def signal_weight(self, signal: ValidationSignal) -> float:
        """Fusion weight for one collected signal."""
        weights = self.config.weights
        if signal.name is SignalName.CROWD:
            if signal.confidence >= weights.crowd_strong_min_confidence:
                return weights.crowd_strong
            return weights.crowd_weak
        return {
            SignalName.PATTERNS: weights.patterns,
            SignalName.GPT: weights.gpt,
            SignalName.TRANSLATION: weights.translation,
            SignalName.SEMANTICS: weights.semantics,
        }[signal.name]

    def fuse(self, signals: List[ValidationSignal]) -> FusionStats:
        """Weighted confidence and vote counts over the collected signals."""
        valid_count = sum(1 for s in signals if s.valid)
        total_weight = 0.0
        weighted = 0.0
        for signal in signals:
            weight = self.signal_weight(signal)
            total_weight += weight
            weighted += signal.confidence * weight

        return FusionStats(
            valid_count=valid_count,
            invalid_count=len(signals) - valid_count,
            avg_confidence=sum(s.confidence for s in signals) / len(signals) if signals else 0.0,
            weighted_confidence=weighted / total_weight if total_weight else 0.0,
        )

    def _best_effort(self, run: _Run, error: Exception) -> ValidationResult:
        signals = run.signals
        valid_count = sum(1 for s in signals if s.valid)
        confidence = sum(s.confidence for s in signals) / len(signals) if signals else 0.0
        return run.finish(
            valid_count > len(signals) / 2,
            confidence,
            "master_validation_error",
            error=str(error),
        )
