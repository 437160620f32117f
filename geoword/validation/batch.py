"""Sequential batch validation with rate-limit pacing."""

import threading
import time
from typing import Callable, List, Optional, Sequence

from ..config import BatchConfig
from ..models import ValidationResult
from ..utils.logging import get_logger

logger = get_logger(__name__)


class BatchValidator:
    """Runs words through a validator one at a time.

    Words are never validated concurrently so the external APIs see at most
    one request in flight per batch. Large batches pause between words.
    """

    def __init__(
        self,
        validate: Callable[[str], ValidationResult],
        config: Optional[BatchConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the batch validator.

        Args:
            validate: Single-word validation callable, usually
                ``ValidationOrchestrator.validate``.
            config: Pacing settings.
            sleep: Pause function; injectable for tests.
        """
        self.validate = validate
        self.config = config or BatchConfig()
        self._sleep = sleep

    def validate_all(
        self,
        words: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ValidationResult]:
        """Validate every word, isolating per-word failures.

        Args:
            words: Candidate words.
            cancel_event: When set, no further words are started; the word
                already in flight finishes normally.

        Returns:
            One result per processed word, in input order.
        """
        if not words:
            return []

        logger.info(f"Validating batch of {len(words)} words")
        paced = len(words) > self.config.pacing_threshold
        results: List[ValidationResult] = []

        for index, word in enumerate(words):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Batch cancelled after {len(results)}/{len(words)} words")
                break

            try:
                results.append(self.validate(word))
            except Exception as e:
                logger.error(f"Batch validation failed for '{word}': {e}")
                results.append(ValidationResult(
                    word=word,
                    valid=False,
                    confidence=0.0,
                    source="batch_error",
                    error=str(e),
                ))

            if paced and index < len(words) - 1:
                self._sleep(self.config.pause_seconds)

        valid = sum(1 for r in results if r.valid)
        logger.info(f"Batch complete: {valid}/{len(results)} valid")
        return results
