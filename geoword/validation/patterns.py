"""Orthographic heuristics for Georgian (Mkhedruli) words.

Six independent checks are run over the code points of the normalized word;
the share that pass becomes the confidence. No I/O, fully deterministic.
"""

import re
from typing import List

from ..models import SignalName, PatternChecks, PatternSignal
from ..utils.logging import get_logger
from .base import SignalValidator

logger = get_logger(__name__)

GEORGIAN_BLOCK_START = 0x10A0
GEORGIAN_BLOCK_END = 0x10FF
GEORGIAN_VOWELS = frozenset("აეიოუ")

MIN_LENGTH = 2
MAX_LENGTH = 20
MIN_VOWEL_RATIO = 0.15
MAX_VOWEL_RATIO = 0.50
MAX_CONSONANT_RUN = 6  # e.g. "მწვრთნელი"
MIN_PASSING_CHECKS = 4

_REPETITION = re.compile(r"(.)\1{3,}")

SOURCE = "linguistic_patterns"


def is_georgian_char(char: str) -> bool:
    """Check if a single character lies in the Georgian Unicode block."""
    return GEORGIAN_BLOCK_START <= ord(char) <= GEORGIAN_BLOCK_END


def is_georgian_vowel(char: str) -> bool:
    return char in GEORGIAN_VOWELS


def is_georgian_consonant(char: str) -> bool:
    """Any Georgian-block character that is not one of the five vowels."""
    return is_georgian_char(char) and not is_georgian_vowel(char)


def _fold(word: str) -> List[str]:
    """Trim and lowercase, leaving characters already in the Georgian block.

    Mtavruli capitals lower into Mkhedruli; Asomtavruli capitals would lower
    into Nuskhuri, outside the block, so they are kept as written.
    """
    return list("".join(c if is_georgian_char(c) else c.lower() for c in word.strip()))


class PatternValidator(SignalValidator):
    """Scores how Georgian-like a word looks."""

    @property
    def signal_name(self) -> SignalName:
        return SignalName.PATTERNS

    def validate(self, word: str) -> PatternSignal:
        chars = _fold(word) if word else []
        if not chars:
            return PatternSignal(valid=False, confidence=0.0, source=SOURCE)

        checks = PatternChecks(
            has_only_georgian=all(is_georgian_char(c) for c in chars),
            has_reasonable_length=MIN_LENGTH <= len(chars) <= MAX_LENGTH,
        )

        if not checks.has_only_georgian:
            logger.debug(f"Patterns: '{word}' contains non-Georgian characters")
            return PatternSignal(valid=False, confidence=0.0, source=SOURCE, checks=checks)

        vowels = consonants = run = longest_run = 0
        for char in chars:
            if is_georgian_vowel(char):
                vowels += 1
                run = 0
            elif is_georgian_consonant(char):
                consonants += 1
                run += 1
                longest_run = max(longest_run, run)

        vowel_ratio = vowels / len(chars)
        checks.has_reasonable_vowel_ratio = MIN_VOWEL_RATIO <= vowel_ratio <= MAX_VOWEL_RATIO
        checks.has_reasonable_consonants = longest_run <= MAX_CONSONANT_RUN
        checks.no_excessive_repetition = _REPETITION.search("".join(chars)) is None
        checks.has_vowels_and_consonants = vowels > 0 and consonants > 0

        passed = checks.passed()
        valid = passed >= MIN_PASSING_CHECKS
        logger.debug(
            f"Patterns: '{word}' {'valid' if valid else 'invalid'} ({passed}/{PatternChecks.total()})"
        )
        return PatternSignal(
            valid=valid,
            confidence=passed / PatternChecks.total(),
            source=SOURCE,
            checks=checks,
        )
