"""Base class for signal validators."""

from abc import ABC, abstractmethod

from ..models import SignalName, ValidationSignal


class SignalValidator(ABC):
    """Produces one evidence signal about a candidate word.

    Implementations never raise for dependency failures; they return a
    conservative low-confidence signal instead.
    """

    @property
    @abstractmethod
    def signal_name(self) -> SignalName:
        """Get the name of the signal this validator produces."""
        pass

    @abstractmethod
    def validate(self, word: str) -> ValidationSignal:
        """Evaluate ``word`` and return the signal."""
        pass
