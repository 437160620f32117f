"""Chat-completion provider interface, error types and registry."""

import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Type

from ..config import LLMConfig, LLMProviderConfig
from ..models import LLMResponse, Message, MessageRole
from ..utils.logging import get_logger, log_llm_call

logger = get_logger(__name__)


class LLMError(Exception):
    """Base exception for chat-completion failures."""
    pass


class LLMRateLimitError(LLMError):
    """Raised on HTTP 429."""
    pass


class LLMTimeoutError(LLMError):
    """Raised when the request exceeds its timeout."""
    pass


class LLMResponseError(LLMError):
    """Raised when the reply cannot be parsed."""
    pass


# Errors worth another attempt when retries are configured
RETRYABLE_ERRORS = (LLMRateLimitError, LLMTimeoutError)

DEFAULT_RETRY = {"max_retries": 1, "base_delay": 1.0, "max_delay": 10.0}


class LLMProvider(ABC):
    """Base class for chat-completion backends.

    Subclasses implement ``provider_name`` and ``_call_api``; this class adds
    optional backoff, token accounting and one log record per attempt.
    """

    def __init__(self, config: LLMProviderConfig, retry_config: Optional[Dict] = None):
        """
        Args:
            config: Provider-specific configuration.
            retry_config: ``max_retries`` (total attempts), ``base_delay`` and
                ``max_delay``. Defaults to a single attempt.
        """
        self.config = config
        self.retry_config = dict(DEFAULT_RETRY, **(retry_config or {}))
        self._usage = {"input_tokens": 0, "output_tokens": 0, "calls": 0}

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    def _call_api(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> LLMResponse:
        """Send one request.

        Raises:
            LLMRateLimitError, LLMTimeoutError, LLMResponseError, LLMError
        """
        pass

    @property
    def has_credentials(self) -> bool:
        return bool(self.config.api_key)

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> str:
        """Send a system + user prompt pair and return the reply text.

        Unset parameters fall back to the provider config.
        """
        messages = [
            Message(MessageRole.SYSTEM, system_prompt),
            Message(MessageRole.USER, user_prompt),
        ]
        return self._call_with_retry(lambda: self._call_api(messages, temperature, max_tokens, timeout)).content

    def _call_with_retry(self, send: Callable[[], LLMResponse]) -> LLMResponse:
        attempts = max(1, int(self.retry_config["max_retries"]))
        last_error: Optional[LLMError] = None

        for attempt in range(1, attempts + 1):
            started = time.time()
            try:
                response = send()
            except RETRYABLE_ERRORS as e:
                self._log_attempt(started, error=e, attempt=attempt)
                last_error = e
            except LLMError as e:
                self._log_attempt(started, error=e, attempt=attempt)
                raise
            else:
                self._record_usage(response)
                self._log_attempt(started, response=response, attempt=attempt)
                return response

            if attempt < attempts:
                delay = min(self.retry_config["base_delay"] * 2 ** (attempt - 1), self.retry_config["max_delay"])
                logger.warning(
                    f"{self.provider_name}: retrying in {delay}s ({attempt}/{attempts})",
                    extra_data={"provider": self.provider_name, "delay": delay},
                )
                time.sleep(delay)

        raise last_error

    def _record_usage(self, response: LLMResponse) -> None:
        self._usage["input_tokens"] += response.input_tokens
        self._usage["output_tokens"] += response.output_tokens
        self._usage["calls"] += 1

    def _log_attempt(
        self,
        started: float,
        attempt: int,
        response: Optional[LLMResponse] = None,
        error: Optional[Exception] = None,
    ) -> None:
        fields = {"attempt": attempt}
        if response is not None:
            fields.update(input_tokens=response.input_tokens, output_tokens=response.output_tokens)
        log_llm_call(
            logger=logger,
            provider=self.provider_name,
            model=(response.model if response is not None and response.model else self.config.model),
            duration_ms=int((time.time() - started) * 1000),
            success=error is None,
            error=str(error) if error is not None else None,
            **fields,
        )

    def get_usage_stats(self) -> Dict[str, int]:
        """Cumulative token and call counts for successful requests."""
        return {
            "total_input_tokens": self._usage["input_tokens"],
            "total_output_tokens": self._usage["output_tokens"],
            "total_tokens": self._usage["input_tokens"] + self._usage["output_tokens"],
            "total_calls": self._usage["calls"],
        }

    def reset_usage_stats(self) -> None:
        for key in self._usage:
            self._usage[key] = 0


_provider_registry: Dict[str, Type[LLMProvider]] = {}


def register_provider(name: str):
    """Class decorator adding a provider to the registry under ``name``."""
    def decorator(cls: Type[LLMProvider]):
        _provider_registry[name] = cls
        return cls
    return decorator


def get_provider(name: str, config: LLMProviderConfig, retry_config: Optional[Dict] = None) -> LLMProvider:
    """Instantiate a registered provider.

    Raises:
        ValueError: If ``name`` is not registered.
    """
    try:
        provider_cls = _provider_registry[name]
    except KeyError:
        raise ValueError(
            f"Unknown LLM provider: {name}. Available: {', '.join(sorted(_provider_registry))}"
        ) from None
    return provider_cls(config, retry_config)


def create_provider_from_config(llm_config: LLMConfig) -> Optional[LLMProvider]:
    """Build the active provider, or None when it has no API key.

    A None provider puts the orchestrator on its free-signals-only path.
    """
    if not llm_config.has_credentials():
        logger.warning(f"No API key configured for '{llm_config.provider}', paid signals disabled")
        return None

    provider_config = llm_config.get_provider_config(llm_config.provider)
    logger.info(f"Using '{llm_config.provider}' provider ({provider_config.model})")
    return get_provider(
        llm_config.provider,
        provider_config,
        {
            "max_retries": llm_config.max_retries,
            "base_delay": llm_config.base_delay,
            "max_delay": llm_config.max_delay,
        },
    )
