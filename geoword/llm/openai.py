"""OpenAI-compatible chat-completion provider."""

from typing import List, Optional

import requests

from ..models import Message, LLMResponse
from .provider import (
    LLMProvider,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMResponseError,
    register_provider,
)


@register_provider("openai")
class OpenAIProvider(LLMProvider):
    """Calls ``POST {base_url}/chat/completions`` with bearer auth.

    Works with any endpoint speaking the OpenAI chat-completion format.
    """

    @property
    def provider_name(self) -> str:
        return "openai"

    def _call_api(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None
    ) -> LLMResponse:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}"
        }
        payload = {
            "model": self.config.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": temperature if temperature is not None else self.config.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
        }
        url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        api_timeout = timeout if timeout is not None else self.config.timeout

        try:
            response = requests.post(url, headers=headers, json=payload, timeout=api_timeout)
        except requests.exceptions.Timeout as e:
            raise LLMTimeoutError(f"Request timed out after {api_timeout}s: {e}")
        except requests.exceptions.RequestException as e:
            raise LLMError(f"Request failed: {e}")

        if response.status_code == 429:
            raise LLMRateLimitError(f"Rate limited: {response.text[:200]}")
        if response.status_code >= 400:
            raise LLMError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            result = response.json()
            content = result["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMResponseError(f"Malformed chat completion response: {e}")

        usage = result.get("usage") or {}
        return LLMResponse(
            content=content or "",
            model=result.get("model", self.config.model),
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
        )
