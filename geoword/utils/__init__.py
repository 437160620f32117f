"""Utility modules for the word validation engine."""

from .logging import (
    get_logger,
    setup_logging,
    set_request_id,
    get_request_id,
    log_llm_call,
)
from .prompts import (
    load_prompt,
    format_prompt,
    clear_prompt_cache,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "set_request_id",
    "get_request_id",
    "log_llm_call",
    # Prompts
    "load_prompt",
    "format_prompt",
    "clear_prompt_cache",
]
