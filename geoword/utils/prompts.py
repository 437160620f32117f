"""Prompt loading utilities.

Loads prompt templates from the package's prompts/ directory so the wording
sent to the language model can be tuned without touching validator code.
"""

from pathlib import Path
from typing import Dict, Optional
from functools import lru_cache

from .logging import get_logger

logger = get_logger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


@lru_cache(maxsize=32)
def load_prompt(name: str, prompts_dir: Optional[Path] = None) -> str:
    """Load a prompt template from file.

    Args:
        name: Prompt name (without .txt extension).
        prompts_dir: Optional custom prompts directory.

    Returns:
        Prompt template string, stripped of trailing whitespace.

    Raises:
        FileNotFoundError: If prompt file doesn't exist.
    """
    directory = prompts_dir or PROMPTS_DIR
    prompt_path = directory / f"{name}.txt"

    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt not found: {prompt_path}")

    with open(prompt_path, 'r', encoding='utf-8') as f:
        content = f.read().rstrip()

    logger.debug(f"Loaded prompt: {name}")
    return content


def format_prompt(name: str, **kwargs) -> str:
    """Load and format a prompt template with variables.

    Example:
        # prompts/gpt_classify_user.txt contains:
        # 'Is "{word}" a real Georgian (ქართული) word? ...'

        prompt = format_prompt("gpt_classify_user", word="სახლი")
    """
    template = load_prompt(name)
    return template.format(**kwargs)


def list_prompts(prompts_dir: Optional[Path] = None) -> Dict[str, Path]:
    """List all available prompts as name -> file path."""
    directory = prompts_dir or PROMPTS_DIR

    if not directory.exists():
        return {}

    return {path.stem: path for path in directory.glob("*.txt")}


def clear_prompt_cache():
    """Clear the prompt cache.

    Call this if prompts are modified at runtime.
    """
    load_prompt.cache_clear()
    logger.debug("Prompt cache cleared")
