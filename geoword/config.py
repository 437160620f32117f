"""Configuration management for the word validation engine."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any

from .utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class LLMProviderConfig:
    """Configuration for a specific LLM provider."""
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    max_tokens: int = 50
    temperature: float = 0.1
    timeout: int = 10


@dataclass
class LLMConfig:
    """Configuration for LLM providers."""
    provider: str = "openai"
    providers: Dict[str, LLMProviderConfig] = field(default_factory=dict)
    max_retries: int = 1  # Attempts per call; the validators never retry themselves
    base_delay: float = 1.0
    max_delay: float = 10.0

    def get_provider_config(self, provider_name: str) -> LLMProviderConfig:
        """Get configuration for a specific provider."""
        if provider_name not in self.providers:
            raise ValueError(f"Unknown LLM provider: {provider_name}")
        return self.providers[provider_name]

    def has_credentials(self) -> bool:
        """Check whether the active provider has an API key configured."""
        provider_config = self.providers.get(self.provider)
        return bool(provider_config and provider_config.api_key)


@dataclass
class EmbeddingConfig:
    """Configuration for the embedding backend."""
    provider: str = "openai"  # openai, sentence_transformers
    model: str = "text-embedding-3-small"
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    timeout: int = 10
    cache_size: int = 1000


@dataclass
class CrowdTiersConfig:
    """Distinct-user boundaries and confidences for the crowd signal."""
    strong_users: int = 10
    medium_users: int = 5
    weak_users: int = 3
    strong_confidence: float = 0.95
    medium_confidence: float = 0.85
    weak_confidence: float = 0.60


@dataclass
class FusionWeightsConfig:
    """Per-signal weights used by weighted fusion."""
    crowd_strong: float = 0.25
    crowd_weak: float = 0.10
    crowd_strong_min_confidence: float = 0.85  # Crowd uses the strong weight at or above this
    patterns: float = 0.10
    gpt: float = 0.35
    translation: float = 0.25
    semantics: float = 0.20


@dataclass
class ThresholdsConfig:
    """Early-exit guards and decision thresholds for the orchestrator."""
    crowd_exit: float = 0.95
    pattern_reject: float = 0.5  # Invalid patterns at or below this are rejected
    gpt_accept: float = 0.85
    gpt_reject: float = 0.20
    agreement_boost: float = 0.05
    boost_cap: float = 0.98
    translation_agreement: float = 0.85
    fusion_min_confidence: float = 0.50
    free_crowd_weight: float = 0.6
    free_pattern_weight: float = 0.4
    free_min_confidence: float = 0.60


@dataclass
class ValidationConfig:
    """Configuration for validation signals and fusion."""
    crowd: CrowdTiersConfig = field(default_factory=CrowdTiersConfig)
    weights: FusionWeightsConfig = field(default_factory=FusionWeightsConfig)
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)


@dataclass
class BatchConfig:
    """Configuration for batch validation pacing."""
    pause_seconds: float = 0.1
    pacing_threshold: int = 10  # Pause only when the batch is larger than this


@dataclass
class StoreConfig:
    """Configuration for word statistics storage."""
    backend: str = "sqlite"  # sqlite, memory
    path: str = "geoword.db"


@dataclass
class VerdictCacheConfig:
    """Configuration for the final-verdict cache."""
    enabled: bool = True
    ttl_days: int = 30


@dataclass
class Config:
    """Main configuration container."""
    llm: LLMConfig = field(default_factory=LLMConfig)
    embeddings: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    verdict_cache: VerdictCacheConfig = field(default_factory=VerdictCacheConfig)
    log_level: str = "INFO"
    log_json: bool = False


def _resolve_env_vars(value: Any) -> Any:
    """Resolve environment variables in string values."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        resolved = os.environ.get(env_var, "")
        if not resolved:
            logger.warning(f"Environment variable {env_var} not set")
        return resolved
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(v) for v in value]
    return value


def _parse_llm_provider_config(data: Dict) -> LLMProviderConfig:
    """Parse LLM provider configuration."""
    defaults = LLMProviderConfig()
    return LLMProviderConfig(
        api_key=_resolve_env_vars(data.get("api_key", "")),
        base_url=data.get("base_url", defaults.base_url),
        model=data.get("model", defaults.model),
        max_tokens=data.get("max_tokens", defaults.max_tokens),
        temperature=data.get("temperature", defaults.temperature),
        timeout=data.get("timeout", defaults.timeout),
    )


def _parse_llm_config(data: Dict) -> LLMConfig:
    """Parse LLM configuration section."""
    providers = {}
    for name, provider_data in data.get("providers", {}).items():
        providers[name] = _parse_llm_provider_config(provider_data)

    retry_config = data.get("retry", {})

    return LLMConfig(
        provider=data.get("provider", "openai"),
        providers=providers,
        max_retries=retry_config.get("max_attempts", 1),
        base_delay=retry_config.get("base_delay", 1.0),
        max_delay=retry_config.get("max_delay", 10.0),
    )


def _parse_dataclass(cls, data: Dict):
    """Build a flat dataclass from a dict, ignoring unknown keys."""
    known = {name: _resolve_env_vars(value) for name, value in data.items() if name in cls.__dataclass_fields__}
    unknown = set(data) - set(known)
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")
    return cls(**known)


def load_config(config_path: str = "config.json") -> Config:
    """Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Parsed configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config file is invalid.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            "Please copy config.json.sample to config.json and configure it."
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    config = Config()

    if "llm" in data:
        config.llm = _parse_llm_config(data["llm"])

    if "embeddings" in data:
        config.embeddings = _parse_dataclass(EmbeddingConfig, data["embeddings"])

    if "validation" in data:
        val_data = data["validation"]
        config.validation = ValidationConfig(
            crowd=_parse_dataclass(CrowdTiersConfig, val_data.get("crowd", {})),
            weights=_parse_dataclass(FusionWeightsConfig, val_data.get("weights", {})),
            thresholds=_parse_dataclass(ThresholdsConfig, val_data.get("thresholds", {})),
        )

    if "batch" in data:
        config.batch = _parse_dataclass(BatchConfig, data["batch"])

    if "store" in data:
        config.store = _parse_dataclass(StoreConfig, data["store"])
        if config.store.backend not in ("sqlite", "memory"):
            raise ValueError(f"Unknown store backend: {config.store.backend}")

    if "verdict_cache" in data:
        config.verdict_cache = _parse_dataclass(VerdictCacheConfig, data["verdict_cache"])

    config.log_level = data.get("log_level", "INFO")
    config.log_json = data.get("log_json", False)

    logger.info(f"Loaded configuration from {config_path}")
    return config


def create_default_config() -> Dict:
    """Create a default configuration dictionary."""
    return {
        "llm": {
            "provider": "openai",
            "providers": {
                "openai": {
                    "api_key": "${OPENAI_API_KEY}",
                    "base_url": "https://api.openai.com/v1",
                    "model": "gpt-4o-mini",
                    "max_tokens": 50,
                    "temperature": 0.1,
                    "timeout": 10
                }
            },
            "retry": {
                "max_attempts": 1,
                "base_delay": 1,
                "max_delay": 10
            }
        },
        "embeddings": {
            "provider": "openai",
            "model": "text-embedding-3-small",
            "base_url": "https://api.openai.com/v1",
            "api_key": "${OPENAI_API_KEY}",
            "timeout": 10,
            "cache_size": 1000
        },
        "batch": {
            "pause_seconds": 0.1,
            "pacing_threshold": 10
        },
        "store": {
            "backend": "sqlite",
            "path": "geoword.db"
        },
        "verdict_cache": {
            "enabled": True,
            "ttl_days": 30
        },
        "log_level": "INFO"
    }
