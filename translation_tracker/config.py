"""Tracker configuration loaded from YAML."""

import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

DEFAULT_EXCLUDED_NODE_TYPES = [
    "image",
    "transclusion",
    "references",
    "table",
    "list",
    "heading",
]

DEFAULT_GUIDELINES_URL = "https://www.mediawiki.org/wiki/Special:MyLanguage/Content_translation/Translation_guidelines"


class AlignmentConfig(BaseModel):
    """Section pair alignment settings."""
    debounce: float = Field(0.5, ge=0)  # seconds
    step: int = Field(10, gt=0)  # px
    max_steps: int = Field(10, gt=0)
    skip_tags: List[str] = Field(default_factory=lambda: ["table"])


class MTConfig(BaseModel):
    """Machine translation provider settings."""
    api_key: Optional[str] = "${OPENAI_API_KEY}"
    base_url: Optional[str] = None
    providers: Dict[str, str] = Field(default_factory=lambda: {"openai": "gpt-4o-mini"})
    preferred_provider: str = "openai"
    temperature: float = Field(0.3, ge=0, le=2)
    max_tokens: int = Field(4000, gt=0)
    max_retries: int = Field(3, gt=0)


class TrackerConfig(BaseModel):
    """Translation session settings passed to the tracker."""
    source_language: str = "en"
    target_language: str = "es"
    # A value 0.8 means we tolerate 80% unmodified machine translation
    unmodified_mt_threshold: float = Field(0.8, ge=0, le=1)
    # A value 0.6 means we tolerate 60% unmodified text copied from source
    unmodified_source_threshold: float = Field(0.6, ge=0, le=1)
    min_source_tokens: int = Field(10, ge=0)
    validation_delay: float = Field(15.0, ge=0)  # seconds
    change_delay: float = Field(0.5, ge=0)  # seconds
    excluded_node_types: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_NODE_TYPES))
    guidelines_url: str = DEFAULT_GUIDELINES_URL
    alignment: AlignmentConfig = Field(default_factory=AlignmentConfig)
    mt: MTConfig = Field(default_factory=MTConfig)


def _expand_env(value: Optional[str]) -> Optional[str]:
    """Expand ``${VAR}`` references to environment variables."""
    if value and value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1])
    return value


def load_config(config_path: Optional[str] = None, **overrides) -> TrackerConfig:
    """Load tracker configuration.

    Args:
        config_path: Path to config YAML file (defaults are used if missing)
        **overrides: Top-level values overriding the file

    Returns:
        TrackerConfig

    Raises:
        ConfigError: If the file cannot be parsed or values are invalid
    """
    data = {}
    if config_path and Path(config_path).exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        config = TrackerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    load_dotenv()
    config.mt.api_key = _expand_env(config.mt.api_key)

    return config
