"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from pagewalk.core.config.models import AppConfig
from pagewalk.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

API_TOKEN_ENV_VAR = "PAGEWALK_API_TOKEN"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'

    Raises:
        ValueError: If the extension is not .json, .yaml or .yml
    """
    suffix = Path(file_path).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a raw configuration dictionary from JSON or YAML.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary (empty for an empty YAML file)

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    text = path.read_text(encoding="utf-8")

    if fmt == "json":
        try:
            content = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if content is None:
            return {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root in {path} must be a mapping, got {type(content).__name__}")
    return content


def load_app_config(path: str | Path) -> AppConfig:
    """Load and validate application configuration.

    ``api_token`` is taken from ``PAGEWALK_API_TOKEN`` when the file leaves it
    unset.

    Raises:
        FileNotFoundError: If config file does not exist
        ValidationError: If config is invalid
    """
    config = AppConfig.model_validate(load_config(path))

    if config.api_token is None:
        token = os.getenv(API_TOKEN_ENV_VAR)
        if token:
            logger.debug(f"Loaded {API_TOKEN_ENV_VAR} from environment")
            config = config.model_copy(update={"api_token": token})

    return config


def configure_logging(config: AppConfig) -> None:
    """Configure Python logging from app config."""
    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
