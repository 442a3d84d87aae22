"""
infodyn Configuration
=====================

Estimator defaults loaded from YAML and validated with pydantic.

Example infodyn.yaml:

    estimator:
      base: 2            # omit to infer from the data
      history_length: 3
      log_base: 2.718281828459045
    logging:
      level: INFO

Usage:
    from infodyn.config import load_config

    config = load_config('infodyn.yaml')
    config.estimator.history_length
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

# Looked up in the working directory when no path is given
DEFAULT_CONFIG_NAME = 'infodyn.yaml'

_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class EstimatorConfig(BaseModel):
    """Parameters shared by the time-series estimators."""
    base: Optional[int] = Field(None, ge=2, description="Alphabet size; None infers max(series) + 1")
    history_length: int = Field(1, ge=1, description="History length k")
    log_base: Optional[float] = Field(None, gt=0, description="Logarithm base; None uses the alphabet base")

    @field_validator('log_base')
    @classmethod
    def _log_base_not_one(cls, v):
        if v is not None and v == 1:
            raise ValueError("log_base must not be 1")
        return v


class LoggingConfig(BaseModel):
    level: str = 'WARNING'

    @field_validator('level')
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in _LEVELS:
            raise ValueError(f"level must be one of {', '.join(_LEVELS)}")
        return v


class InfodynConfig(BaseModel):
    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> InfodynConfig:
    """
    Load configuration from YAML, falling back to defaults.

    Args:
        path: YAML file. If None, ./infodyn.yaml is used when present.

    Returns:
        Validated InfodynConfig

    Raises:
        FileNotFoundError: path was given but does not exist
        ValueError: the file is not valid YAML or not a mapping
        pydantic.ValidationError: a value is out of range
    """
    if path is None:
        candidate = Path(DEFAULT_CONFIG_NAME)
        if not candidate.exists():
            return InfodynConfig()
        path = candidate

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ValueError(f"{config_path} must contain a mapping, got {type(raw).__name__}")

    logger.debug(f"Loaded configuration from {config_path}")
    merged = _merge(InfodynConfig().model_dump(), raw)
    return InfodynConfig.model_validate(merged)
