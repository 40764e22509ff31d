# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .models import (
    BEDROCK_PROVIDER_KEY,
    AppConfig,
    BedrockDiscoveryConfig,
    BedrockProviderConfig,
    ModelsConfig,
)

logger = logging.getLogger(__name__)

ConfigSource = Union[AppConfig, Dict[str, Any], str, Path, None]


def load_config(source: ConfigSource = None) -> AppConfig:
    """
    Load the application configuration consumed by the Bedrock adapters.

    Args:
        source: An AppConfig (returned as-is), a configuration dictionary,
            a path to a YAML file, or None for an empty configuration

    Returns:
        Validated AppConfig instance
    """
    if source is None:
        return AppConfig()
    if isinstance(source, AppConfig):
        return source
    if isinstance(source, dict):
        return AppConfig.model_validate(source)

    path = Path(source)
    logger.debug(f"Loading configuration from {path}")
    with path.open("r", encoding="utf-8") as f:
        data: Optional[Dict[str, Any]] = yaml.safe_load(f)
    return AppConfig.model_validate(data or {})


__all__ = [
    "BEDROCK_PROVIDER_KEY",
    "AppConfig",
    "BedrockDiscoveryConfig",
    "BedrockProviderConfig",
    "ModelsConfig",
    "load_config",
]
