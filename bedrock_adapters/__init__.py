# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

# Use true lazy loading for all submodules
import logging
import os
from typing import TYPE_CHECKING

__version__ = "0.1.0"

logging.getLogger(__name__).setLevel(os.environ.get("LOG_LEVEL", "INFO"))

# Cache for lazy-loaded submodules
_submodules = {}

# Type hints are only evaluated during type checking, not at runtime
if TYPE_CHECKING:
    from .config import load_config as load_config
    from .config.models import AppConfig as AppConfig
    from .discovery import discover_bedrock_models as discover_bedrock_models
    from .embeddings import (
        create_bedrock_embedding_provider as create_bedrock_embedding_provider,
    )
    from .models import ModelDefinition as ModelDefinition


def __getattr__(name):
    """Lazy load submodules only when accessed"""
    if name in [
        "bedrock",
        "config",
        "discovery",
        "embeddings",
        "exceptions",
        "models",
    ]:
        if name not in _submodules:
            _submodules[name] = __import__(f"bedrock_adapters.{name}", fromlist=["*"])
        return _submodules[name]

    # Special handling for directly exposed functions
    if name == "load_config":
        config = __getattr__("config")
        return config.load_config

    if name == "discover_bedrock_models":
        discovery = __getattr__("discovery")
        return discovery.discover_bedrock_models

    if name == "create_bedrock_embedding_provider":
        embeddings = __getattr__("embeddings")
        return embeddings.create_bedrock_embedding_provider

    # Special handling for directly exposed classes
    if name == "AppConfig":
        config = __getattr__("config")
        return config.AppConfig

    if name == "ModelDefinition":
        models = __getattr__("models")
        return models.ModelDefinition

    raise AttributeError(f"module 'bedrock_adapters' has no attribute '{name}'")


__all__ = [
    "bedrock",
    "config",
    "discovery",
    "embeddings",
    "exceptions",
    "models",
    "load_config",
    "discover_bedrock_models",
    "create_bedrock_embedding_provider",
    "AppConfig",
    "ModelDefinition",
]
