# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Bedrock foundation model discovery."""

from .bedrock_discovery import (
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_MAX_TOKENS,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    BedrockModelDiscovery,
    build_inference_profile_map,
    default_discovery,
    discover_bedrock_models,
    fetch_model_definitions,
    normalize_provider_filter,
    reset_bedrock_discovery_cache_for_test,
    resolve_discovery_config,
)

__all__ = [
    "DEFAULT_CONTEXT_WINDOW",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_REFRESH_INTERVAL_SECONDS",
    "BedrockModelDiscovery",
    "build_inference_profile_map",
    "default_discovery",
    "discover_bedrock_models",
    "fetch_model_definitions",
    "normalize_provider_filter",
    "reset_bedrock_discovery_cache_for_test",
    "resolve_discovery_config",
]
