# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Bedrock embedding provider adapter."""

from .provider import (
    DEFAULT_BEDROCK_EMBEDDING_MODEL,
    DEFAULT_BEDROCK_REGION,
    BedrockEmbeddingClient,
    BedrockEmbeddingProvider,
    BedrockEmbeddingProviderResult,
    EmbeddingProviderOptions,
    create_bedrock_embedding_provider,
    normalize_bedrock_model,
    resolve_bedrock_region,
    validate_credentials,
)
from .registry import BEDROCK_MODEL_REGISTRY, BedrockModelConfig

__all__ = [
    "BEDROCK_MODEL_REGISTRY",
    "DEFAULT_BEDROCK_EMBEDDING_MODEL",
    "DEFAULT_BEDROCK_REGION",
    "BedrockEmbeddingClient",
    "BedrockEmbeddingProvider",
    "BedrockEmbeddingProviderResult",
    "BedrockModelConfig",
    "EmbeddingProviderOptions",
    "create_bedrock_embedding_provider",
    "normalize_bedrock_model",
    "resolve_bedrock_region",
    "validate_credentials",
]
