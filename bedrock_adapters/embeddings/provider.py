# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Bedrock embedding provider.

This module adapts a registered Bedrock embedding model to the application's
embedding provider interface: `embed_query(text)` and `embed_batch(texts)`.
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Union

from ..bedrock import create_bedrock_client
from ..config import BEDROCK_PROVIDER_KEY, AppConfig, load_config
from ..exceptions import MissingCredentialsError, UnsupportedModelError
from .registry import (
    BEDROCK_MODEL_REGISTRY,
    NOVA_2_MULTIMODAL_EMBEDDINGS,
    BedrockModelConfig,
)

logger = logging.getLogger(__name__)

PROVIDER_ID = "bedrock"
MODEL_PREFIX = "bedrock/"
DEFAULT_BEDROCK_EMBEDDING_MODEL = NOVA_2_MULTIMODAL_EMBEDDINGS
DEFAULT_BEDROCK_REGION = "us-east-1"


@dataclass
class EmbeddingProviderOptions:
    """Input to the embedding provider factory."""

    config: Union[AppConfig, Dict[str, Any], None] = None
    provider: str = PROVIDER_ID
    model: Optional[str] = ""
    fallback: str = "none"


@dataclass(frozen=True)
class BedrockEmbeddingClient:
    """Diagnostic descriptor of the resolved model and region."""

    model_id: str
    region: str


def normalize_bedrock_model(model: Optional[str]) -> str:
    """
    Normalize a configured model name to a Bedrock model id.

    Examples:
        >>> normalize_bedrock_model("")
        "amazon.nova-2-multimodal-embeddings-v1:0"

        >>> normalize_bedrock_model("bedrock/amazon.nova-2-multimodal-embeddings-v1:0")
        "amazon.nova-2-multimodal-embeddings-v1:0"
    """
    trimmed = (model or "").strip()
    if not trimmed:
        return DEFAULT_BEDROCK_EMBEDDING_MODEL
    if trimmed.startswith(MODEL_PREFIX):
        return trimmed[len(MODEL_PREFIX) :]
    return trimmed


def _env(name: str) -> str:
    return (os.environ.get(name) or "").strip()


def validate_credentials() -> None:
    """
    Fail fast when no AWS credentials are visible in the environment.

    boto3 resolves credentials at request time through its default chain
    (environment keys, shared profile/SSO, instance role). Bedrock also accepts
    AWS_BEARER_TOKEN_BEDROCK. Passing this check does not guarantee the
    request will succeed; a profile may still be invalid.

    Raises:
        MissingCredentialsError: If none of the accepted credential forms is set
    """
    has_iam_creds = bool(_env("AWS_ACCESS_KEY_ID") and _env("AWS_SECRET_ACCESS_KEY"))
    has_bearer = bool(_env("AWS_BEARER_TOKEN_BEDROCK"))
    has_profile = bool(_env("AWS_PROFILE"))

    if not (has_iam_creds or has_bearer or has_profile):
        raise MissingCredentialsError(
            "\n".join(
                [
                    f'No API key found for provider "{PROVIDER_ID}".',
                    "Set AWS credentials via environment variables (AWS_ACCESS_KEY_ID + AWS_SECRET_ACCESS_KEY),",
                    "or AWS_PROFILE, or AWS_BEARER_TOKEN_BEDROCK for SSO.",
                ]
            )
        )


def resolve_bedrock_region(config: Optional[AppConfig] = None) -> str:
    """
    Resolve the region for Bedrock runtime calls.

    Order: provider config region, AWS_REGION, AWS_DEFAULT_REGION, us-east-1.
    """
    configured = config.models.provider_region(BEDROCK_PROVIDER_KEY) if config else None
    return (
        configured
        or _env("AWS_REGION")
        or _env("AWS_DEFAULT_REGION")
        or DEFAULT_BEDROCK_REGION
    )


class BedrockEmbeddingProvider:
    """Embedding provider backed by a Bedrock runtime client."""

    id = PROVIDER_ID

    def __init__(self, model_id: str, model_config: BedrockModelConfig, runtime_client):
        """
        Initialize the provider.

        Args:
            model_id: Registered Bedrock model id
            model_config: Registry entry for the model
            runtime_client: boto3 bedrock-runtime client
        """
        self.model = model_id
        self.model_config = model_config
        self.max_input_chars = model_config.max_input_chars
        self.dimension = model_config.default_dimension
        self.empty_embedding_count = 0
        self._client = runtime_client

    def _invoke(self, text: str) -> List[float]:
        body = self.model_config.build_request(text, self.dimension)
        logger.debug(f"Bedrock embedding request: model={self.model}, chars={len(text)}")
        response = self._client.invoke_model(
            modelId=self.model,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(body),
        )
        raw = response["body"]
        if hasattr(raw, "read"):
            raw = raw.read()
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        embedding = self.model_config.parse_response(json.loads(raw))
        if not embedding:
            self.empty_embedding_count += 1
            logger.debug(f"No embedding found in {self.model} response")
        return embedding

    async def embed_query(self, text: str) -> List[float]:
        """
        Generate an embedding vector for one text.

        Args:
            text: The text to embed

        Returns:
            List of floats, empty if the response carried no embedding
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._invoke, text))

    async def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed each text with its own request; results keep input order."""
        if not texts:
            return []
        return list(await asyncio.gather(*(self.embed_query(text) for text in texts)))


class BedrockEmbeddingProviderResult(NamedTuple):
    provider: BedrockEmbeddingProvider
    client: BedrockEmbeddingClient


def create_bedrock_embedding_provider(
    options: EmbeddingProviderOptions,
) -> BedrockEmbeddingProviderResult:
    """
    Create an embedding provider for a registered Bedrock model.

    Args:
        options: Factory options (application config, model name)

    Returns:
        (provider, client) named tuple

    Raises:
        UnsupportedModelError: If the model is not in the registry
        MissingCredentialsError: If no AWS credentials are configured
    """
    model_id = normalize_bedrock_model(options.model)
    model_config = BEDROCK_MODEL_REGISTRY.get(model_id)
    if model_config is None:
        raise UnsupportedModelError(model_id, BEDROCK_MODEL_REGISTRY.keys())

    validate_credentials()

    config = load_config(options.config)
    region = resolve_bedrock_region(config)
    runtime_client = create_bedrock_client("bedrock-runtime", region)

    logger.info(f"Initialized Bedrock embedding provider with model {model_id} in {region}")
    return BedrockEmbeddingProviderResult(
        provider=BedrockEmbeddingProvider(model_id, model_config, runtime_client),
        client=BedrockEmbeddingClient(model_id=model_id, region=region),
    )
