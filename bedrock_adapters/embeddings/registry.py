# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Registry of supported Bedrock embedding models.

Each entry carries the request builder and response parser for one model's
wire format. Add new Bedrock embedding models here as they become GA.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

NOVA_2_MULTIMODAL_EMBEDDINGS = "amazon.nova-2-multimodal-embeddings-v1:0"


@dataclass(frozen=True)
class BedrockModelConfig:
    """Wire format and limits for one embedding model."""

    max_input_chars: int
    default_dimension: int
    build_request: Callable[[str, int], Dict[str, Any]]
    parse_response: Callable[[Any], List[float]]


def build_nova2_request(text: str, dimension: int) -> Dict[str, Any]:
    return {
        "schemaVersion": "nova-multimodal-embed-v1",
        "taskType": "SINGLE_EMBEDDING",
        "singleEmbeddingParams": {
            "embeddingPurpose": "GENERIC_INDEX",
            "embeddingDimension": dimension,
            "text": {
                "truncationMode": "END",
                "value": text,
            },
        },
    }


def parse_nova2_response(body: Any) -> List[float]:
    """
    Extract `embeddings[0].embedding` from a Nova 2 response.

    Returns an empty list when the response does not have that shape.
    """
    if not isinstance(body, dict):
        return []
    embeddings = body.get("embeddings")
    if not isinstance(embeddings, list) or not embeddings:
        return []
    first = embeddings[0]
    if not isinstance(first, dict):
        return []
    embedding = first.get("embedding")
    return embedding if isinstance(embedding, list) else []


BEDROCK_MODEL_REGISTRY: Dict[str, BedrockModelConfig] = {
    NOVA_2_MULTIMODAL_EMBEDDINGS: BedrockModelConfig(
        max_input_chars=8192,
        default_dimension=1024,
        build_request=build_nova2_request,
        parse_response=parse_nova2_response,
    ),
}
