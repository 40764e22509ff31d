# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Unit tests for the Bedrock embedding provider."""

import io
import json
from unittest.mock import MagicMock, patch

import pytest
from bedrock_adapters.embeddings import (
    DEFAULT_BEDROCK_EMBEDDING_MODEL,
    EmbeddingProviderOptions,
    create_bedrock_embedding_provider,
    normalize_bedrock_model,
)
from bedrock_adapters.exceptions import MissingCredentialsError, UnsupportedModelError


def make_options(model="", config=None):
    return EmbeddingProviderOptions(
        config=config or {}, provider="bedrock", model=model, fallback="none"
    )


def response_with(body):
    """Build an invoke_model response whose body is a fresh stream."""
    return {"body": io.BytesIO(json.dumps(body).encode("utf-8"))}


@pytest.fixture
def runtime_client():
    """Mock bedrock-runtime client returning a Nova 2 embedding."""
    client = MagicMock()
    client.invoke_model.side_effect = lambda **kwargs: response_with(
        {"embeddings": [{"embeddingType": "TEXT", "embedding": [0.1, 0.2, 0.3]}]}
    )
    with patch(
        "bedrock_adapters.embeddings.provider.create_bedrock_client",
        return_value=client,
    ) as factory:
        client.factory = factory
        yield client


@pytest.mark.unit
class TestNormalizeBedrockModel:
    """Test model name normalization."""

    def test_returns_default_for_empty_string(self):
        assert normalize_bedrock_model("") == DEFAULT_BEDROCK_EMBEDDING_MODEL
        assert normalize_bedrock_model("   ") == DEFAULT_BEDROCK_EMBEDDING_MODEL

    def test_returns_default_for_none(self):
        assert normalize_bedrock_model(None) == DEFAULT_BEDROCK_EMBEDDING_MODEL

    def test_strips_bedrock_prefix(self):
        assert (
            normalize_bedrock_model("bedrock/amazon.nova-2-multimodal-embeddings-v1:0")
            == "amazon.nova-2-multimodal-embeddings-v1:0"
        )

    def test_passes_through_bare_model_id(self):
        assert normalize_bedrock_model("some.model-v1:0") == "some.model-v1:0"
        assert normalize_bedrock_model("bedrock/some.model-v1:0") == "some.model-v1:0"

    def test_trims_whitespace(self):
        assert normalize_bedrock_model("  some.model-v1:0 ") == "some.model-v1:0"


@pytest.mark.unit
class TestCreateBedrockEmbeddingProvider:
    """Test provider creation: model, credentials and region resolution."""

    def test_uses_default_region_when_aws_region_not_set(
        self, aws_credentials, runtime_client
    ):
        _, client = create_bedrock_embedding_provider(make_options())

        assert client.region == "us-east-1"
        runtime_client.factory.assert_called_once_with("bedrock-runtime", "us-east-1")

    def test_uses_aws_region_env_var(self, aws_credentials, runtime_client, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "ap-southeast-1")

        _, client = create_bedrock_embedding_provider(make_options())

        assert client.region == "ap-southeast-1"

    def test_uses_aws_default_region_env_var(
        self, aws_credentials, runtime_client, monkeypatch
    ):
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")

        _, client = create_bedrock_embedding_provider(make_options())

        assert client.region == "eu-west-1"

    def test_provider_config_region_takes_precedence(
        self, aws_credentials, runtime_client, monkeypatch
    ):
        monkeypatch.setenv("AWS_REGION", "ap-southeast-1")
        config = {"models": {"providers": {"amazon-bedrock": {"region": "us-west-2"}}}}

        _, client = create_bedrock_embedding_provider(make_options(config=config))

        assert client.region == "us-west-2"

    def test_ignores_other_provider_entries(self, aws_credentials, runtime_client):
        config = {
            "models": {
                "providers": {
                    "openai": None,
                    "amazon-bedrock": {"region": "eu-west-2"},
                }
            }
        }

        _, client = create_bedrock_embedding_provider(make_options(config=config))

        assert client.region == "eu-west-2"

    def test_throws_when_no_aws_credentials_are_available(self, runtime_client):
        with pytest.raises(MissingCredentialsError) as exc_info:
            create_bedrock_embedding_provider(make_options())

        assert 'No API key found for provider "bedrock"' in str(exc_info.value)
        assert "AWS_PROFILE" in str(exc_info.value)
        assert "AWS_BEARER_TOKEN_BEDROCK" in str(exc_info.value)
        runtime_client.factory.assert_not_called()

    def test_access_key_without_secret_is_not_enough(self, runtime_client, monkeypatch):
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test-key")

        with pytest.raises(MissingCredentialsError):
            create_bedrock_embedding_provider(make_options())

    def test_accepts_bearer_token_as_credentials(self, runtime_client, monkeypatch):
        monkeypatch.setenv("AWS_BEARER_TOKEN_BEDROCK", "sso-token")

        provider, _ = create_bedrock_embedding_provider(make_options())

        assert provider.id == "bedrock"

    def test_accepts_profile_as_credentials(self, runtime_client, monkeypatch):
        monkeypatch.setenv("AWS_PROFILE", "dev")

        provider, _ = create_bedrock_embedding_provider(make_options())

        assert provider.id == "bedrock"

    def test_throws_for_unsupported_model(self, aws_credentials, runtime_client):
        with pytest.raises(UnsupportedModelError) as exc_info:
            create_bedrock_embedding_provider(
                make_options(model="amazon.titan-embed-text-v2:0")
            )

        assert "Unsupported Bedrock embedding model" in str(exc_info.value)
        assert DEFAULT_BEDROCK_EMBEDDING_MODEL in str(exc_info.value)
        runtime_client.factory.assert_not_called()

    def test_unsupported_model_checked_before_credentials(self, runtime_client):
        with pytest.raises(UnsupportedModelError):
            create_bedrock_embedding_provider(make_options(model="unknown.model"))

    def test_exposes_provider_id_and_model(self, aws_credentials, runtime_client):
        provider, client = create_bedrock_embedding_provider(
            make_options(model="bedrock/amazon.nova-2-multimodal-embeddings-v1:0")
        )

        assert provider.id == "bedrock"
        assert provider.model == DEFAULT_BEDROCK_EMBEDDING_MODEL
        assert provider.max_input_chars == 8192
        assert client.model_id == DEFAULT_BEDROCK_EMBEDDING_MODEL


@pytest.mark.unit
class TestBedrockEmbeddingProvider:
    """Test embedding requests and response parsing."""

    @pytest.mark.asyncio
    async def test_sends_nova2_request_body(self, aws_credentials, runtime_client):
        provider, _ = create_bedrock_embedding_provider(make_options())

        await provider.embed_query("hello")

        runtime_client.invoke_model.assert_called_once()
        call_args = runtime_client.invoke_model.call_args
        assert call_args.kwargs["modelId"] == DEFAULT_BEDROCK_EMBEDDING_MODEL
        assert call_args.kwargs["contentType"] == "application/json"
        assert call_args.kwargs["accept"] == "application/json"
        assert json.loads(call_args.kwargs["body"]) == {
            "schemaVersion": "nova-multimodal-embed-v1",
            "taskType": "SINGLE_EMBEDDING",
            "singleEmbeddingParams": {
                "embeddingPurpose": "GENERIC_INDEX",
                "embeddingDimension": 1024,
                "text": {"truncationMode": "END", "value": "hello"},
            },
        }

    @pytest.mark.asyncio
    async def test_parses_nova2_response(self, aws_credentials, runtime_client):
        provider, _ = create_bedrock_embedding_provider(make_options())

        result = await provider.embed_query("hello")

        assert result == [0.1, 0.2, 0.3]

    @pytest.mark.asyncio
    async def test_embed_batch_calls_invoke_once_per_text(
        self, aws_credentials, runtime_client
    ):
        runtime_client.invoke_model.side_effect = lambda **kwargs: response_with(
            {
                "embeddings": [
                    {"embedding": [float(len(json.loads(kwargs["body"])["singleEmbeddingParams"]["text"]["value"]))]}
                ]
            }
        )
        provider, _ = create_bedrock_embedding_provider(make_options())

        results = await provider.embed_batch(["a", "bb", "ccc"])

        assert runtime_client.invoke_model.call_count == 3
        assert results == [[1.0], [2.0], [3.0]]

    @pytest.mark.asyncio
    async def test_embed_batch_with_no_texts(self, aws_credentials, runtime_client):
        provider, _ = create_bedrock_embedding_provider(make_options())

        assert await provider.embed_batch([]) == []
        runtime_client.invoke_model.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_empty_vector_when_embedding_missing(
        self, aws_credentials, runtime_client
    ):
        runtime_client.invoke_model.side_effect = lambda **kwargs: response_with(
            {"unexpected": True}
        )
        provider, _ = create_bedrock_embedding_provider(make_options())

        result = await provider.embed_query("hello")

        assert result == []
        assert provider.empty_embedding_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json_body_raises(self, aws_credentials, runtime_client):
        runtime_client.invoke_model.side_effect = lambda **kwargs: {
            "body": io.BytesIO(b"not json")
        }
        provider, _ = create_bedrock_embedding_provider(make_options())

        with pytest.raises(json.JSONDecodeError):
            await provider.embed_query("hello")

        assert provider.empty_embedding_count == 0

    @pytest.mark.asyncio
    async def test_remote_errors_propagate(self, aws_credentials, runtime_client):
        runtime_client.invoke_model.side_effect = RuntimeError("connection reset")
        provider, _ = create_bedrock_embedding_provider(make_options())

        with pytest.raises(RuntimeError, match="connection reset"):
            await provider.embed_query("hello")
