# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Bedrock model discovery.

This module lists the foundation models and inference profiles available in
a region, keeps the ones the application can chat with, and maps them to
provider-agnostic ModelDefinition objects. Results are cached per
configuration with a time-to-live, and concurrent lookups for the same
configuration share one in-flight fetch.
"""

import asyncio
import json
import logging
import math
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Union

from ..bedrock import create_bedrock_client
from ..config import AppConfig, BedrockDiscoveryConfig
from ..models import IMAGE_INPUT, TEXT_INPUT, ModelCost, ModelDefinition

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_SECONDS = 3600
DEFAULT_CONTEXT_WINDOW = 32000
DEFAULT_MAX_TOKENS = 4096
DEFAULT_COST = ModelCost()

FOUNDATION_MODEL_ARN_MARKER = "foundation-model/"
REASONING_HINTS = ["reasoning", "thinking"]

BedrockSummary = Dict[str, Any]
ClientFactory = Callable[[str], Any]
Clock = Callable[[], float]


@dataclass
class DiscoveryCacheEntry:
    """Cached discovery result (or pending fetch) for one configuration."""

    expires_at: float
    value: Optional[List[ModelDefinition]] = None
    in_flight: Optional["asyncio.Task"] = None


def normalize_provider_filter(provider_filter: Optional[List[str]]) -> List[str]:
    """Lower-case, de-duplicate and sort provider names, dropping blanks."""
    if not provider_filter:
        return []
    normalized = {entry.strip().lower() for entry in provider_filter}
    return sorted(entry for entry in normalized if entry)


def _floor_or_default(value: Optional[float], default: int) -> int:
    return math.floor(value if value is not None else default)


def resolve_refresh_interval(config: BedrockDiscoveryConfig) -> int:
    return max(0, _floor_or_default(config.refresh_interval, DEFAULT_REFRESH_INTERVAL_SECONDS))


def resolve_default_context_window(config: BedrockDiscoveryConfig) -> int:
    value = _floor_or_default(config.default_context_window, DEFAULT_CONTEXT_WINDOW)
    return value if value > 0 else DEFAULT_CONTEXT_WINDOW


def resolve_default_max_tokens(config: BedrockDiscoveryConfig) -> int:
    value = _floor_or_default(config.default_max_tokens, DEFAULT_MAX_TOKENS)
    return value if value > 0 else DEFAULT_MAX_TOKENS


def build_cache_key(
    region: str,
    provider_filter: List[str],
    refresh_interval_seconds: int,
    default_context_window: int,
    default_max_tokens: int,
) -> str:
    return json.dumps(
        {
            "region": region,
            "providerFilter": provider_filter,
            "refreshIntervalSeconds": refresh_interval_seconds,
            "defaultContextWindow": default_context_window,
            "defaultMaxTokens": default_max_tokens,
        },
        sort_keys=True,
    )


def _model_id(summary: BedrockSummary) -> str:
    return (summary.get("modelId") or "").strip()


def includes_text_modality(modalities: Optional[List[str]]) -> bool:
    return any(entry.lower() == TEXT_INPUT for entry in modalities or [])


def is_active(summary: BedrockSummary) -> bool:
    status = (summary.get("modelLifecycle") or {}).get("status")
    return isinstance(status, str) and status.upper() == "ACTIVE"


def map_input_modalities(summary: BedrockSummary) -> tuple:
    mapped = []
    for modality in summary.get("inputModalities") or []:
        lower = modality.lower()
        if lower in (TEXT_INPUT, IMAGE_INPUT) and lower not in mapped:
            mapped.append(lower)
    return tuple(mapped) if mapped else (TEXT_INPUT,)


def infer_reasoning_support(summary: BedrockSummary) -> bool:
    haystack = f"{summary.get('modelId') or ''} {summary.get('modelName') or ''}".lower()
    return any(hint in haystack for hint in REASONING_HINTS)


def matches_provider_filter(summary: BedrockSummary, provider_filter: List[str]) -> bool:
    """
    Check a summary against the provider filter.

    The provider name falls back to the model id prefix (e.g. "anthropic" for
    "anthropic.claude-3-haiku") when the summary does not carry one.
    """
    if not provider_filter:
        return True
    provider_name = summary.get("providerName")
    if provider_name is None and isinstance(summary.get("modelId"), str):
        provider_name = summary["modelId"].split(".")[0]
    normalized = (provider_name or "").strip().lower()
    if not normalized:
        return False
    return normalized in provider_filter


def should_include_summary(summary: BedrockSummary, provider_filter: List[str]) -> bool:
    if not _model_id(summary):
        return False
    if not matches_provider_filter(summary, provider_filter):
        return False
    if summary.get("responseStreamingSupported") is not True:
        return False
    if not includes_text_modality(summary.get("outputModalities")):
        return False
    return is_active(summary)


def to_model_definition(
    summary: BedrockSummary,
    context_window: int,
    max_tokens: int,
    inference_profile_id: Optional[str] = None,
) -> ModelDefinition:
    # The inference profile id is what gets invoked when one exists
    model_id = inference_profile_id or _model_id(summary)
    return ModelDefinition(
        id=model_id,
        name=(summary.get("modelName") or "").strip() or model_id,
        reasoning=infer_reasoning_support(summary),
        input=map_input_modalities(summary),
        cost=DEFAULT_COST,
        context_window=context_window,
        max_tokens=max_tokens,
    )


def parse_foundation_model_arn(arn: str) -> Optional[str]:
    """
    Get the base model id from a foundation model ARN.

    Examples:
        >>> parse_foundation_model_arn(
        ...     "arn:aws:bedrock:us-east-1::foundation-model/anthropic.claude-3-haiku-20240307-v1:0"
        ... )
        "anthropic.claude-3-haiku-20240307-v1:0"
    """
    idx = arn.find(FOUNDATION_MODEL_ARN_MARKER)
    if idx < 0:
        return None
    return arn[idx + len(FOUNDATION_MODEL_ARN_MARKER) :].strip() or None


async def build_inference_profile_map(client) -> Dict[str, str]:
    """
    Map base model ids to inference profile ids.

    Some Bedrock models can only be invoked through an inference profile
    (e.g. us.anthropic.claude-...). Failures are not fatal: an empty map just
    means base ids are used.

    Args:
        client: boto3 "bedrock" client

    Returns:
        Dictionary of base model id to inference profile id
    """
    mapping: Dict[str, str] = {}
    loop = asyncio.get_running_loop()
    try:
        next_token = None
        while True:
            kwargs = {"nextToken": next_token} if next_token else {}
            response = await loop.run_in_executor(
                None, partial(client.list_inference_profiles, **kwargs)
            )
            for profile in response.get("inferenceProfileSummaries") or []:
                profile_id = (profile.get("inferenceProfileId") or "").strip()
                if not profile_id:
                    continue
                for model_ref in profile.get("models") or []:
                    base_id = parse_foundation_model_arn(model_ref.get("modelArn") or "")
                    if base_id:
                        mapping[base_id] = profile_id
            next_token = response.get("nextToken")
            if not next_token:
                break
    except Exception as e:
        logger.debug(f"Could not list inference profiles, using base model ids: {e}")
    return mapping


async def fetch_model_definitions(
    client,
    provider_filter: List[str],
    context_window: int,
    max_tokens: int,
) -> List[ModelDefinition]:
    """
    List, filter and normalize the foundation models visible to a client.

    Args:
        client: boto3 "bedrock" client
        provider_filter: Normalized provider names to keep; empty keeps all
        context_window: Context window assigned to every definition
        max_tokens: Max output tokens assigned to every definition

    Returns:
        Model definitions sorted by display name
    """
    loop = asyncio.get_running_loop()
    response, profile_map = await asyncio.gather(
        loop.run_in_executor(None, client.list_foundation_models),
        build_inference_profile_map(client),
    )

    discovered: List[ModelDefinition] = []
    registered_ids = set()
    for summary in response.get("modelSummaries") or []:
        if not should_include_summary(summary, provider_filter):
            continue
        base_id = _model_id(summary)
        profile_id = profile_map.get(base_id)
        definition = to_model_definition(summary, context_window, max_tokens, profile_id)
        discovered.append(definition)
        registered_ids.add(definition.id)
        # Also register the base id so lookups work with either identifier
        if profile_id and base_id not in registered_ids:
            discovered.append(to_model_definition(summary, context_window, max_tokens))
            registered_ids.add(base_id)

    return sorted(discovered, key=lambda d: (d.name.casefold(), d.name))


def resolve_discovery_config(
    config: Union[AppConfig, BedrockDiscoveryConfig, Dict[str, Any], None],
) -> BedrockDiscoveryConfig:
    """Get the discovery settings from whichever config shape was passed in."""
    if isinstance(config, AppConfig):
        config = config.models.bedrock_discovery
    if config is None:
        return BedrockDiscoveryConfig()
    if isinstance(config, dict):
        return BedrockDiscoveryConfig.model_validate(config)
    return config


def _default_client_factory(region: str):
    return create_bedrock_client("bedrock", region)


class BedrockModelDiscovery:
    """Discovery cache holding results per configuration and region."""

    def __init__(self):
        self._cache: Dict[str, DiscoveryCacheEntry] = {}
        self._has_logged_error = False
        self.failure_count = 0

    def reset(self) -> None:
        """Forget cached results and the logged-error state."""
        self._cache.clear()
        self._has_logged_error = False
        self.failure_count = 0

    async def discover(
        self,
        region: str,
        config: Union[AppConfig, BedrockDiscoveryConfig, Dict[str, Any], None] = None,
        clock: Optional[Clock] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> List[ModelDefinition]:
        """
        Get the model definitions available in a region.

        Never raises for remote failures: an empty list means no models are
        available right now.

        Args:
            region: AWS region to list models in
            config: Discovery settings (refresh interval, provider filter,
                defaults), or the application config whose
                `models.bedrockDiscovery` section holds them
            clock: Returns the current time in seconds (defaults to time.time)
            client_factory: Builds the boto3 "bedrock" client for a region

        Returns:
            Model definitions sorted by display name
        """
        config = resolve_discovery_config(config)

        refresh_interval = resolve_refresh_interval(config)
        provider_filter = normalize_provider_filter(config.provider_filter)
        context_window = resolve_default_context_window(config)
        max_tokens = resolve_default_max_tokens(config)
        cache_key = build_cache_key(
            region, provider_filter, refresh_interval, context_window, max_tokens
        )
        now = (clock or time.time)()

        if refresh_interval > 0:
            cached = self._cache.get(cache_key)
            if cached is not None:
                if cached.value is not None and cached.expires_at > now:
                    return list(cached.value)
                if cached.in_flight is not None:
                    return list(await asyncio.shield(cached.in_flight))

        task = asyncio.ensure_future(
            self._resolve(
                cache_key,
                region,
                client_factory or _default_client_factory,
                provider_filter,
                context_window,
                max_tokens,
                refresh_interval,
                now + refresh_interval,
            )
        )
        if refresh_interval > 0:
            self._cache[cache_key] = DiscoveryCacheEntry(
                expires_at=now + refresh_interval, in_flight=task
            )
        return list(await asyncio.shield(task))

    async def _resolve(
        self,
        cache_key: str,
        region: str,
        client_factory: ClientFactory,
        provider_filter: List[str],
        context_window: int,
        max_tokens: int,
        refresh_interval: int,
        expires_at: float,
    ) -> List[ModelDefinition]:
        try:
            client = client_factory(region)
            value = await fetch_model_definitions(
                client, provider_filter, context_window, max_tokens
            )
        except Exception as e:
            self.failure_count += 1
            if refresh_interval > 0:
                self._drop_in_flight(cache_key)
            if not self._has_logged_error:
                self._has_logged_error = True
                logger.warning(f"Failed to list models: {e}")
            return []

        if refresh_interval > 0:
            self._cache[cache_key] = DiscoveryCacheEntry(expires_at=expires_at, value=value)
        logger.debug(f"Discovered {len(value)} Bedrock models in {region}")
        return value

    def _drop_in_flight(self, cache_key: str) -> None:
        cached = self._cache.get(cache_key)
        if cached is not None and cached.in_flight is asyncio.current_task():
            del self._cache[cache_key]


# Create a default discovery instance shared by the process
default_discovery = BedrockModelDiscovery()


async def discover_bedrock_models(
    region: str,
    config: Union[AppConfig, BedrockDiscoveryConfig, Dict[str, Any], None] = None,
    clock: Optional[Clock] = None,
    client_factory: Optional[ClientFactory] = None,
    discovery: Optional[BedrockModelDiscovery] = None,
) -> List[ModelDefinition]:
    """
    Discover Bedrock models using the shared (or a given) discovery cache.

    See BedrockModelDiscovery.discover for the arguments.
    """
    discovery = discovery or default_discovery
    return await discovery.discover(
        region, config=config, clock=clock, client_factory=client_factory
    )


def reset_bedrock_discovery_cache_for_test() -> None:
    default_discovery.reset()
