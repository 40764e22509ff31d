# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Pydantic models for the configuration consumed by the Bedrock adapters.

Only the slices of the application configuration that Bedrock cares about are
modelled here; everything else is ignored.

Usage:
    from bedrock_adapters.config.models import AppConfig

    config = AppConfig.model_validate(config_dict)

    # Type-safe access
    region = config.models.provider_region("amazon-bedrock")
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BEDROCK_PROVIDER_KEY = "amazon-bedrock"


def _parse_optional_number(v: Any) -> Optional[float]:
    """Parse a number from string or number, treating empty strings as None"""
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    if isinstance(v, bool):
        raise ValueError("expected a number")
    number = float(v)
    if not math.isfinite(number):
        raise ValueError("expected a finite number")
    return number


class BedrockProviderConfig(BaseModel):
    """Per-provider settings for Amazon Bedrock"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    region: Optional[str] = Field(default=None, description="AWS region override")

    @field_validator("region", mode="before")
    @classmethod
    def parse_region(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class BedrockDiscoveryConfig(BaseModel):
    """Bedrock model discovery settings"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    refresh_interval: Optional[float] = Field(
        default=None,
        alias="refreshInterval",
        description="Seconds to cache discovery results; 0 disables caching",
    )
    provider_filter: Optional[List[str]] = Field(
        default=None,
        alias="providerFilter",
        description="Provider names to keep (case-insensitive); empty keeps all",
    )
    default_context_window: Optional[float] = Field(
        default=None,
        alias="defaultContextWindow",
        description="Context window assigned to every discovered model",
    )
    default_max_tokens: Optional[float] = Field(
        default=None,
        alias="defaultMaxTokens",
        description="Max output tokens assigned to every discovered model",
    )

    @field_validator(
        "refresh_interval",
        "default_context_window",
        "default_max_tokens",
        mode="before",
    )
    @classmethod
    def parse_numbers(cls, v: Any) -> Optional[float]:
        return _parse_optional_number(v)

    @field_validator("provider_filter", mode="before")
    @classmethod
    def parse_provider_filter(cls, v: Any) -> Optional[List[str]]:
        """Accept a list or a comma-separated string"""
        if v is None:
            return None
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return [str(item) for item in v]


class ModelsConfig(BaseModel):
    """The `models` section of the application configuration"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Entries for other providers are kept as-is and never validated here
    providers: Dict[str, Any] = Field(default_factory=dict)
    bedrock_discovery: Optional[BedrockDiscoveryConfig] = Field(
        default=None, alias="bedrockDiscovery"
    )

    @field_validator("providers", mode="before")
    @classmethod
    def parse_providers(cls, v: Any) -> Dict[str, Any]:
        if v is None:
            return {}
        return v

    def provider_config(
        self, provider: str = BEDROCK_PROVIDER_KEY
    ) -> Optional[BedrockProviderConfig]:
        entry = self.providers.get(provider)
        if isinstance(entry, BedrockProviderConfig):
            return entry
        if not isinstance(entry, dict):
            return None
        return BedrockProviderConfig.model_validate(entry)

    def provider_region(self, provider: str = BEDROCK_PROVIDER_KEY) -> Optional[str]:
        provider_config = self.provider_config(provider)
        return provider_config.region if provider_config else None


class AppConfig(BaseModel):
    """Root of the application configuration as seen by the Bedrock adapters"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    models: ModelsConfig = Field(default_factory=ModelsConfig)

    @field_validator("models", mode="before")
    @classmethod
    def parse_models(cls, v: Any) -> Any:
        return {} if v is None else v
