# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""Bedrock client construction shared by the embedding and discovery adapters."""

from .client import PROXY_ENV_VARS, create_bedrock_client, resolve_proxy_url

__all__ = ["PROXY_ENV_VARS", "create_bedrock_client", "resolve_proxy_url"]
