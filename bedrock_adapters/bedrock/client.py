# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Bedrock client construction.

This module builds boto3 clients for the Bedrock control plane ("bedrock")
and runtime ("bedrock-runtime") services. When an HTTP(S) proxy is configured
in the environment, every request is routed through it; some deployments
(enclaves, locked-down VPCs) have no direct route to the AWS endpoints.
"""

import logging
import os
from typing import Optional

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

# Checked in order; the first non-empty value wins
PROXY_ENV_VARS = ["HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy"]


def resolve_proxy_url() -> Optional[str]:
    """
    Get the proxy URL from the environment if one is set.

    Returns:
        The proxy URL, or None for a direct connection
    """
    for env_var in PROXY_ENV_VARS:
        value = os.environ.get(env_var)
        if value:
            return value
    return None


def create_bedrock_client(service_name: str, region: str):
    """
    Create a proxy-aware boto3 client for a Bedrock service.

    Args:
        service_name: "bedrock" for model listing, "bedrock-runtime" for invocation
        region: AWS region the client talks to

    Returns:
        boto3 client for the service
    """
    proxy_url = resolve_proxy_url()
    if proxy_url:
        logger.debug(f"Routing {service_name} traffic in {region} through proxy")
        config = Config(proxies={"http": proxy_url, "https": proxy_url})
        return boto3.client(service_name, region_name=region, config=config)
    return boto3.client(service_name, region_name=region)
