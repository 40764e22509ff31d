# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Pytest configuration file for the Bedrock adapter tests.
"""

import pytest

from bedrock_adapters.discovery import reset_bedrock_discovery_cache_for_test

# Environment that changes credential, region or proxy resolution
AWS_ENV_VARS = [
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_SECURITY_TOKEN",
    "AWS_BEARER_TOKEN_BEDROCK",
    "AWS_PROFILE",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "HTTPS_PROXY",
    "https_proxy",
    "HTTP_PROXY",
    "http_proxy",
]


@pytest.fixture(autouse=True)
def clean_aws_env(monkeypatch):
    """Start every test without AWS credentials, region or proxy settings."""
    for env_var in AWS_ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Set up AWS access keys for testing."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")


@pytest.fixture(autouse=True)
def reset_discovery_cache():
    reset_bedrock_discovery_cache_for_test()
    yield
    reset_bedrock_discovery_cache_for_test()
