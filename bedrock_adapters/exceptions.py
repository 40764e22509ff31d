# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Bedrock adapter exceptions

Custom exception classes raised while wiring Bedrock into the application's
model-provider layer.
"""


class BedrockAdapterError(Exception):
    """Base exception for all Bedrock adapter errors."""

    pass


class UnsupportedModelError(BedrockAdapterError, ValueError):
    """
    Raised when an embedding model is not in the Bedrock model registry.

    The message lists every supported model id.
    """

    def __init__(self, model_id: str, supported_models):
        self.model_id = model_id
        self.supported_models = list(supported_models)
        super().__init__(
            f'Unsupported Bedrock embedding model: "{model_id}". '
            f"Supported models: {', '.join(self.supported_models)}"
        )


class MissingCredentialsError(BedrockAdapterError, ValueError):
    """
    Raised when no usable AWS credential form is present in the environment.

    Examples:
        - AWS_ACCESS_KEY_ID set without AWS_SECRET_ACCESS_KEY
        - No AWS_PROFILE and no AWS_BEARER_TOKEN_BEDROCK
    """

    pass
