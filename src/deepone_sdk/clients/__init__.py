# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Client implementations for the DeepOne SDK."""

from .deepone_client import (
    AttributionTransport,
    DeepOneClient,
    DeepOneClientError,
    MissingCredentialsError,
)


__all__ = [
    # Transport capability used by the coordinator
    "AttributionTransport",
    # REST client for the attribution service
    "DeepOneClient",
    "DeepOneClientError",
    "MissingCredentialsError",
]
