# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Error taxonomy for attribution and link creation."""

from enum import IntEnum
from typing import Optional


class DeepOneErrorCode(IntEnum):
    """Error codes reported to handlers and link results."""

    INVALID_CONFIGURATION = 1001  # Link parameters failed to serialize
    NETWORK_ERROR = 1002  # Transport failure on verify or create
    ATTRIBUTION_FAILED = 1003  # Verify returned no usable result
    INVALID_URL = 1004  # Create succeeded without a usable URL
    MISSING_CREDENTIALS = 1005  # Service rejected the API credential


class DeepOneError(Exception):
    """Error delivered through handlers and results, never raised publicly."""

    domain = "DeepOneErrorDomain"

    def __init__(
        self,
        code: DeepOneErrorCode,
        message: str,
        underlying: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.underlying = underlying

    def __repr__(self) -> str:
        return f"DeepOneError(code={self.code.name}, message={self.message!r})"

    @classmethod
    def invalid_configuration(cls) -> "DeepOneError":
        return cls(
            DeepOneErrorCode.INVALID_CONFIGURATION,
            "Invalid link configuration provided",
        )

    @classmethod
    def network_error(cls, underlying: BaseException) -> "DeepOneError":
        return cls(
            DeepOneErrorCode.NETWORK_ERROR,
            f"Network error: {underlying}",
            underlying,
        )

    @classmethod
    def attribution_failed(cls, underlying: BaseException) -> "DeepOneError":
        return cls(
            DeepOneErrorCode.ATTRIBUTION_FAILED,
            f"Attribution analysis failed: {underlying}",
            underlying,
        )

    @classmethod
    def invalid_url(cls) -> "DeepOneError":
        return cls(DeepOneErrorCode.INVALID_URL, "Invalid URL provided")

    @classmethod
    def missing_credentials(
        cls, underlying: Optional[BaseException] = None
    ) -> "DeepOneError":
        return cls(
            DeepOneErrorCode.MISSING_CREDENTIALS,
            "Missing API credentials in configuration",
            underlying,
        )
