# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""DeepOne attribution SDK."""

from .clients import DeepOneClient
from .coordinator import AttributionHandler, DeepOne, LinkResult
from .errors import DeepOneError, DeepOneErrorCode
from .models import AttributionData, CreateLinkBuilder, DeviceFingerprint, UserActivity

__version__ = "1.0.0"

__all__ = [
    "AttributionData",
    "AttributionHandler",
    "CreateLinkBuilder",
    "DeepOne",
    "DeepOneClient",
    "DeepOneError",
    "DeepOneErrorCode",
    "DeviceFingerprint",
    "LinkResult",
    "UserActivity",
]
