# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Data models for the DeepOne SDK."""

from .activity import ACTIVITY_TYPE_BROWSING_WEB, UserActivity
from .attribution import (
    AttributionData,
    build_attribution_payload,
    extract_marketing_attribution,
    parse_query_items,
)
from .fingerprint import DeviceFingerprint
from .link_builder import CreateLinkBuilder

__all__ = [
    # Attribution models
    "AttributionData",
    "build_attribution_payload",
    "extract_marketing_attribution",
    "parse_query_items",
    # Link creation
    "CreateLinkBuilder",
    # Device
    "DeviceFingerprint",
    # Host events
    "ACTIVITY_TYPE_BROWSING_WEB",
    "UserActivity",
]
