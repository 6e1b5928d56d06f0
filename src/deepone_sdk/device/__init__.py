# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Device fingerprint collection."""

from .providers import (
    FingerprintProvider,
    LinuxFingerprintProvider,
    MacOSFingerprintProvider,
    StaticFingerprintProvider,
    SystemFingerprintProvider,
    build_fingerprint,
    default_provider,
    dotted_version,
    preferred_language_code,
)

__all__ = [
    "FingerprintProvider",
    "LinuxFingerprintProvider",
    "MacOSFingerprintProvider",
    "StaticFingerprintProvider",
    "SystemFingerprintProvider",
    "build_fingerprint",
    "default_provider",
    "dotted_version",
    "preferred_language_code",
]
