# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Device fingerprint sent to the attribution service."""

from typing import Any

from pydantic import BaseModel, Field


class DeviceFingerprint(BaseModel):
    """Snapshot of device and platform signals.

    Rebuilt for every verify call. Equality is structural.
    """

    os: str = Field(..., description="Operating system name")
    os_version: str = Field(..., alias="osVersion", description="Dotted major.minor.patch")
    screen_size: str = Field(default="0 x 0", alias="screenSize", description="'W x H'")
    model: str = Field(..., description="Device model or host name")
    device_id: str = Field(..., alias="deviceId", description="Vendor-scoped or generated UUID")
    language_code: str = Field(default="en", alias="languageCode", description="ISO 639-1")

    model_config = {"populate_by_name": True, "frozen": True}

    def to_payload(self) -> dict[str, Any]:
        """Convert to the wire dictionary.

        Returns:
            Dictionary keyed by the service field names
        """
        return self.model_dump(by_alias=True)
