# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Inbound host events consumed by the coordinator."""

from typing import Optional

from pydantic import BaseModel, Field

ACTIVITY_TYPE_BROWSING_WEB = "browsing_web"


class UserActivity(BaseModel):
    """A 'continue activity' event handed over by the host environment."""

    activity_type: str = Field(..., description="Activity kind, e.g. 'browsing_web'")
    webpage_url: Optional[str] = Field(default=None, description="URL carried by the activity")

    @classmethod
    def browsing_web(cls, url: str) -> "UserActivity":
        """Create a web-browsing activity for a universal link."""
        return cls(activity_type=ACTIVITY_TYPE_BROWSING_WEB, webpage_url=url)

    @property
    def is_browsing_web(self) -> bool:
        return self.activity_type == ACTIVITY_TYPE_BROWSING_WEB
