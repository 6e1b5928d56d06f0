# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Configuration builder for attributed deep links."""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

logger = logging.getLogger(__name__)


class CreateLinkBuilder(BaseModel):
    """Link configuration with routing, social preview and marketing fields.

    Field aliases are the wire keys sent to the link creation endpoint.

    Example:
        builder = (
            CreateLinkBuilder(destination_path="/product/123", link_identifier="promo1")
            .set_social_preview("Summer Sale", "50% off everything")
            .add_custom_parameter("coupon", "SUMMER50")
        )
        params = builder.build_parameters()
    """

    # Core routing
    destination_path: str = Field(..., alias="path", description="Deep link path for routing")
    link_identifier: str = Field(..., alias="name", description="Unique identifier for this link")

    # Content
    link_description: Optional[str] = Field(default=None, alias="description")
    social_title: Optional[str] = Field(default=None, alias="previewTitle")
    social_description: Optional[str] = Field(default=None, alias="previewDescription")
    social_image_url: Optional[str] = Field(default=None, alias="previewImageUrl")

    # Marketing attribution
    marketing_source: Optional[str] = Field(default=None, alias="utmSource")
    marketing_medium: Optional[str] = Field(default=None, alias="utmMedium")
    marketing_campaign: Optional[str] = Field(default=None, alias="utmCampaign")
    marketing_term: Optional[str] = Field(default=None, alias="utmTerm")
    marketing_content: Optional[str] = Field(default=None, alias="utmContent")

    _custom_parameters: dict[str, Any] = PrivateAttr(default_factory=dict)

    model_config = {"populate_by_name": True}

    @property
    def custom_parameters(self) -> dict[str, Any]:
        """Copy of the custom parameters added so far."""
        return dict(self._custom_parameters)

    def add_custom_parameter(self, key: str, value: Any) -> "CreateLinkBuilder":
        """Add a custom parameter, replacing any earlier value for the key.

        Args:
            key: Parameter key
            value: Parameter value (must be JSON-representable)

        Returns:
            Self for method chaining
        """
        self._custom_parameters[key] = value
        return self

    def set_social_preview(
        self, title: str, description: str, image_url: Optional[str] = None
    ) -> "CreateLinkBuilder":
        """Set social media preview content.

        Returns:
            Self for method chaining
        """
        self.social_title = title
        self.social_description = description
        self.social_image_url = image_url
        return self

    def build_parameters(self) -> Optional[dict[str, Any]]:
        """Build the parameter dictionary for API submission.

        Custom parameters are applied after the named fields, so a custom
        key that collides with a wire key wins.

        Returns:
            Dictionary of link parameters, or None if it cannot be encoded
        """
        parameters = self.model_dump(by_alias=True, exclude_none=True)
        parameters.update(self._custom_parameters)

        try:
            json.dumps(parameters, allow_nan=False)
        except (TypeError, ValueError) as e:
            logger.warning(f"Link parameters are not encodable: {e}")
            return None

        return parameters
