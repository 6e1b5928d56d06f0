# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Attribution data model and the URL parsing pipeline."""

from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, Field, field_validator

# Attribution payload keys
ORIGIN_URL = "origin_url"
ROUTE_PATH = "route_path"
QUERY_PARAMETERS = "query_params"
IS_FIRST_SESSION = "is_first_session"
ATTRIBUTION_DATA = "attribution_data"

UTM_KEYS = ("utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content")

# Custom attribution query keys and the payload keys they map to
CUSTOM_ATTRIBUTION_KEYS = {
    "ref": "referrer",
    "campaign_id": "campaign_identifier",
}


def parse_query_items(query: str) -> dict[str, Optional[str]]:
    """Split a raw query string into decoded items.

    A bare key without '=' maps to None, not to an empty string.
    Later duplicates overwrite earlier ones.

    Args:
        query: Query string without the leading '?'

    Returns:
        Mapping of query item names to optional values
    """
    items: dict[str, Optional[str]] = {}
    for segment in query.split("&"):
        if not segment:
            continue
        name, sep, value = segment.partition("=")
        items[unquote(name)] = unquote(value) if sep else None
    return items


def extract_marketing_attribution(
    query_params: dict[str, Optional[str]],
) -> dict[str, str]:
    """Pick the marketing fields out of the query items.

    Only the UTM keys plus 'ref' and 'campaign_id' are copied; every
    other key is ignored.

    Args:
        query_params: Decoded query items

    Returns:
        Marketing sub-map, empty when no marketing key carries a value
    """
    marketing_data: dict[str, str] = {}

    for key in UTM_KEYS:
        value = query_params.get(key)
        if value is not None:
            marketing_data[key] = value

    for query_key, payload_key in CUSTOM_ATTRIBUTION_KEYS.items():
        value = query_params.get(query_key)
        if value is not None:
            marketing_data[payload_key] = value

    return marketing_data


def build_attribution_payload(
    url: Optional[str], is_first_session: bool
) -> dict[str, Any]:
    """Assemble the raw attribution dictionary for a URL.

    Args:
        url: Source URL, or None when no link is known
        is_first_session: Current first-session flag

    Returns:
        Dictionary keyed by the attribution payload field names
    """
    payload: dict[str, Any] = {IS_FIRST_SESSION: is_first_session}
    if url is None:
        return payload

    payload[ORIGIN_URL] = url

    try:
        components = urlsplit(url)
    except ValueError:
        # Unparseable URL keeps its origin only
        return payload

    payload[ROUTE_PATH] = unquote(components.path)

    query_params = parse_query_items(components.query)
    payload[QUERY_PARAMETERS] = query_params

    marketing_data = extract_marketing_attribution(query_params)
    if marketing_data:
        payload[ATTRIBUTION_DATA] = marketing_data

    return payload


class AttributionData(BaseModel):
    """Immutable attribution record produced from a URL.

    Typed accessors cover the known fields; `raw_data` keeps the full
    assembled dictionary for custom keys. Both mappings are read-only views.
    """

    origin_url: Optional[str] = Field(
        default=None,
        description="The URL that triggered the attribution",
    )
    route_path: Optional[str] = Field(
        default=None,
        description="The path component of the attribution URL",
    )
    is_first_session: bool = Field(
        default=False,
        description="Whether this is the first session on this install",
    )
    query_parameters: Mapping[str, Optional[str]] = Field(
        default_factory=dict,
        description="All query parameters from the attribution URL",
    )

    # Marketing attribution
    marketing_source: Optional[str] = None
    marketing_medium: Optional[str] = None
    marketing_campaign: Optional[str] = None
    marketing_term: Optional[str] = None
    marketing_content: Optional[str] = None
    referrer: Optional[str] = None
    campaign_identifier: Optional[str] = None

    raw_data: Mapping[str, Any] = Field(
        default_factory=dict,
        description="Raw attribution dictionary (for custom parameters)",
    )

    model_config = {"frozen": True}

    @field_validator("query_parameters", "raw_data", mode="after")
    @classmethod
    def freeze_mappings(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @classmethod
    def from_dict(cls, dictionary: Mapping[str, Any]) -> "AttributionData":
        """Create from an assembled attribution dictionary.

        Values of the wrong type are treated as absent.

        Args:
            dictionary: Attribution payload (see build_attribution_payload)

        Returns:
            AttributionData instance
        """
        marketing_data = dictionary.get(ATTRIBUTION_DATA)
        if not isinstance(marketing_data, Mapping):
            marketing_data = {}

        query_parameters = dictionary.get(QUERY_PARAMETERS)
        if not isinstance(query_parameters, Mapping):
            query_parameters = {}

        is_first_session = dictionary.get(IS_FIRST_SESSION)

        return cls(
            origin_url=_string_or_none(dictionary.get(ORIGIN_URL)),
            route_path=_string_or_none(dictionary.get(ROUTE_PATH)),
            is_first_session=is_first_session if isinstance(is_first_session, bool) else False,
            query_parameters={
                str(k): _string_or_none(v) for k, v in query_parameters.items()
            },
            marketing_source=_string_or_none(marketing_data.get("utm_source")),
            marketing_medium=_string_or_none(marketing_data.get("utm_medium")),
            marketing_campaign=_string_or_none(marketing_data.get("utm_campaign")),
            marketing_term=_string_or_none(marketing_data.get("utm_term")),
            marketing_content=_string_or_none(marketing_data.get("utm_content")),
            referrer=_string_or_none(marketing_data.get("referrer")),
            campaign_identifier=_string_or_none(marketing_data.get("campaign_identifier")),
            raw_data=dictionary,
        )

    @classmethod
    def from_url(cls, url: Optional[str], is_first_session: bool) -> "AttributionData":
        """Parse a URL into attribution data.

        Args:
            url: Source URL, or None when no link is known
            is_first_session: Current first-session flag

        Returns:
            AttributionData instance
        """
        return cls.from_dict(build_attribution_payload(url, is_first_session))

    # -------------------------------------------------------------------------
    # Convenience accessors
    # -------------------------------------------------------------------------

    @property
    def has_marketing_data(self) -> bool:
        """Whether source, medium or campaign is present."""
        return (
            self.marketing_source is not None
            or self.marketing_medium is not None
            or self.marketing_campaign is not None
        )

    @property
    def has_utm_parameters(self) -> bool:
        """Whether any of the five UTM fields is present."""
        return (
            self.has_marketing_data
            or self.marketing_term is not None
            or self.marketing_content is not None
        )

    @property
    def utm_parameters(self) -> dict[str, str]:
        """All present UTM parameters keyed by their query names."""
        values = (
            self.marketing_source,
            self.marketing_medium,
            self.marketing_campaign,
            self.marketing_term,
            self.marketing_content,
        )
        return {key: value for key, value in zip(UTM_KEYS, values) if value is not None}

    @property
    def url(self) -> Optional[str]:
        return self.origin_url

    def custom_parameter(self, key: str) -> Any:
        """Get a raw attribution value by key."""
        return self.raw_data.get(key)

    def custom_string_parameter(self, key: str) -> Optional[str]:
        """Get a raw attribution value by key if it is a string."""
        return _string_or_none(self.raw_data.get(key))

    def matches(self, route: str) -> bool:
        """Check if the route path equals the given route."""
        return self.route_path == route

    def has_route(self, prefix: str) -> bool:
        """Check if the route path starts with the given prefix."""
        return self.route_path is not None and self.route_path.startswith(prefix)

    def extract_id(self, route_prefix: str) -> Optional[str]:
        """Extract an ID from the route path.

        Example: route path "/product/123" with prefix "/product/" gives "123".

        Args:
            route_prefix: Prefix preceding the ID

        Returns:
            The remainder of the path, or None if the prefix does not match
        """
        if not self.has_route(route_prefix):
            return None
        return self.route_path[len(route_prefix):]

    def __str__(self) -> str:
        components = []
        if self.origin_url is not None:
            components.append(f"originURL: {self.origin_url}")
        if self.route_path is not None:
            components.append(f"routePath: {self.route_path}")
        components.append(f"isFirstSession: {self.is_first_session}")

        if self.has_marketing_data:
            marketing = []
            if self.marketing_source is not None:
                marketing.append(f"source: {self.marketing_source}")
            if self.marketing_campaign is not None:
                marketing.append(f"campaign: {self.marketing_campaign}")
            components.append(f"marketing: [{', '.join(marketing)}]")

        return f"AttributionData({', '.join(components)})"


def _string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _freeze(value: Any) -> Any:
    """Read-only copy of a mapping, nested mappings included."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value
