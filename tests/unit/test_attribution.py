# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for attribution parsing and the AttributionData model."""

import pytest

from deepone_sdk.models.attribution import (
    AttributionData,
    build_attribution_payload,
    extract_marketing_attribution,
    parse_query_items,
)


class TestParseQueryItems:
    """Tests for query string decomposition."""

    def test_key_value_pairs(self):
        """Test plain key/value items."""
        assert parse_query_items("a=1&b=two") == {"a": "1", "b": "two"}

    def test_bare_key_is_none(self):
        """A key without '=' maps to None, not an empty string."""
        assert parse_query_items("flag") == {"flag": None}

    def test_explicit_empty_value_is_empty_string(self):
        """A key with '=' and nothing after it keeps the empty string."""
        assert parse_query_items("flag=") == {"flag": ""}

    def test_percent_decoding(self):
        """Test names and values are percent-decoded."""
        assert parse_query_items("q=summer%20sale&k%26y=v") == {
            "q": "summer sale",
            "k&y": "v",
        }

    def test_last_duplicate_wins(self):
        """Test a repeated key keeps its last value."""
        assert parse_query_items("a=1&a=2") == {"a": "2"}

    def test_empty_query(self):
        """Test empty query strings and empty segments."""
        assert parse_query_items("") == {}
        assert parse_query_items("a=1&&b=2") == {"a": "1", "b": "2"}


class TestMarketingExtraction:
    """Tests for the marketing sub-map."""

    def test_utm_and_custom_keys(self):
        """Test UTM keys copy through and custom keys are renamed."""
        marketing = extract_marketing_attribution(
            {
                "utm_source": "email",
                "utm_term": "shoes",
                "ref": "friend",
                "campaign_id": "c-42",
                "color": "red",
            }
        )
        assert marketing == {
            "utm_source": "email",
            "utm_term": "shoes",
            "referrer": "friend",
            "campaign_identifier": "c-42",
        }

    def test_unknown_keys_ignored(self):
        """Test unknown keys never reach the marketing map."""
        assert extract_marketing_attribution({"color": "red", "size": "m"}) == {}

    def test_bare_marketing_key_not_copied(self):
        """Test a marketing key without a value is left unset."""
        assert extract_marketing_attribution({"utm_source": None}) == {}


class TestAttributionPayload:
    """Tests for the raw attribution dictionary."""

    def test_no_url(self):
        """Without a URL only the first-session flag is present."""
        assert build_attribution_payload(None, True) == {"is_first_session": True}

    def test_payload_field_names(self):
        """Test the payload uses the stable field names."""
        payload = build_attribution_payload(
            "https://x.test/p?utm_medium=cpc&ref=blog", False
        )
        assert payload == {
            "is_first_session": False,
            "origin_url": "https://x.test/p?utm_medium=cpc&ref=blog",
            "route_path": "/p",
            "query_params": {"utm_medium": "cpc", "ref": "blog"},
            "attribution_data": {"utm_medium": "cpc", "referrer": "blog"},
        }

    def test_no_marketing_data_leaves_key_absent(self):
        """Test attribution_data is absent when no marketing key is present."""
        payload = build_attribution_payload("https://x.test/p?color=red", False)
        assert "attribution_data" not in payload

    def test_unparseable_url_keeps_origin(self):
        """Test a malformed URL keeps only its origin."""
        payload = build_attribution_payload("http://[::1/p?utm_source=x", False)
        assert payload == {
            "is_first_session": False,
            "origin_url": "http://[::1/p?utm_source=x",
        }


class TestAttributionData:
    """Tests for the AttributionData model."""

    def test_marketing_url(self):
        """Test parsing a URL with UTM parameters."""
        data = AttributionData.from_url(
            "https://x.test/product?utm_source=email&utm_campaign=summer", False
        )
        assert data.route_path == "/product"
        assert data.marketing_source == "email"
        assert data.marketing_campaign == "summer"
        assert data.marketing_medium is None
        assert data.has_marketing_data is True
        assert data.has_utm_parameters is True

    def test_no_url(self):
        """Test the no-link case still carries the first-session flag."""
        data = AttributionData.from_url(None, True)
        assert data.is_first_session is True
        assert data.origin_url is None
        assert data.route_path is None
        assert data.query_parameters == {}
        assert data.has_marketing_data is False

    def test_parse_is_idempotent(self):
        """Parsing the same URL twice gives equal records."""
        url = "https://x.test/a/b?utm_source=s&ref=r&x=1&flag"
        assert AttributionData.from_url(url, True) == AttributionData.from_url(url, True)

    @pytest.mark.parametrize(
        "url",
        [
            "https://x.test/p",
            "https://x.test/p?color=red",
            "https://x.test/p?flag&size=xl",
            "myapp://open/settings?tab=privacy",
        ],
    )
    def test_no_marketing_keys(self, url):
        """Test URLs without marketing keys report no marketing data."""
        data = AttributionData.from_url(url, False)
        assert data.has_marketing_data is False
        assert data.has_utm_parameters is False
        assert "attribution_data" not in data.raw_data

    def test_bare_query_key(self):
        """Test a bare key is kept as None."""
        data = AttributionData.from_url("https://x.test/p?flag", False)
        assert data.query_parameters == {"flag": None}

    def test_term_only_is_utm_but_not_marketing(self):
        """Test term/content count as UTM parameters only."""
        data = AttributionData.from_url("https://x.test/p?utm_term=boots", False)
        assert data.has_marketing_data is False
        assert data.has_utm_parameters is True
        assert data.utm_parameters == {"utm_term": "boots"}

    def test_referrer_and_campaign_identifier(self):
        """Test custom attribution keys map to typed fields."""
        data = AttributionData.from_url("https://x.test/p?ref=newsletter&campaign_id=77", False)
        assert data.referrer == "newsletter"
        assert data.campaign_identifier == "77"
        assert data.has_marketing_data is False

    def test_unknown_keys_only_in_raw_data(self):
        """Test unknown keys are reachable through query parameters."""
        data = AttributionData.from_url("https://x.test/p?promo=abc", False)
        assert data.query_parameters["promo"] == "abc"
        assert data.raw_data["query_params"]["promo"] == "abc"
        assert data.custom_parameter("route_path") == "/p"
        assert data.custom_string_parameter("is_first_session") is None

    def test_record_is_frozen(self):
        """Test the record cannot be modified."""
        data = AttributionData.from_url("https://x.test/p", False)
        with pytest.raises(Exception):
            data.route_path = "/other"

    def test_mappings_are_read_only(self):
        """Test the query and raw mappings cannot be modified."""
        data = AttributionData.from_url("https://x.test/p?promo=abc&utm_source=email", False)

        with pytest.raises(TypeError):
            data.query_parameters["promo"] = "other"
        with pytest.raises(TypeError):
            data.raw_data["route_path"] = "/other"
        with pytest.raises(TypeError):
            data.raw_data["attribution_data"]["utm_source"] = "other"
        assert data.query_parameters["promo"] == "abc"
        assert data.marketing_source == "email"

    def test_from_dict_does_not_alias_input(self):
        payload = build_attribution_payload("https://x.test/p?promo=abc", False)
        data = AttributionData.from_dict(payload)

        payload["query_params"]["promo"] = "changed"
        assert data.raw_data["query_params"]["promo"] == "abc"

    def test_from_dict_ignores_wrong_types(self):
        """Test values of the wrong type are treated as absent."""
        data = AttributionData.from_dict(
            {
                "origin_url": 42,
                "route_path": "/p",
                "is_first_session": "yes",
                "attribution_data": {"utm_source": ["list"], "utm_medium": "cpc"},
            }
        )
        assert data.origin_url is None
        assert data.route_path == "/p"
        assert data.is_first_session is False
        assert data.marketing_source is None
        assert data.marketing_medium == "cpc"

    def test_str(self):
        """Test the readable description."""
        data = AttributionData.from_url(
            "https://x.test/p?utm_source=email&utm_campaign=summer", True
        )
        assert str(data) == (
            "AttributionData(originURL: https://x.test/p?utm_source=email&utm_campaign=summer, "
            "routePath: /p, isFirstSession: True, "
            "marketing: [source: email, campaign: summer])"
        )


class TestRouteHelpers:
    """Tests for route matching helpers."""

    def test_matches(self):
        data = AttributionData.from_url("https://x.test/product/123", False)
        assert data.matches("/product/123")
        assert not data.matches("/product")

    def test_has_route(self):
        data = AttributionData.from_url("https://x.test/product/123", False)
        assert data.has_route("/product/")
        assert not data.has_route("/other/")

    def test_extract_id(self):
        """Test extracting the trailing ID from a route."""
        data = AttributionData.from_url("https://x.test/product/123", False)
        assert data.extract_id("/product/") == "123"

    def test_encoded_path_is_decoded(self):
        """Test percent-encoded path segments are decoded like query items."""
        data = AttributionData.from_url("https://x.test/product/hello%20world", False)
        assert data.route_path == "/product/hello world"
        assert data.matches("/product/hello world")
        assert data.extract_id("/product/") == "hello world"

    def test_extract_id_wrong_prefix(self):
        data = AttributionData.from_url("https://x.test/other/123", False)
        assert data.extract_id("/product/") is None

    def test_helpers_without_route(self):
        """Test helpers on a record with no route."""
        data = AttributionData.from_url(None, False)
        assert not data.matches("/")
        assert not data.has_route("/")
        assert data.extract_id("/") is None
