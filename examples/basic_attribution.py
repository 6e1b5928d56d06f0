#!/usr/bin/env python3
# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Basic attribution example.

Demonstrates configuring the SDK at startup, handling inbound links and
creating an attributed link. Credentials come from DEEPONE_TEST_KEY /
DEEPONE_LIVE_KEY (or a .env file).

Usage:
    python examples/basic_attribution.py
"""

import asyncio

from deepone_sdk import CreateLinkBuilder, DeepOne, UserActivity
from deepone_sdk.config import settings


def on_attribution(data, error):
    """Route the user based on attribution."""
    if error is not None:
        print(f"Attribution error: {error.message}")
        return

    print(f"Attribution: {data}")
    product_id = data.extract_id("/product/")
    if product_id:
        print(f"  -> open product screen for {product_id}")
    if data.is_first_session and data.has_marketing_data:
        print(f"  -> new install from {data.marketing_source} / {data.marketing_campaign}")


async def main():
    deepone = DeepOne.from_settings(settings)
    try:
        # Startup: resolve deferred deep link for this install
        await deepone.configure(development_mode=True, attribution_handler=on_attribution)

        # Host events: custom scheme open and universal link continuation
        deepone.track_url("myapp://open/product/42?utm_source=push")
        deepone.resolve_universal_link(
            UserActivity.browsing_web("https://app.example.com/product/7?ref=blog")
        )
        await asyncio.sleep(0)

        # Create a shareable link
        builder = (
            CreateLinkBuilder(destination_path="/product/123", link_identifier="summer-promo")
            .set_social_preview("Summer Sale", "50% off this week", "https://cdn.example.com/sale.png")
            .add_custom_parameter("coupon", "SUMMER50")
        )
        builder.marketing_source = "newsletter"
        builder.marketing_campaign = "summer"

        result = await deepone.create_attributed_link(builder)
        if result.success:
            print(f"Created link: {result.url}")
        else:
            print(f"Link creation failed: {result.error.message}")
    finally:
        await deepone.transport.close()


if __name__ == "__main__":
    asyncio.run(main())
