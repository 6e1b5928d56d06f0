# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from deepone_sdk.config.settings import Settings
from deepone_sdk.device.providers import StaticFingerprintProvider
from deepone_sdk.models.fingerprint import DeviceFingerprint
from deepone_sdk.storage.key_value import MemoryKeyValueStore


@pytest.fixture
def sample_fingerprint() -> DeviceFingerprint:
    """Sample device fingerprint for testing."""
    return DeviceFingerprint(
        os="iOS",
        os_version="17.4.1",
        screen_size="1179 x 2556",
        model="iPhone",
        device_id="6F1C1B7E-5A0C-4C1E-9D2B-3B9B3D6A2F10",
        language_code="en",
    )


@pytest.fixture
def fingerprint_provider(sample_fingerprint) -> StaticFingerprintProvider:
    """Provider returning the sample fingerprint."""
    return StaticFingerprintProvider(sample_fingerprint)


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """Empty in-memory marker store."""
    return MemoryKeyValueStore()


@pytest.fixture
def sdk_settings(tmp_path) -> Settings:
    """Settings with both credential slots filled."""
    return Settings(
        test_key="test_key_123",
        live_key="live_key_456",
        api_base_url="https://api.deepone.test/v1",
        storage_dir=tmp_path,
    )


@pytest.fixture
def transport() -> MagicMock:
    """Transport double with async verify and create_link."""
    mock = MagicMock()
    mock.verify = AsyncMock(return_value={})
    mock.create_link = AsyncMock(return_value="https://deep.one/abc123")
    return mock


@pytest.fixture
def sample_verify_response() -> dict:
    """Sample verify response for a deferred deep link."""
    return {
        "isFirstSession": False,
        "link": "https://x.test/offer?utm_source=facebook&utm_campaign=launch",
    }
