# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Platform fingerprint providers.

Each provider reads the signals available on one platform. Lookups that
fail fall back to generated values, so collecting a fingerprint never
raises.
"""

import locale
import logging
import os
import platform
import re
import subprocess
import sys
import uuid
from pathlib import Path
from typing import Callable, Optional, Protocol

from ..models.fingerprint import DeviceFingerprint

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_CODE = "en"


class FingerprintProvider(Protocol):
    """Capability that produces a device fingerprint."""

    def collect(self) -> DeviceFingerprint: ...


def dotted_version(version: str) -> str:
    """Normalize a version string to major.minor.patch.

    Example: "14.2" -> "14.2.0", "6.8.0-45-generic" -> "6.8.0".
    """
    numbers = re.findall(r"\d+", version.split("-")[0])[:3]
    numbers += ["0"] * (3 - len(numbers))
    return ".".join(str(int(n)) for n in numbers)


def preferred_language_code() -> str:
    """Get the ISO 639-1 code of the preferred language, 'en' if unknown."""
    candidates = []
    try:
        candidates.append(locale.getlocale()[0])
    except ValueError:
        pass
    candidates += [os.environ.get("LC_ALL"), os.environ.get("LANG")]

    for candidate in candidates:
        if not candidate:
            continue
        code = re.split(r"[_.@-]", candidate)[0].lower()
        if len(code) == 2 and code.isalpha():
            return code
    return DEFAULT_LANGUAGE_CODE


class SystemFingerprintProvider:
    """Generic provider built on the platform module."""

    def __init__(self, screen_size: Optional[tuple[int, int]] = None):
        """Initialize the provider.

        Args:
            screen_size: Screen (width, height) in pixels, if the host knows it
        """
        self.screen_size = screen_size

    def os_name(self) -> str:
        return platform.system() or "Unknown"

    def os_version(self) -> str:
        return platform.release()

    def model(self) -> str:
        return platform.node() or platform.machine()

    def device_id(self) -> Optional[str]:
        return None

    def collect(self) -> DeviceFingerprint:
        """Collect the fingerprint for this platform."""
        width, height = self.screen_size or (0, 0)
        return DeviceFingerprint(
            os=self._safe(self.os_name, "Unknown"),
            os_version=dotted_version(self._safe(self.os_version, "")),
            screen_size=f"{int(width)} x {int(height)}",
            model=self._safe(self.model, "Unknown"),
            # Generated per call, not persisted
            device_id=self._safe(self.device_id, None) or str(uuid.uuid4()).upper(),
            language_code=self._safe(preferred_language_code, DEFAULT_LANGUAGE_CODE),
        )

    @staticmethod
    def _safe(getter: Callable, fallback):
        try:
            return getter() or fallback
        except Exception as e:
            logger.debug(f"Fingerprint lookup {getter.__name__} failed: {e}")
            return fallback


class MacOSFingerprintProvider(SystemFingerprintProvider):
    """macOS provider using the hardware serial number as device id."""

    def os_name(self) -> str:
        return "macOS"

    def os_version(self) -> str:
        return platform.mac_ver()[0]

    def device_id(self) -> Optional[str]:
        try:
            result = subprocess.run(
                ["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"ioreg lookup failed: {e}")
            return None
        match = re.search(r'"IOPlatformSerialNumber"\s*=\s*"([^"]+)"', result.stdout)
        return match.group(1) if match else None


class LinuxFingerprintProvider(SystemFingerprintProvider):
    """Linux provider using the systemd machine id as device id."""

    MACHINE_ID_PATHS = (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id"))

    def os_name(self) -> str:
        return "Linux"

    def device_id(self) -> Optional[str]:
        for path in self.MACHINE_ID_PATHS:
            try:
                machine_id = path.read_text().strip()
            except OSError:
                continue
            if machine_id:
                return str(uuid.UUID(machine_id)).upper()
        return None


class StaticFingerprintProvider:
    """Provider returning host-supplied values (mobile shells, tests)."""

    def __init__(self, fingerprint: DeviceFingerprint):
        self.fingerprint = fingerprint

    def collect(self) -> DeviceFingerprint:
        return self.fingerprint


def default_provider() -> FingerprintProvider:
    """Select the provider for the running platform."""
    if sys.platform == "darwin":
        return MacOSFingerprintProvider()
    if sys.platform.startswith("linux"):
        return LinuxFingerprintProvider()
    return SystemFingerprintProvider()


def build_fingerprint(provider: Optional[FingerprintProvider] = None) -> DeviceFingerprint:
    """Build a fingerprint from the given or the platform default provider."""
    return (provider or default_provider()).collect()
