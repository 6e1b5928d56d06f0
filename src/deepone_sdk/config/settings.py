# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""SDK settings loaded from environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv
from pydantic_settings import BaseSettings

# Find .env file by searching up from current working directory
_ENV_FILE = find_dotenv(usecwd=True)


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    # API Keys (test slot used in development mode, live slot otherwise)
    test_key: str = ""
    live_key: str = ""

    # Attribution service
    api_base_url: str = "https://api.deepone.io/v1"
    request_timeout: float = 30.0

    # Directory holding the first-session marker (defaults to ~/.deepone)
    storage_dir: Optional[Path] = None

    # Environment
    environment: str = "production"
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "DEEPONE_",
        "env_file": _ENV_FILE if _ENV_FILE else None,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def api_keys(self) -> dict[str, str]:
        """Credentials keyed by slot name ('test' and 'live')."""
        return {"test": self.test_key, "live": self.live_key}

    def get_api_key(self, development_mode: bool) -> str:
        """Select the credential for the given mode.

        Args:
            development_mode: Use the test credential when True

        Returns:
            The credential string, empty if the slot is not configured
        """
        return self.api_keys["test" if development_mode else "live"]

    def resolve_storage_dir(self) -> Path:
        """Get the marker storage directory."""
        return self.storage_dir or Path.home() / ".deepone"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
