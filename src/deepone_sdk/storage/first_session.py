# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Persisted first-session marker.

The marker being absent means attribution has never been resolved on
this install. Persistence is best effort: storage failures are logged
and never reach the caller.
"""

import logging

from .key_value import KeyValueStore

logger = logging.getLogger(__name__)

FIRST_SESSION_MARKER_KEY = "first_session_marker"


class FirstSessionTracker:
    """Reads and writes the first-session marker in a key/value store."""

    def __init__(self, store: KeyValueStore, key: str = FIRST_SESSION_MARKER_KEY):
        self.store = store
        self.key = key

    def load(self) -> bool:
        """Check whether this is the first session.

        Returns:
            True if the marker is absent (or the store cannot be read)
        """
        try:
            return self.store.get(self.key) is None
        except Exception as e:
            logger.warning(f"First-session marker read failed: {e}")
            return True

    def mark_seen(self) -> None:
        """Write the marker (transition to not-first)."""
        try:
            self.store.set(self.key, b"")
        except Exception as e:
            logger.warning(f"First-session marker write failed: {e}")

    def reset(self) -> None:
        """Delete the marker (transition back to first)."""
        try:
            self.store.delete(self.key)
        except Exception as e:
            logger.warning(f"First-session marker delete failed: {e}")
