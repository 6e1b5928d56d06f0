# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Persistence for the first-session marker."""

from .first_session import FIRST_SESSION_MARKER_KEY, FirstSessionTracker
from .key_value import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "FIRST_SESSION_MARKER_KEY",
    "FirstSessionTracker",
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
]
