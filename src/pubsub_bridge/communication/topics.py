from __future__ import annotations

"""Closed set of notification topics known to the service."""

from enum import Enum

from .errors import UnknownTopicError


class Topic(str, Enum):
    CONFIG_REFRESH = "CONFIG_REFRESH"
    CACHE_INVALIDATE = "CACHE_INVALIDATE"
    LOG_LEVEL = "LOG_LEVEL"
    RATE_LIMIT_RESET = "RATE_LIMIT_RESET"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, name: str) -> "Topic":
        """Return the topic whose canonical name is exactly `name` (case-sensitive)."""
        for topic in cls:
            if topic.value == name:
                return topic
        raise UnknownTopicError(name, list(cls))
