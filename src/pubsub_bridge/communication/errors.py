from __future__ import annotations

from typing import Any, Iterable, List, Optional


class PubSubError(Exception):
    """Base class for message bus errors."""


class UnknownTopicError(PubSubError, ValueError):
    """A topic name does not match any topic that is currently valid."""

    def __init__(self, name: str, valid_topics: Iterable[Any] = (), reason: Optional[str] = None):
        self.name = name
        self.valid_topics: List[str] = [str(t) for t in valid_topics]
        super().__init__(reason or f"Unknown topic: {name}")


class InvalidTopicError(UnknownTopicError):
    """Publish was attempted on a topic nobody is subscribed to."""

    def __init__(self, topic: Any, valid_topics: Iterable[Any] = ()):
        self.topic = topic
        super().__init__(str(topic), valid_topics, f"Topic not subscribed: {topic}")
