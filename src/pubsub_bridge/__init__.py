"""Operator bridge for publishing notifications into the in-process message bus."""

from .communication.errors import InvalidTopicError, PubSubError, UnknownTopicError
from .communication.message_bus import DeliveryFailure, MessageBus, PublishResult, Subscription
from .communication.topics import Topic

__all__ = [
    "MessageBus",
    "Subscription",
    "PublishResult",
    "DeliveryFailure",
    "Topic",
    "PubSubError",
    "UnknownTopicError",
    "InvalidTopicError",
]
