from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .errors import InvalidTopicError, UnknownTopicError
from .topics import Topic

logger = logging.getLogger(__name__)

Callback = Callable[[Topic, Optional[str]], None]

_ids = itertools.count(1)


class Subscription:
    """Handle returned by `MessageBus.subscribe`; call `unsubscribe()` to detach."""

    def __init__(self, bus: "MessageBus", topic: Topic, callback: Callback):
        self.bus = bus
        self.topic = topic
        self.callback = callback
        self.id = next(_ids)

    @property
    def name(self) -> str:
        return getattr(self.callback, "__qualname__", None) or repr(self.callback)

    @property
    def active(self) -> bool:
        return self in self.bus._snapshot(self.topic)

    def unsubscribe(self) -> bool:
        return self.bus.unsubscribe(self)

    def __repr__(self) -> str:
        return f"Subscription(id={self.id}, topic={self.topic}, callback={self.name})"


@dataclass
class DeliveryFailure:
    subscription: Subscription
    error: Exception


@dataclass
class PublishResult:
    topic: Topic
    message: Optional[str]
    delivered: int = 0
    failures: List[DeliveryFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class MessageBus:
    """Process-wide pub-sub registry keyed by `Topic`.

    Subscribers for each topic are kept in an immutable tuple that is replaced
    on every subscribe/unsubscribe, so readers only hold the lock long enough
    to grab the current tuple. Callbacks always run outside the lock, which
    lets a callback subscribe, unsubscribe or publish again without
    deadlocking.

    A topic is valid for publishing only while it has at least one
    subscriber.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[Topic, Tuple[Subscription, ...]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def subscribe(self, topic: Topic, cb: Callback) -> Subscription:
        if not isinstance(topic, Topic):
            raise TypeError(f"topic must be a Topic, got {type(topic).__name__}")
        if not callable(cb):
            raise TypeError("callback must be callable")
        sub = Subscription(self, topic, cb)
        with self._lock:
            self._subscribers[topic] = self._subscribers.get(topic, ()) + (sub,)
            count = len(self._subscribers[topic])
        logger.info("subscribed topic=%s callback=%s subscribers=%d", topic, sub.name, count)
        return sub

    def unsubscribe(self, sub: Subscription) -> bool:
        with self._lock:
            current = self._subscribers.get(sub.topic, ())
            if sub not in current:
                return False
            remaining = tuple(s for s in current if s is not sub)
            if remaining:
                self._subscribers[sub.topic] = remaining
            else:
                # last subscriber gone: topic is no longer valid
                del self._subscribers[sub.topic]
        logger.info("unsubscribed topic=%s callback=%s subscribers=%d", sub.topic, sub.name, len(remaining))
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def _snapshot(self, topic: Topic) -> Tuple[Subscription, ...]:
        with self._lock:
            return self._subscribers.get(topic, ())

    def topics(self) -> List[Topic]:
        """Topics that currently have at least one subscriber, in declaration order."""
        with self._lock:
            present = set(self._subscribers)
        return [t for t in Topic if t in present]

    def subscriber_count(self, topic: Topic) -> int:
        return len(self._snapshot(topic))

    def parse_topic(self, name: str) -> Topic:
        """Resolve `name` to a topic that can currently be published to.

        Matching is exact and case-sensitive. Raises `UnknownTopicError` both for
        names outside the enumeration and for topics nobody subscribed to.
        """
        topics = self.topics()
        for topic in topics:
            if topic.value == name:
                return topic
        raise UnknownTopicError(name, topics)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------
    def publish(self, topic: Topic, message: Optional[str]) -> PublishResult:
        """Deliver `message` to every subscriber of `topic`, in subscription order.

        Raises `InvalidTopicError` without invoking anything when the topic has
        no subscribers. A subscriber raising is logged and recorded in the
        returned result; delivery continues with the next one.
        """
        if not isinstance(topic, Topic):
            raise TypeError(f"topic must be a Topic, got {type(topic).__name__}")
        subs = self._snapshot(topic)
        if not subs:
            raise InvalidTopicError(topic, self.topics())

        logger.debug("publish topic=%s message=%r subscribers=%d", topic, message, len(subs))
        result = PublishResult(topic=topic, message=message)
        for sub in subs:
            try:
                sub.callback(topic, message)
            except Exception as exc:
                logger.error(
                    "delivery failed topic=%s callback=%s err=%s", topic, sub.name, exc, exc_info=True
                )
                result.failures.append(DeliveryFailure(subscription=sub, error=exc))
            result.delivered += 1
        return result
