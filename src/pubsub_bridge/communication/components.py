from __future__ import annotations

import logging
from typing import List, Optional

from ..settings import RuntimeSettings
from ..utils.logger import LOGGER_NAME, set_level
from ..utils.rate_limiter import RateLimiter
from .message_bus import MessageBus, Subscription
from .topics import Topic

logger = logging.getLogger(__name__)


class SettingsReloader:
    """Re-reads the environment into the live settings on CONFIG_REFRESH."""

    def __init__(
        self,
        bus: MessageBus,
        settings: RuntimeSettings,
        limiter: Optional[RateLimiter] = None,
        env_file: str = ".env",
    ):
        self.bus = bus
        self.settings = settings
        self.limiter = limiter
        self.env_file = env_file
        self.subscription = bus.subscribe(Topic.CONFIG_REFRESH, self.on_message)

    def on_message(self, topic: Topic, message: Optional[str]):
        # raises before touching settings, logger or limiter if a value is bad
        self.settings.reload(self.env_file)
        set_level(self.settings.log_level, LOGGER_NAME)
        if self.limiter is not None:
            self.limiter.configure(self.settings.rate_limit_calls, self.settings.rate_limit_period)
        logger.info("settings reloaded reason=%r settings=%s", message, self.settings.to_dict())


class LogLevelController:
    """Switches the service log level; the message is the level name."""

    def __init__(self, bus: MessageBus, logger_name: str = LOGGER_NAME):
        self.bus = bus
        self.logger_name = logger_name
        self.subscription = bus.subscribe(Topic.LOG_LEVEL, self.on_message)

    def on_message(self, topic: Topic, message: Optional[str]):
        if not message:
            raise ValueError("LOG_LEVEL message must name a level, e.g. DEBUG")
        set_level(message, self.logger_name)
        logger.info("log level for %s set to %s", self.logger_name, message.strip().upper())


def register_components(bus: MessageBus, settings: RuntimeSettings, limiter: RateLimiter) -> List[Subscription]:
    """Subscribe the built-in components; called once at application start."""
    subs = [
        SettingsReloader(bus, settings, limiter).subscription,
        LogLevelController(bus).subscription,
        bus.subscribe(Topic.RATE_LIMIT_RESET, lambda topic, message: limiter.reset(message)),
    ]
    return subs
