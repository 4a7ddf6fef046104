import logging

import pytest

from pubsub_bridge.communication.message_bus import MessageBus
from pubsub_bridge.settings import RuntimeSettings
from pubsub_bridge.utils.logger import LOGGER_NAME


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def settings():
    return RuntimeSettings()


@pytest.fixture
def log_records():
    """Records emitted under the service logger (it does not propagate to root)."""
    logger = logging.getLogger(LOGGER_NAME)
    handler = _ListHandler()
    old_level = logger.level
    logger.addHandler(handler)
    yield handler.records
    logger.removeHandler(handler)
    logger.setLevel(old_level)
