import logging

from pubsub_bridge.communication.components import LogLevelController, SettingsReloader, register_components
from pubsub_bridge.communication.topics import Topic
from pubsub_bridge.utils.logger import LOGGER_NAME
from pubsub_bridge.utils.rate_limiter import RateLimiter


def test_register_components_subscribes_builtin_topics(bus, settings):
    limiter = RateLimiter(calls=1, period=60)
    subs = register_components(bus, settings, limiter)

    assert len(subs) == 3
    assert bus.topics() == [Topic.CONFIG_REFRESH, Topic.LOG_LEVEL, Topic.RATE_LIMIT_RESET]
    # no built-in listener for cache invalidation
    assert bus.subscriber_count(Topic.CACHE_INVALIDATE) == 0


def test_log_level_controller(bus, log_records):
    LogLevelController(bus)

    result = bus.publish(Topic.LOG_LEVEL, "debug")
    assert result.ok
    assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    result = bus.publish(Topic.LOG_LEVEL, "WARNING")
    assert result.ok
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING


def test_log_level_controller_bad_level_is_isolated(bus, log_records):
    LogLevelController(bus)
    seen = []
    bus.subscribe(Topic.LOG_LEVEL, lambda topic, message: seen.append(message))

    result = bus.publish(Topic.LOG_LEVEL, "LOUD")

    assert not result.ok
    assert isinstance(result.failures[0].error, ValueError)
    assert seen == ["LOUD"]


def test_settings_reloader_rereads_environment(bus, settings, monkeypatch, log_records):
    limiter = RateLimiter(calls=settings.rate_limit_calls, period=settings.rate_limit_period)
    SettingsReloader(bus, settings, limiter)
    monkeypatch.setenv("PUBSUB_LOG_LEVEL", "warning")
    monkeypatch.setenv("PUBSUB_RATE_LIMIT_CALLS", "5")
    monkeypatch.setenv("PUBSUB_TITLE", "Ops Bridge")

    result = bus.publish(Topic.CONFIG_REFRESH, "reload")

    assert result.ok
    assert settings.log_level == "WARNING"
    assert settings.rate_limit_calls == 5
    assert settings.title == "Ops Bridge"
    assert limiter.calls == 5
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING


def test_rate_limit_reset(bus, settings):
    limiter = RateLimiter(calls=1, period=60)
    register_components(bus, settings, limiter)
    assert limiter.allow("a")
    assert limiter.allow("b")
    assert not limiter.allow("a")

    bus.publish(Topic.RATE_LIMIT_RESET, "a")
    assert limiter.allow("a")
    assert not limiter.allow("b")

    bus.publish(Topic.RATE_LIMIT_RESET, None)
    assert limiter.allow("a")
    assert limiter.allow("b")


def _clean_env(monkeypatch):
    for var in ("PUBSUB_LOG_LEVEL", "PUBSUB_RATE_LIMIT_CALLS", "PUBSUB_RATE_LIMIT_PERIOD", "PUBSUB_TITLE"):
        monkeypatch.delenv(var, raising=False)


def test_settings_reloader_reads_env_file(bus, settings, monkeypatch, tmp_path, log_records):
    _clean_env(monkeypatch)
    # registered so monkeypatch removes what load_dotenv writes
    monkeypatch.setenv("PUBSUB_LOG_LEVEL", "INFO")
    monkeypatch.setenv("PUBSUB_RATE_LIMIT_CALLS", "30")
    env_file = tmp_path / ".env"
    env_file.write_text("PUBSUB_LOG_LEVEL=ERROR\nPUBSUB_RATE_LIMIT_CALLS=4\n")
    limiter = RateLimiter(calls=settings.rate_limit_calls, period=settings.rate_limit_period)
    SettingsReloader(bus, settings, limiter, env_file=str(env_file))

    result = bus.publish(Topic.CONFIG_REFRESH, "reload")

    assert result.ok
    assert settings.log_level == "ERROR"
    assert settings.rate_limit_calls == 4
    assert limiter.calls == 4
    assert logging.getLogger(LOGGER_NAME).level == logging.ERROR


def _assert_reload_rejected(bus, settings, limiter, tmp_path):
    logging.getLogger(LOGGER_NAME).setLevel(logging.INFO)
    before = settings.to_dict()
    SettingsReloader(bus, settings, limiter, env_file=str(tmp_path / "missing.env"))

    result = bus.publish(Topic.CONFIG_REFRESH, "reload")

    assert not result.ok
    assert isinstance(result.failures[0].error, ValueError)
    assert settings.to_dict() == before
    assert limiter.calls == before["rate_limit_calls"]
    assert logging.getLogger(LOGGER_NAME).level == logging.INFO


def test_settings_reloader_bad_level_leaves_state_alone(bus, settings, monkeypatch, tmp_path, log_records):
    _clean_env(monkeypatch)
    monkeypatch.setenv("PUBSUB_LOG_LEVEL", "LOUD")
    monkeypatch.setenv("PUBSUB_RATE_LIMIT_CALLS", "5")
    limiter = RateLimiter(calls=settings.rate_limit_calls, period=settings.rate_limit_period)
    _assert_reload_rejected(bus, settings, limiter, tmp_path)


def test_settings_reloader_bad_number_leaves_state_alone(bus, settings, monkeypatch, tmp_path, log_records):
    _clean_env(monkeypatch)
    monkeypatch.setenv("PUBSUB_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("PUBSUB_RATE_LIMIT_CALLS", "abc")
    limiter = RateLimiter(calls=settings.rate_limit_calls, period=settings.rate_limit_period)
    _assert_reload_rejected(bus, settings, limiter, tmp_path)
