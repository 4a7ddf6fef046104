from __future__ import annotations

import os
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict

from dotenv import load_dotenv

from .utils.logger import parse_level


@dataclass
class RuntimeSettings:
    """Mutable runtime config; refreshed in place on CONFIG_REFRESH."""

    log_level: str = "INFO"
    rate_limit_calls: int = 30
    rate_limit_period: float = 60.0
    title: str = "PubSub Admin Bridge"

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "RuntimeSettings":
        load_dotenv(env_file, override=False)
        settings = cls()
        settings._update(settings._read_env())
        return settings

    def reload(self, env_file: str = ".env") -> "RuntimeSettings":
        """Re-read `env_file` and the environment; on a bad value nothing is changed."""
        # override=True so edits to .env win over values loaded at startup
        load_dotenv(env_file, override=True)
        self._update(self._read_env())
        return self

    def _read_env(self) -> Dict[str, Any]:
        values = {
            "log_level": _parse("PUBSUB_LOG_LEVEL", self.log_level, parse_level),
            "rate_limit_calls": _parse("PUBSUB_RATE_LIMIT_CALLS", self.rate_limit_calls, int),
            "rate_limit_period": _parse("PUBSUB_RATE_LIMIT_PERIOD", self.rate_limit_period, float),
            "title": os.getenv("PUBSUB_TITLE", self.title),
        }
        if values["rate_limit_calls"] < 1:
            raise ValueError("PUBSUB_RATE_LIMIT_CALLS must be at least 1")
        if values["rate_limit_period"] <= 0:
            raise ValueError("PUBSUB_RATE_LIMIT_PERIOD must be positive")
        return values

    def _update(self, values: Dict[str, Any]):
        for f in fields(self):
            setattr(self, f.name, values[f.name])

    def to_dict(self):
        return asdict(self)


def _parse(var: str, default: Any, convert) -> Any:
    raw = os.getenv(var)
    if raw is None:
        return default
    try:
        return convert(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {var}={raw!r}: {exc}") from exc
