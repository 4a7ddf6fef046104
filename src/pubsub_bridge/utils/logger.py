import logging
import sys

LOGGER_NAME = "pubsub_bridge"


def setup_logger(name: str = LOGGER_NAME, level: str = "INFO") -> logging.Logger:
    # Reuse Uvicorn's error logger handlers so our output always appears in console
    base_logger = logging.getLogger("uvicorn.error")
    logger = logging.getLogger(name)
    if base_logger.handlers and not logger.handlers:
        for h in base_logger.handlers:
            logger.addHandler(h)
    logger.propagate = False
    logger.setLevel(parse_level(level))
    if logger.handlers:
        return logger  # avoid duplicate handlers

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s: %(message)s")
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    return logger


def parse_level(level: str) -> str:
    """Normalise a level name (e.g. ' debug' -> 'DEBUG'); raises ValueError on unknown names."""
    lvl = level.strip().upper()
    if not isinstance(logging.getLevelName(lvl), int):
        raise ValueError(f"Unknown log level: {level}")
    return lvl


def set_level(level: str, name: str = LOGGER_NAME) -> logging.Logger:
    """Change the level of the service logger; raises ValueError on unknown names."""
    logger = logging.getLogger(name)
    logger.setLevel(parse_level(level))
    return logger
