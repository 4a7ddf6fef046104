from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from typing import List, Optional
from pydantic import BaseModel
import logging

from .communication.components import register_components
from .communication.errors import UnknownTopicError
from .communication.message_bus import MessageBus
from .settings import RuntimeSettings
from .utils.formatter import clean_param, help_status, render_form
from .utils.logger import setup_logger
from .utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class PublishRequest(BaseModel):
    topic: str
    message: Optional[str] = None


class PublishResponse(BaseModel):
    topic: str
    message: Optional[str] = None
    delivered: int
    failures: List[str]


class TopicsResponse(BaseModel):
    topics: List[str]


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _check_rate(request: Request):
    limiter: RateLimiter = request.app.state.limiter
    key = _client_key(request)
    if not limiter.allow(key):
        logger.warning("[publish] rate limit exceeded client=%s", key)
        raise HTTPException(status_code=429, detail="Rate limit exceeded, try again later")


def create_app(
    bus: Optional[MessageBus] = None,
    settings: Optional[RuntimeSettings] = None,
    register_builtin: bool = True,
) -> FastAPI:
    """Build the admin application around a single bus instance.

    The bus is created here unless one is passed in, and is reachable from
    handlers through `app.state.bus`.
    """
    settings = settings or RuntimeSettings.from_env()
    setup_logger(level=settings.log_level)

    bus = bus if bus is not None else MessageBus()
    limiter = RateLimiter(settings.rate_limit_calls, settings.rate_limit_period)
    if register_builtin:
        register_components(bus, settings, limiter)

    app = FastAPI(title=settings.title, version="0.1.0")
    app.state.bus = bus
    app.state.settings = settings
    app.state.limiter = limiter

    @app.get("/")
    async def root():
        return {"message": f"{settings.title} is running. Open /pubsub to publish."}

    @app.get("/pubsub", response_class=HTMLResponse)
    def pubsub_form(request: Request, topic: Optional[str] = None, message: Optional[str] = None):
        """Operator form. Without a topic it only shows help; with one it publishes."""
        topic = clean_param(topic)
        message = clean_param(message)

        status = help_status(bus.topics())
        if topic is not None:
            _check_rate(request)
            logger.info("Submitting topic %s, message %s", topic, message)
            try:
                bus.publish(bus.parse_topic(topic), message)
                status = f"Submitted topic {topic}, message {message}"
            except UnknownTopicError as exc:
                status = f"Failed to submit topic {topic}, message {message} - {exc}"
                logger.error(status)
                raise HTTPException(status_code=400, detail=status)

        page = render_form(bus.topics(), status, settings.title)
        logger.debug("HTML Page: %s", page)
        return HTMLResponse(page)

    @app.get("/pubsub/topics", response_model=TopicsResponse)
    def list_topics():
        return TopicsResponse(topics=[str(t) for t in bus.topics()])

    @app.post("/pubsub/publish", response_model=PublishResponse)
    def publish(req: PublishRequest, request: Request):
        _check_rate(request)
        logger.info("[publish] topic=%s message=%s", req.topic, req.message)
        try:
            result = bus.publish(bus.parse_topic(req.topic), req.message)
        except UnknownTopicError as exc:
            logger.error("[publish] rejected topic=%s: %s", req.topic, exc)
            raise HTTPException(
                status_code=400,
                detail={"error": str(exc), "valid_topics": [str(t) for t in bus.topics()]},
            )
        return PublishResponse(
            topic=str(result.topic),
            message=result.message,
            delivered=result.delivered,
            failures=[f"{f.subscription.name}: {f.error}" for f in result.failures],
        )

    @app.get("/settings")
    async def get_settings():
        return settings.to_dict()

    return app


app = create_app()
