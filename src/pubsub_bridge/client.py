import os
import requests
from typing import Any, Dict, List, Optional

from .communication.errors import UnknownTopicError


class BridgeClient:
    """Small HTTP client for a running admin bridge.

    Base URL defaults to the PUBSUB_BRIDGE_URL env variable.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 30):
        self.base_url = (base_url or os.getenv("PUBSUB_BRIDGE_URL", "http://127.0.0.1:8000")).rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------
    def topics(self) -> List[str]:
        resp = requests.get(f"{self.base_url}/pubsub/topics", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()["topics"]

    # ------------------------------------------------------------------
    def publish(self, topic: str, message: Optional[str] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/pubsub/publish"
        resp = requests.post(url, json={"topic": topic, "message": message}, timeout=self.timeout)
        if resp.status_code == 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = None  # not a JSON body, e.g. from a proxy
            detail = payload.get("detail") if isinstance(payload, dict) else None
            if isinstance(detail, dict):
                raise UnknownTopicError(topic, detail.get("valid_topics", []), detail.get("error"))
        resp.raise_for_status()
        return resp.json()
