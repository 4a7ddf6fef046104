import threading
import time
from typing import Dict, List, Optional


class RateLimiter:
    def __init__(self, calls: int, period: float):
        self.calls = calls
        self.period = period
        self.history: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        now = time.time()
        with self._lock:
            self._prune(now)
            hist = self.history.setdefault(key, [])
            if len(hist) >= self.calls:
                return False
            hist.append(now)
            return True

    def _prune(self, now: float):
        # drop outdated calls; clients with none left are forgotten
        for key in list(self.history):
            hist = [t for t in self.history[key] if now - t < self.period]
            if hist:
                self.history[key] = hist
            else:
                del self.history[key]

    def reset(self, key: Optional[str] = None):
        """Forget recorded calls for `key`, or for every client when key is empty."""
        with self._lock:
            if key:
                self.history.pop(key, None)
            else:
                self.history.clear()

    def configure(self, calls: int, period: float):
        with self._lock:
            self.calls = calls
            self.period = period
