import logging
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW_SECONDS = 15 * 60
RATE_LIMIT_MAX_REQUESTS = 5
# Expired windows are swept once this many client keys are tracked
RATE_LIMIT_PRUNE_THRESHOLD = 1000

SUSPICIOUS_PATTERNS = [
    re.compile(r"viagra|cialis|casino|lottery|winner", re.IGNORECASE),
    re.compile(r"click here|visit now|limited time", re.IGNORECASE),
    re.compile(r"money back guarantee|100% free", re.IGNORECASE),
]
URL_PATTERN = re.compile(r"https?://")


@dataclass
class _Window:
    count: int
    started_at: float


class RateLimiter:
    """Fixed-window, in-process request counter keyed by client IP."""

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        prune_threshold: int = RATE_LIMIT_PRUNE_THRESHOLD,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.prune_threshold = prune_threshold
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or self._expired(window, now):
                if window is None and len(self._windows) >= self.prune_threshold:
                    self._prune(now)
                self._windows[key] = _Window(count=1, started_at=now)
                return True
            if window.count >= self.max_requests:
                return False
            window.count += 1
            return True

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.started_at > self.window_seconds

    def _prune(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in stale:
            del self._windows[key]
        if stale:
            logger.debug("Pruned %d expired rate limit windows", len(stale))

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


contact_rate_limiter = RateLimiter()


def is_spam(name: str, email: str, message: str) -> bool:
    text = f"{name} {email} {message}".lower()
    if any(pattern.search(text) for pattern in SUSPICIOUS_PATTERNS):
        return True

    if len(URL_PATTERN.findall(message)) > 2:
        return True

    words = message.lower().split()
    if len(words) > 10 and len(set(words)) / len(words) < 0.5:
        return True

    return False
