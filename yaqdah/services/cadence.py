# 음성 안내 빈도 제한

import logging
import threading

logger = logging.getLogger(__name__)


class CadenceGate:
    """Minimum-interval limiter for spoken interventions.

    Alarm and emergency intents never pass through here.
    """

    def __init__(self, min_interval=5.0):
        if min_interval < 0:
            raise ValueError("min_interval cannot be negative")
        self.min_interval = min_interval
        self.last_dispatch = None
        self._lock = threading.Lock()

    def should_dispatch(self, now):
        if self.last_dispatch is None:
            return True
        return now - self.last_dispatch >= self.min_interval

    def record_dispatch(self, now):
        self.last_dispatch = now

    def try_dispatch(self, now):
        """Check and record in one step. Returns True when the caller may speak."""
        with self._lock:
            if not self.should_dispatch(now):
                logger.debug(f"Spoken intervention suppressed ({now - self.last_dispatch:.2f}s since last)")
                return False
            self.record_dispatch(now)
            return True

    def reset(self):
        with self._lock:
            self.last_dispatch = None
