"""
Per-application error counters.

One ErrorTracker is created by the app factory and kept on ``app.state``;
handlers receive it through ``dependencies.get_error_tracker``.
"""

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)

ERROR_CATEGORIES = ("validation", "not_found", "domain", "ai_provider", "database", "internal")


class ErrorTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {category: 0 for category in ERROR_CATEGORIES}

    def track(self, category: str) -> int:
        with self._lock:
            self._counts[category] = self._counts.get(category, 0) + 1
            total = self._counts[category]
        logger.warning(f"error_tracked category={category} total={total}")
        return total

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            for key in self._counts:
                self._counts[key] = 0
