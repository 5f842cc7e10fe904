#!/usr/bin/env python3
"""
Rate limiting functionality for the UK Repeater Bot
Controls how often the upstream repeater database is asked to refresh
"""

import time
from typing import Callable, Optional


class RefreshThrottle:
    """Decides when the upstream /update call is due.

    The check in is_due() and the update in record_refresh() are not locked
    together. Two lookups arriving together at the interval boundary can both
    see a refresh as due and both dispatch one; upstream tolerates a duplicate
    refresh.
    """

    def __init__(self, interval_seconds: float = 86400, refresh_on_start: bool = True,
                 clock: Callable[[], float] = time.time):
        self.interval_seconds = interval_seconds
        self.clock = clock
        # None means no refresh has been sent since activation
        self.last_refresh: Optional[float] = None if refresh_on_start else clock()
        self._total_refreshes = 0
        self._total_skipped = 0

    def is_due(self) -> bool:
        """Check whether a refresh should be sent before the next lookup"""
        if self.last_refresh is None:
            return True
        due = self.clock() - self.last_refresh >= self.interval_seconds
        if not due:
            self._total_skipped += 1
        return due

    def time_until_next(self) -> float:
        """Get time until the next refresh is due"""
        if self.last_refresh is None:
            return 0.0
        elapsed = self.clock() - self.last_refresh
        return max(0.0, self.interval_seconds - elapsed)

    def record_refresh(self) -> None:
        """Record that a refresh was sent"""
        self.last_refresh = self.clock()
        self._total_refreshes += 1

    def get_stats(self) -> dict:
        """Get throttle statistics"""
        return {
            'total_refreshes': self._total_refreshes,
            'total_skipped': self._total_skipped,
            'time_until_next': self.time_until_next()
        }
