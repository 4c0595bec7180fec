from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable, Optional


class Clock:
    """Calendar date in one fixed zone, independent of the host's TZ setting."""

    def __init__(self, tz: tzinfo, now: Optional[Callable[[], datetime]] = None):
        self.tz = tz
        self._now = now

    def now(self) -> datetime:
        if self._now is None:
            return datetime.now(tz=self.tz)
        return self._now().astimezone(self.tz)

    def today(self) -> str:
        return self.now().date().isoformat()
