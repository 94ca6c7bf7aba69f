"""Clock abstraction so expiry can be tested without sleeping."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware."""


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
