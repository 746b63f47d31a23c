"""Data model for shortened links."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass
class ShortUrl:
    """A shortened link and its bookkeeping."""

    link: str
    exp_time_minutes: int
    short_code: str
    times_clicked: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def expires_at(self) -> datetime:
        """Moment after which the link is no longer valid."""
        if self.created_at is None:
            raise ValueError("short url has no creation time")
        return self.created_at + timedelta(minutes=self.exp_time_minutes)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True when ``now`` lies strictly after the expiry moment."""
        return (now or datetime.now(timezone.utc)) > self.expires_at()