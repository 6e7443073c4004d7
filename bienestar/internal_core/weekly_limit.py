from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class WeeklyLimitStatus:
    allowed: bool
    used: int
    limit: int
    week_start: datetime
    next_window: datetime

    @property
    def reason(self) -> Optional[str]:
        if self.allowed:
            return None
        return f"Has alcanzado el límite de evaluaciones por semana ({self.limit})"


def week_start(now: datetime) -> datetime:
    """Sunday 00:00 UTC of the week containing `now`."""
    current = now.astimezone(timezone.utc) if now.tzinfo else now.replace(tzinfo=timezone.utc)
    days_since_sunday = (current.weekday() + 1) % 7
    start = current - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def check_weekly_limit(used: int, limit: int, now: datetime) -> WeeklyLimitStatus:
    start = week_start(now)
    return WeeklyLimitStatus(
        allowed=used < limit,
        used=used,
        limit=limit,
        week_start=start,
        next_window=start + timedelta(days=7),
    )
