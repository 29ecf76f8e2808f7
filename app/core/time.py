from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.
    Naive values (e.g. read back from SQLite) are taken to be UTC already.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_recent(dt: Optional[datetime], window: timedelta, now: Optional[datetime] = None) -> bool:
    """True when `dt` falls inside the last `window` before `now`"""
    dt = ensure_utc(dt)
    if dt is None:
        return False
    now = ensure_utc(now) or utcnow()
    return dt > now - window
