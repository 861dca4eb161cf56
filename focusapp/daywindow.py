from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from .schemas import DayWindow

DEFAULT_TZ = "Asia/Seoul"

def today_in(tz: str = DEFAULT_TZ, now: datetime | None = None) -> date:
    """Civil date of `now` in `tz`. Naive datetimes are read as UTC."""
    zone = ZoneInfo(tz)
    if now is None:
        return datetime.now(zone).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(zone).date()

def day_window(now: datetime | None = None, tz: str = DEFAULT_TZ) -> DayWindow:
    """
    Half-open civil day [today, tomorrow) in `tz` as "YYYY-MM-DD" strings.
    Works for stores that keep `day` as a bare date and as local-midnight datetimes.
    """
    today = today_in(tz, now)
    tomorrow = today + timedelta(days=1)
    return DayWindow(today=today.strftime("%Y-%m-%d"), tomorrow=tomorrow.strftime("%Y-%m-%d"))
