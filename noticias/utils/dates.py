from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(tz_name: str, now: datetime = None) -> datetime:
    """
    Midnight of the current calendar day in ``tz_name``, expressed as naive UTC.

    Args:
        tz_name (str): IANA timezone that defines the calendar day.
        now (datetime): Naive UTC reference instant, defaults to the current time.

    Returns:
        datetime: Naive UTC datetime of local midnight.
    """
    now = now or utcnow()
    local = now.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz_name))
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc).replace(tzinfo=None)


def hours_ago(hours: int, now: datetime = None) -> datetime:
    return (now or utcnow()) - timedelta(hours=hours)
