from datetime import datetime, timedelta, timezone
from typing import Dict, List, Union

# A business day runs 06:00 -> 05:59:59.999 of the next calendar day.
DAY_START_HOUR = 6
DAY_MS = 24 * 60 * 60 * 1000
FRIDAY = 4  # datetime.weekday()
WEEKEND_DAYS = 3
# 9999-12-31T23:59:59.999Z
MAX_MILLIS = 253402300799999

# pt-BR initials indexed by datetime.weekday() (Mon=0 ... Sun=6)
WEEKDAY_INITIALS = ["S", "T", "Q", "Q", "S", "S", "D"]

Moment = Union[datetime, int, float]


def to_millis(dt: datetime) -> int:
    return int(round(dt.timestamp() * 1000))


def from_millis(ms: Union[int, float]) -> datetime:
    """Naive local datetime for an epoch-milliseconds value."""
    return datetime.fromtimestamp(ms / 1000)


def now_millis() -> int:
    return to_millis(datetime.now())


def iso_utc(ms: Union[int, float]) -> str:
    # Same shape as JS Date.toISOString(): 2024-01-10T08:30:00.000Z
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _local(moment: Moment) -> datetime:
    if isinstance(moment, datetime):
        return moment
    return from_millis(moment)


def _business_date(moment: Moment) -> datetime:
    d = _local(moment)
    if d.hour < DAY_START_HOUR:
        d = d - timedelta(days=1)
    return d


def business_day_start(moment: Moment) -> int:
    """Epoch ms of the 06:00 boundary that opens the business day owning `moment`."""
    d = _business_date(moment)
    return to_millis(d.replace(hour=DAY_START_HOUR, minute=0, second=0, microsecond=0))


def format_date(timestamp: Union[int, float]) -> str:
    return _business_date(timestamp).strftime("%d/%m/%Y")


def format_time(timestamp: Union[int, float]) -> str:
    return from_millis(timestamp).strftime("%H:%M")


def weekday_initial(timestamp: Union[int, float]) -> str:
    return WEEKDAY_INITIALS[_business_date(timestamp).weekday()]


def is_same_business_day(t1: Union[int, float], t2: Union[int, float]) -> bool:
    return business_day_start(t1) == business_day_start(t2)


def current_week_range(now: Moment) -> Dict[str, int]:
    """
    Friday 06:00:00.000 through Monday 05:59:59.999 of the current business week.

    Before Friday the range points back at the previous weekend. Both ends are
    inclusive.
    """
    business_now = _business_date(now)
    diff_to_friday = (business_now.weekday() - FRIDAY) % 7
    friday = (business_now - timedelta(days=diff_to_friday)).replace(
        hour=DAY_START_HOUR, minute=0, second=0, microsecond=0
    )
    monday = friday + timedelta(days=WEEKEND_DAYS)
    return {"start": to_millis(friday), "end": to_millis(monday) - 1}


def trailing_business_days(now: Moment, count: int = 7) -> List[int]:
    """Business-day boundaries for today and the `count - 1` days before it, oldest first."""
    today = from_millis(business_day_start(now))
    return [business_day_start(today - timedelta(days=i)) for i in range(count - 1, -1, -1)]


def parse_millis(value) -> int:
    """Epoch ms from a stored value; rejects booleans, NaN and infinities."""
    if isinstance(value, bool):
        raise ValueError("timestamp must be a number")
    try:
        ms = value if isinstance(value, int) else float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("timestamp must be a number")
    # NaN and infinities fail the comparison too
    if not 0 <= ms <= MAX_MILLIS:
        raise ValueError("timestamp out of range")
    return int(ms)
