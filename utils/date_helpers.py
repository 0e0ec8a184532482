from datetime import date, datetime, time, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT


def now() -> datetime:
    return datetime.now()


def to_local_datetime(value) -> datetime:
    """Coerce a date, datetime or ISO 8601 string into a naive local datetime.

    Timezone-aware values (e.g. '2024-03-10T15:00:00.000Z' from older
    backups) are converted to local time before the tzinfo is dropped.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Cannot interpret {value!r} as a date")
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def month_start(d: date) -> date:
    return date(d.year, d.month, 1)


def month_end(d: date) -> date:
    return date(d.year, d.month, calendar.monthrange(d.year, d.month)[1])


def same_day(a, b) -> bool:
    """True when both values fall on the same local calendar day."""
    return to_local_datetime(a).date() == to_local_datetime(b).date()


def same_month(a, b) -> bool:
    """True when both values fall in the same local calendar month and year."""
    da, db = to_local_datetime(a), to_local_datetime(b)
    return (da.year, da.month) == (db.year, db.month)


def day_bounds(start, end) -> tuple[datetime, datetime]:
    """Widen a range to [start 00:00:00, end 23:59:59.999999] whatever the input times."""
    first = datetime.combine(to_local_datetime(start).date(), time.min)
    last = datetime.combine(to_local_datetime(end).date(), time.max)
    return first, last


def is_within_range(value, start, end) -> bool:
    first, last = day_bounds(start, end)
    return first <= to_local_datetime(value) <= last


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def week_range(d: date) -> tuple[date, date]:
    """Sunday-to-Saturday week containing d."""
    start = d - timedelta(days=(d.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def year_range(d: date) -> tuple[date, date]:
    return date(d.year, 1, 1), date(d.year, 12, 31)


def month_range(d: date) -> tuple[date, date]:
    return month_start(d), month_end(d)


def friendly_month(d: date) -> str:
    """e.g. '03/2026'."""
    return d.strftime("%m/%Y")


def format_display_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")
