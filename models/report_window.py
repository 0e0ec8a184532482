from dataclasses import dataclass
from datetime import date
from enum import Enum

from utils.date_helpers import month_range, week_range, year_range


class ReportFilter(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ReportWindow:
    filter: ReportFilter
    start_date: date
    end_date: date

    @classmethod
    def for_filter(cls, filter_: ReportFilter, ref: date, current: "ReportWindow | None" = None) -> "ReportWindow":
        """Resolve the window for a filter around ref.

        CUSTOM keeps the current range as-is (or the ref month when there is none).
        """
        if filter_ is ReportFilter.WEEKLY:
            start, end = week_range(ref)
        elif filter_ is ReportFilter.YEARLY:
            start, end = year_range(ref)
        elif filter_ is ReportFilter.CUSTOM and current is not None:
            start, end = current.start_date, current.end_date
        else:
            start, end = month_range(ref)
        return cls(filter=filter_, start_date=start, end_date=end)
