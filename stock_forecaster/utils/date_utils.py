# stock_forecaster/utils/date_utils.py
from datetime import date, datetime, time, timedelta
from typing import List, Tuple, Union

# Periods are aligned to whole multiples of their length counted from here
EPOCH = date(1970, 1, 1)

def convert_to_date(value: Union[date, datetime, str]) -> date:
    """Convert a datetime, date or ISO string to a date.
    
    Args:
        value: Value to convert
        
    Returns:
        Calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value).date()
    raise ValueError(f"Cannot convert {value!r} to a date")

def convert_to_datetime(value: Union[date, datetime, str]) -> datetime:
    """Convert a date, datetime or ISO string to a datetime (dates map to midnight)."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise ValueError(f"Cannot convert {value!r} to a datetime")

def get_period_start(target_date: Union[date, datetime], period_days: int) -> date:
    """Get the first day of the period containing a date.
    
    Args:
        target_date: Date inside the period
        period_days: Period length in days (1=daily, 7=weekly)
        
    Returns:
        Start date of the period
    """
    if period_days <= 0:
        raise ValueError(f"Invalid period length: {period_days}")
    
    offset = (convert_to_date(target_date) - EPOCH).days
    return EPOCH + timedelta(days=(offset // period_days) * period_days)

def get_period_dates(period_start: date, period_days: int) -> Tuple[date, date]:
    """Get inclusive start and end dates for a period."""
    return (period_start, period_start + timedelta(days=period_days - 1))

def get_relative_period(
    now: Union[date, datetime],
    period_days: int,
    offset: int
) -> Tuple[date, date]:
    """Get the period `offset` periods away from the one containing `now`.
    
    Args:
        now: Reference moment
        period_days: Period length in days
        offset: Negative for past periods, positive for future ones, 0 for current
        
    Returns:
        Tuple with start date and end date
    """
    current_start = get_period_start(now, period_days)
    start = current_start + timedelta(days=offset * period_days)
    return get_period_dates(start, period_days)

def get_trailing_periods(
    now: Union[date, datetime],
    period_days: int,
    count: int
) -> List[Tuple[date, date]]:
    """Get the `count` complete periods before the current one, oldest first."""
    return [get_relative_period(now, period_days, -offset) for offset in range(count, 0, -1)]

def get_forward_periods(
    now: Union[date, datetime],
    period_days: int,
    count: int
) -> List[Tuple[date, date]]:
    """Get the `count` periods after the current one, nearest first."""
    return [get_relative_period(now, period_days, offset) for offset in range(1, count + 1)]
