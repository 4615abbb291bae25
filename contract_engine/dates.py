"""Calendar-month arithmetic shared by the models and engines."""

from datetime import date

from dateutil.relativedelta import relativedelta


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start``'s month to ``end``'s month (days ignored)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(value: date, months: int) -> date:
    """Shift a date by calendar months, clamping to the last day of shorter months."""
    return value + relativedelta(months=months)


def month_start(year: int, month: int) -> date:
    return date(year, month, 1)


def next_month(month: int, year: int) -> tuple[int, int]:
    """Return the (month, year) after the given one, rolling 12 over to 1."""
    if month == 12:
        return 1, year + 1
    return month + 1, year


def previous_month(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year
