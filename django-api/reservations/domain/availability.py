"""Availability resolution from an attraction's weekly open pattern.

Slots are gated by day-of-week only. Occupancy per slot is not tracked.
"""

from datetime import date, time, timedelta

from reservations.domain.models import WEEKDAYS, Attraction

DEFAULT_WINDOW_DAYS = 30


def weekday_name(day: date) -> str:
    """Return the lowercase English weekday name for ``day``."""
    return WEEKDAYS[day.weekday()]


def is_bookable_day(attraction: Attraction, day: date) -> bool:
    return bool(attraction.availability.get(weekday_name(day), False))


def resolve_dates(
    attraction: Attraction,
    window_start: date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> list[date]:
    """Return the bookable dates in ``[window_start, window_start + length)``.

    Dates are in ascending order. A window of zero or negative length is empty.
    """
    return [
        day
        for day in (
            window_start + timedelta(days=offset)
            for offset in range(max(window_length_days, 0))
        )
        if is_bookable_day(attraction, day)
    ]


def resolve_times(attraction: Attraction, selected_date: date) -> list[time]:
    """Return the offerable slots for ``selected_date``, empty when it is closed."""
    if not is_bookable_day(attraction, selected_date):
        return []
    return list(attraction.time_slots)
