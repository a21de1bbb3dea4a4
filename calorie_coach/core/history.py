"""History Calculations - Pure functions over the rolling daily log.

All functions are pure: same input always produces same output, no side effects.
Dates are passed in explicitly; callers decide what "today" is.
"""

from datetime import date, timedelta

from .models import DailyRecord, DayBar, WeeklySummary


HISTORY_DAYS = 7
NEAR_BUDGET_RATIO = 0.9


def date_key(day: date) -> str:
    """Fixed-format key for a calendar day (YYYY-MM-DD, Gregorian)."""
    return day.isoformat()


def add_to_history(records: list[DailyRecord], amount: int, today: date) -> list[DailyRecord]:
    """Add calories to today's record and keep only the most recent days.

    Args:
        records: Current log (any order)
        amount: Calories to add (non-negative)
        today: The day to credit

    Returns:
        New log sorted by date descending, at most 7 records
    """
    key = date_key(today)
    updated: list[DailyRecord] = []
    found = False

    for record in records:
        if record.date_string == key and not found:
            updated.append(
                DailyRecord(date_string=key, total_calories=record.total_calories + amount)
            )
            found = True
        elif record.date_string != key:
            updated.append(record)

    if not found:
        updated.append(DailyRecord(date_string=key, total_calories=amount))

    updated.sort(key=lambda r: r.date_string, reverse=True)
    return updated[:HISTORY_DAYS]


def weekly_records(records: list[DailyRecord], today: date) -> list[DailyRecord]:
    """Seven contiguous days ending today, zero-filled where nothing was logged.

    Args:
        records: Stored log
        today: Last day of the window

    Returns:
        Exactly 7 records, oldest first
    """
    by_key = {}
    for record in records:
        by_key.setdefault(record.date_string, record)

    result = []
    for offset in range(HISTORY_DAYS - 1, -1, -1):
        key = date_key(today - timedelta(days=offset))
        record = by_key.get(key)
        if record is None:
            record = DailyRecord(date_string=key, total_calories=0)
        result.append(record)
    return result


def bar_status(total_calories: int, daily_budget: int) -> str:
    """Chart color bucket for one day."""
    if total_calories > daily_budget:
        return "over"
    if total_calories > int(daily_budget * NEAR_BUDGET_RATIO):
        return "near"
    return "ok"


def summarize_week(records: list[DailyRecord], daily_budget: int) -> WeeklySummary:
    """Aggregate a zero-filled week against the daily budget.

    Days with nothing logged count toward the chart but not toward the
    average or the deficit.

    Args:
        records: Output of weekly_records
        daily_budget: Budget from compute_daily_budget

    Returns:
        WeeklySummary with chart bars and totals
    """
    bars = [
        DayBar(
            date_string=r.date_string,
            total_calories=r.total_calories,
            status=bar_status(r.total_calories, daily_budget),
        )
        for r in records
    ]

    logged = [r for r in records if r.total_calories > 0]
    total_calories = sum(r.total_calories for r in logged)
    days_logged = len(logged)
    avg_daily_calories = total_calories / days_logged if days_logged > 0 else 0

    return WeeklySummary(
        daily_budget=daily_budget,
        bars=bars,
        total_calories=total_calories,
        days_logged=days_logged,
        avg_daily_calories=round(avg_daily_calories, 1),
        deficit=days_logged * daily_budget - total_calories,
    )
