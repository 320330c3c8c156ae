"""
Worked time versus expected time

Each clock-in is paired with the next clock-out; a clock-in with no
clock-out yet counts until ``now``. The expected workload is 8 hours per
weekday.
"""
from datetime import timedelta

from backoffice.core.dates import resolve_preset

DAILY_MINUTES = 8 * 60
WORK_DAYS_PER_WEEK = 5


def worked_minutes(records, now):
    """Minutes between paired punches of ``records`` (any order)"""
    punches = sorted(records, key=lambda record: record.timestamp)
    total = timedelta()
    for index, punch in enumerate(punches):
        if punch.type != 'clock_in':
            continue
        clock_out = next((later for later in punches[index + 1:] if later.type == 'clock_out'), None)
        end = clock_out.timestamp if clock_out is not None else now
        if end > punch.timestamp:
            total += end - punch.timestamp
    return total.total_seconds() / 60


def weekdays_between(first_day, last_day):
    count = 0
    day = first_day
    while day <= last_day:
        if day.weekday() < 5:
            count += 1
        day += timedelta(days=1)
    return count


def period_summary(records, now, expected):
    worked = worked_minutes(records, now)
    return {
        'worked_minutes': round(worked),
        'expected_minutes': expected,
        'balance_minutes': round(worked - expected),
    }


def time_summary(queryset, now):
    """Today / week / month totals for the punches in ``queryset``"""
    today = resolve_preset('today', now)
    week = resolve_preset('week', now)
    month = resolve_preset('month', now)

    week_days = min(WORK_DAYS_PER_WEEK, (today.start.date() - week.start.date()).days + 1)
    month_days = weekdays_between(month.start.date(), today.start.date())

    def in_interval(interval):
        return list(queryset.filter(timestamp__gte=interval.start, timestamp__lte=interval.end))

    return {
        'today': period_summary(in_interval(today), now, DAILY_MINUTES),
        'week': period_summary(in_interval(week), now, week_days * DAILY_MINUTES),
        'month': period_summary(in_interval(month), now, month_days * DAILY_MINUTES),
    }
