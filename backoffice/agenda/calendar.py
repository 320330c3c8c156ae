"""
Calendar grouping for the agenda

``CalendarBuckets`` indexes dated records by local calendar day the first
time a view asks for it and reuses that index for every later view. Weeks
start on Monday. Records whose date cannot be normalized are left out.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from functools import cached_property
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from backoffice.core.dates import local_date, normalize_instant, resolve_field

VIEWS = ('month', 'week', 'year')


def _as_date(anchor):
    if isinstance(anchor, datetime):
        return local_date(anchor)
    return anchor


def today():
    """Anchor for the "today" button, whatever the active view"""
    return timezone.localdate()


def shift_anchor(anchor, view, step):
    """Move ``anchor`` by ``step`` months, weeks or years"""
    anchor = _as_date(anchor)
    if view == 'month':
        return anchor + relativedelta(months=step)
    if view == 'week':
        return anchor + timedelta(weeks=step)
    if view == 'year':
        return anchor + relativedelta(years=step)
    raise ValueError(f'Visualização desconhecida: {view!r}')


def week_start(day):
    return day - timedelta(days=day.weekday())


def _days_after(day, count):
    """``day`` plus ``count`` days, stopping at the last representable date"""
    try:
        return day + timedelta(days=count)
    except OverflowError:
        return date.max


def month_grid(anchor):
    """Days of the anchor's month padded to whole Monday-Sunday weeks"""
    first = _as_date(anchor).replace(day=1)
    last = first.replace(day=31) if first.month == 12 else first + relativedelta(months=1, days=-1)
    start = week_start(first)
    end = _days_after(last, 6 - last.weekday())
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


@dataclass
class DayCell:
    day: date
    in_month: bool
    is_today: bool
    events: List[Any] = field(default_factory=list)
    max_visible: int = 2

    @property
    def visible(self):
        return self.events[:self.max_visible]

    @property
    def overflow(self):
        """How many records hide behind the "+K more" marker"""
        return max(len(self.events) - self.max_visible, 0)

    def to_dict(self):
        return {
            'day': self.day.isoformat(),
            'in_month': self.in_month,
            'is_today': self.is_today,
            'events': self.events,
            'visible': self.visible,
            'overflow': self.overflow,
        }


@dataclass
class WeekEntry:
    record: Any
    label: str

    def to_dict(self):
        return {'label': self.label, 'event': self.record}


@dataclass
class WeekGrid:
    days: List[date]
    rows: List[List[List[WeekEntry]]]

    def to_dict(self):
        return {
            'days': [day.isoformat() for day in self.days],
            'rows': [
                {'hour': hour, 'cells': [[entry.to_dict() for entry in cell] for cell in row]}
                for hour, row in enumerate(self.rows)
            ],
        }


@dataclass
class MiniDay:
    day: date
    in_month: bool
    event_ids: List[Any] = field(default_factory=list)
    titles: List[str] = field(default_factory=list)
    link: Optional[Any] = None

    @property
    def has_events(self):
        return bool(self.event_ids)

    def to_dict(self):
        return {
            'day': self.day.isoformat(),
            'in_month': self.in_month,
            'has_events': self.has_events,
            'event_ids': self.event_ids,
            'titles': self.titles,
            'link': self.link,
        }


@dataclass
class MiniMonth:
    month: date
    event_count: int
    days: List[MiniDay]

    def to_dict(self):
        return {
            'month': self.month.isoformat(),
            'event_count': self.event_count,
            'days': [day.to_dict() for day in self.days],
        }


class CalendarBuckets:
    """Dated records grouped by local day for month, week and year views"""

    def __init__(self, records, date_field='date', id_field='id', title_field='title', today=None):
        self.records = records
        self.date_field = date_field
        self.id_field = id_field
        self.title_field = title_field
        self.today = today

    @cached_property
    def by_day(self) -> Dict[date, List[tuple]]:
        """Local day -> [(instant, record)] ordered by instant"""
        buckets = {}
        for record in self.records:
            instant = normalize_instant(resolve_field(record, self.date_field))
            if instant is None:
                continue
            local = timezone.localtime(instant)
            buckets.setdefault(local.date(), []).append((local, record))
        for entries in buckets.values():
            entries.sort(key=lambda entry: entry[0])
        return buckets

    def _today(self):
        return self.today or today()

    def events_on(self, day):
        return [record for _, record in self.by_day.get(day, [])]

    def month_view(self, anchor, max_visible=2):
        anchor = _as_date(anchor)
        current = self._today()
        return [
            DayCell(
                day=day,
                in_month=day.month == anchor.month,
                is_today=day == current,
                events=self.events_on(day),
                max_visible=max_visible,
            )
            for day in month_grid(anchor)
        ]

    def week_view(self, anchor):
        """24 hourly rows by 7 day columns; placement by hour, label with minutes"""
        first = week_start(_as_date(anchor))
        days = [first + timedelta(days=offset) for offset in range(min(7, (date.max - first).days + 1))]
        rows = [[[] for _ in days] for _ in range(24)]
        for column, day in enumerate(days):
            for instant, record in self.by_day.get(day, []):
                rows[instant.hour][column].append(WeekEntry(record, instant.strftime('%H:%M')))
        return WeekGrid(days=days, rows=rows)

    def year_view(self, anchor):
        """
        Twelve mini months. A day with several records links to the first
        one; ``event_ids`` still lists all of them.
        """
        year = _as_date(anchor).year
        months = []
        for month in range(1, 13):
            first = date(year, month, 1)
            days = []
            event_count = 0
            for day in month_grid(first):
                records = self.events_on(day)
                in_month = day.month == month
                if in_month:
                    event_count += len(records)
                days.append(MiniDay(
                    day=day,
                    in_month=in_month,
                    event_ids=[resolve_field(record, self.id_field) for record in records],
                    titles=[resolve_field(record, self.title_field) for record in records],
                    link=records[0] if records else None,
                ))
            months.append(MiniMonth(month=first, event_count=event_count, days=days))
        return months
