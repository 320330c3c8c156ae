"""
Date normalization, preset intervals and date-range filtering

Every list in the API can be narrowed with the same selection the date filter
widget produces: a named preset (today, week, month, year) or a custom range.
Records are plain mappings (serializer output) or model instances; the date
is looked up through a dot path such as ``"date"`` or ``"event.date"``.

Weeks start on Monday. Interval membership is inclusive on both ends.
"""
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

PRESETS = ('today', 'week', 'month', 'year', 'custom')


def resolve_field(record: Any, path: str) -> Any:
    """Read a dot-separated path from a mapping or an object, None when missing"""
    value = record
    for part in path.split('.'):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _aware(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def local_date(instant: datetime) -> date:
    return timezone.localtime(_aware(instant)).date()


def start_of_day(value) -> datetime:
    day = local_date(value) if isinstance(value, datetime) else value
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(value) -> datetime:
    day = local_date(value) if isinstance(value, datetime) else value
    return timezone.make_aware(datetime.combine(day, time.max))


def normalize_instant(value: Any) -> Optional[datetime]:
    """
    Convert a raw date value into an aware datetime, or None when invalid.

    Strings are read as ISO-8601 (a bare date means local midnight), dates and
    datetimes are used directly, numbers are POSIX timestamps in seconds.
    Empty values and any other type are invalid. Never raises.
    """
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _aware(value)
    if isinstance(value, date):
        return start_of_day(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_datetime(text)
        except ValueError:
            return None
        if parsed is not None:
            return _aware(parsed)
        try:
            day = parse_date(text)
        except ValueError:
            return None
        return start_of_day(day) if day else None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.get_current_timezone())
        except (OverflowError, OSError, ValueError):
            return None
    return None


def _boundary(value, upper=False) -> datetime:
    # A bare date stands for its whole day: lower bounds start it, upper bounds end it
    day = None
    if isinstance(value, date) and not isinstance(value, datetime):
        day = value
    elif isinstance(value, str):
        try:
            day = parse_date(value.strip())
        except ValueError:
            day = None
    if day is not None:
        return end_of_day(day) if upper else start_of_day(day)

    instant = normalize_instant(value)
    if instant is None:
        raise ValueError(f'Data inválida: {value!r}')
    return instant


@dataclass(frozen=True)
class DateInterval:
    """Pair of instants; ``end`` of None means "on the day of ``start``"."""
    start: datetime
    end: Optional[datetime] = None

    def bounds(self):
        if self.end is None:
            return start_of_day(self.start), end_of_day(self.start)
        return self.start, self.end

    def contains(self, instant: datetime) -> bool:
        lower, upper = self.bounds()
        return lower <= instant <= upper


def resolve_preset(preset: str, now: Optional[datetime] = None) -> Optional[DateInterval]:
    """Map a preset name to its interval around ``now``; ``custom`` has none"""
    if preset not in PRESETS:
        raise ValueError(f'Período desconhecido: {preset!r}')
    if preset == 'custom':
        return None

    today = timezone.localtime(_aware(now)).date() if now else timezone.localdate()
    if preset == 'today':
        first = last = today
    elif preset == 'week':
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    elif preset == 'month':
        first = today.replace(day=1)
        last = first + relativedelta(months=1, days=-1)
    else:
        first = date(today.year, 1, 1)
        last = date(today.year, 12, 31)
    return DateInterval(start_of_day(first), end_of_day(last))


@dataclass(frozen=True)
class FilterSelection:
    """
    Either a named preset with its computed interval or a custom interval.

    The default instance has no range, so every record passes.
    """
    preset: str = 'custom'
    range: Optional[DateInterval] = None

    @property
    def is_active(self) -> bool:
        return self.range is not None and self.range.start is not None

    @classmethod
    def none(cls):
        return cls()

    def select_preset(self, preset: str, now: Optional[datetime] = None) -> 'FilterSelection':
        return FilterSelection(preset=preset, range=resolve_preset(preset, now))

    def with_custom_range(self, start, end=None) -> 'FilterSelection':
        interval = DateInterval(
            _boundary(start),
            _boundary(end, upper=True) if end else None,
        )
        return FilterSelection(preset='custom', range=interval)

    def clear(self) -> 'FilterSelection':
        return FilterSelection()

    @classmethod
    def from_query(cls, params, now: Optional[datetime] = None) -> 'FilterSelection':
        """Build a selection from ``preset``, ``date_from`` and ``date_to`` query parameters"""
        selection = cls()
        preset = (params.get('preset') or '').strip().lower()
        if preset and preset != 'custom':
            return selection.select_preset(preset, now)

        date_from = params.get('date_from')
        if not date_from:
            return selection
        return selection.with_custom_range(date_from, params.get('date_to') or None)


def filter_by_date_range(records, field_path: str, selection: Optional[FilterSelection]):
    """
    Keep the records whose date at ``field_path`` lies inside the selection.

    Without an active selection the same sequence object is returned. Records
    with a missing or unparsable date are dropped; survivors keep their order.
    """
    if selection is None or not selection.is_active:
        return records

    lower, upper = selection.range.bounds()
    kept = []
    for record in records:
        instant = normalize_instant(resolve_field(record, field_path))
        if instant is not None and lower <= instant <= upper:
            kept.append(record)
    return kept
