"""
Test suite for the agenda calendar views
"""
from datetime import date, datetime
from unittest import mock

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from backoffice.events.views import events
from .calendar import CalendarBuckets, month_grid, shift_anchor, week_start


def local(*args):
    return timezone.make_aware(datetime(*args))


def record(pk, title, *when):
    return {'id': pk, 'title': title, 'date': local(*when).isoformat()}


class CalendarHelperTests(SimpleTestCase):

    def test_month_grid_pads_to_whole_weeks(self):
        grid = month_grid(date(2026, 3, 18))
        self.assertEqual(grid[0], date(2026, 2, 23))
        self.assertEqual(grid[-1], date(2026, 4, 5))
        self.assertEqual(len(grid), 42)
        self.assertTrue(all(day.weekday() == 0 for day in grid[::7]))

    def test_month_grid_stops_at_last_date(self):
        grid = month_grid(date(9999, 12, 31))
        self.assertEqual(grid[0], date(9999, 11, 29))
        self.assertEqual(grid[-1], date.max)

    def test_month_grid_without_padding(self):
        grid = month_grid(date(2027, 2, 10))
        self.assertEqual((grid[0], grid[-1], len(grid)), (date(2027, 2, 1), date(2027, 2, 28), 28))

    def test_week_start_is_monday(self):
        self.assertEqual(week_start(date(2026, 3, 22)), date(2026, 3, 16))
        self.assertEqual(week_start(date(2026, 3, 16)), date(2026, 3, 16))

    def test_shift_anchor(self):
        self.assertEqual(shift_anchor(date(2026, 1, 31), 'month', 1), date(2026, 2, 28))
        self.assertEqual(shift_anchor(date(2026, 3, 18), 'week', -1), date(2026, 3, 11))
        self.assertEqual(shift_anchor(date(2028, 2, 29), 'year', 1), date(2029, 2, 28))
        with self.assertRaises(ValueError):
            shift_anchor(date(2026, 3, 18), 'day', 1)


class CalendarBucketsTests(SimpleTestCase):

    def setUp(self):
        self.records = [
            record(1, 'Festa A', 2026, 3, 5, 16, 0),
            record(2, 'Festa B', 2026, 3, 5, 10, 30),
            record(3, 'Festa C', 2026, 3, 5, 19, 0),
            record(4, 'Festa D', 2026, 3, 18, 14, 45),
            {'id': 5, 'title': 'Sem data', 'date': 'amanhã'},
            record(6, 'Festa E', 2026, 4, 1, 9, 0),
        ]
        self.buckets = CalendarBuckets(self.records, today=date(2026, 3, 18))

    def test_days_sorted_by_time_and_invalid_dates_dropped(self):
        self.assertEqual([r['id'] for r in self.buckets.events_on(date(2026, 3, 5))], [2, 1, 3])
        all_ids = {r['id'] for entries in self.buckets.by_day.values() for _, r in entries}
        self.assertNotIn(5, all_ids)

    def test_month_view_overflow(self):
        cells = {cell.day: cell for cell in self.buckets.month_view(date(2026, 3, 1))}
        crowded = cells[date(2026, 3, 5)]
        self.assertEqual([r['id'] for r in crowded.visible], [2, 1])
        self.assertEqual(crowded.overflow, 1)
        self.assertTrue(cells[date(2026, 3, 18)].is_today)
        self.assertFalse(cells[date(2026, 4, 1)].in_month)
        self.assertEqual([r['id'] for r in cells[date(2026, 4, 1)].events], [6])

    def test_month_view_custom_visible_count(self):
        cells = {cell.day: cell for cell in self.buckets.month_view(date(2026, 3, 1), max_visible=3)}
        self.assertEqual(cells[date(2026, 3, 5)].overflow, 0)

    def test_week_view_places_by_hour(self):
        grid = self.buckets.week_view(date(2026, 3, 18))
        self.assertEqual(grid.days[0], date(2026, 3, 16))
        self.assertEqual(len(grid.rows), 24)
        entries = grid.rows[14][2]
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].label, '14:45')
        self.assertEqual(entries[0].record['id'], 4)
        self.assertEqual(sum(len(cell) for row in grid.rows for cell in row), 1)

    def test_year_view(self):
        months = self.buckets.year_view(date(2026, 7, 1))
        self.assertEqual(len(months), 12)
        march = months[2]
        self.assertEqual(march.month, date(2026, 3, 1))
        self.assertEqual(march.event_count, 4)

        day = next(d for d in march.days if d.day == date(2026, 3, 5))
        self.assertTrue(day.has_events)
        self.assertEqual(day.event_ids, [2, 1, 3])
        self.assertEqual(day.link['id'], 2)

        # April 1st shows in March's padding but counts only for April
        self.assertEqual(months[3].event_count, 1)


class AgendaAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        self.event = TestDataFactory.create_event(title='Festa Júlia', date=local(2026, 3, 18, 14, 0))

    def test_month(self):
        response = self.client.get('/api/agenda', {'view': 'month', 'date': '2026-03-18'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['previous'], '2026-02-18')
        self.assertEqual(response.data['next'], '2026-04-18')
        cell = next(c for c in response.data['cells'] if c['day'] == '2026-03-18')
        self.assertEqual([e['title'] for e in cell['events']], ['Festa Júlia'])

    def test_week_with_step(self):
        response = self.client.get('/api/agenda', {'view': 'week', 'date': '2026-03-11', 'step': 1})
        self.assertEqual(response.data['anchor'], '2026-03-18')
        self.assertEqual(response.data['days'][0], '2026-03-16')
        self.assertEqual(response.data['rows'][14]['cells'][2][0]['label'], '14:00')

    def test_year(self):
        response = self.client.get('/api/agenda', {'view': 'year', 'date': '2026-03-18'})
        self.assertEqual(len(response.data['months']), 12)
        self.assertEqual(response.data['months'][2]['event_count'], 1)

    def test_invalid_parameters(self):
        self.assertEqual(self.client.get('/api/agenda', {'view': 'day'}).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get('/api/agenda', {'date': '18/03/2026'}).status_code,
                         status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get('/api/agenda', {'step': 'x'}).status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_sees_only_own_events(self):
        user = TestDataFactory.create_user(role='employee')
        TestDataFactory.create_employee(user=user)
        self.client.authenticate_user(user)
        response = self.client.get('/api/agenda', {'view': 'month', 'date': '2026-03-18'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(all(cell['events'] == [] for cell in response.data['cells']))

    def test_last_representable_date(self):
        for view in ('month', 'week', 'year'):
            response = self.client.get('/api/agenda', {'view': view, 'date': '9999-12-31'})
            self.assertEqual(response.status_code, status.HTTP_200_OK, view)
            self.assertEqual(response.data['anchor'], '9999-12-31')
            self.assertIsNone(response.data['next'])
            self.assertIsNotNone(response.data['previous'])
        response = self.client.get('/api/agenda', {'view': 'week', 'date': '9999-12-31'})
        self.assertEqual(response.data['days'][-1], '9999-12-31')

    def test_step_out_of_date_range(self):
        response = self.client.get('/api/agenda', {'view': 'year', 'date': '2026-01-01', 'step': '100000'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('step', response.data)

        response = self.client.get('/api/agenda', {'view': 'month', 'date': '2026-01-01', 'step': '-100000'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_event_list_gets_only_event_filters(self):
        with mock.patch.object(events, 'list_data', wraps=events.list_data) as list_data:
            response = self.client.get('/api/agenda', {
                'view': 'month', 'date': '2026-03-18', 'step': 0, 'max_visible': 3, 'status': 'scheduled',
            })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(list_data.call_args.args[1], {'status': 'scheduled'})
