"""
Test suite for clock-in/clock-out records and the worked time summary
"""
from datetime import datetime
from types import SimpleNamespace

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from .models import TimeRecord
from .summary import time_summary, weekdays_between, worked_minutes


def local(*args):
    return timezone.make_aware(datetime(*args))


def punch(kind, *args):
    return SimpleNamespace(type=kind, timestamp=local(*args))


class WorkedMinutesTests(SimpleTestCase):

    def test_pairs_in_any_order(self):
        records = [
            punch('clock_out', 2026, 3, 18, 12, 0),
            punch('clock_in', 2026, 3, 18, 8, 0),
            punch('clock_out', 2026, 3, 18, 17, 30),
            punch('clock_in', 2026, 3, 18, 13, 0),
        ]
        self.assertEqual(worked_minutes(records, local(2026, 3, 18, 20, 0)), 510)

    def test_open_clock_in_counts_until_now(self):
        records = [punch('clock_in', 2026, 3, 18, 14, 0)]
        self.assertEqual(worked_minutes(records, local(2026, 3, 18, 15, 30)), 90)

    def test_stray_clock_out_is_ignored(self):
        records = [punch('clock_out', 2026, 3, 18, 9, 0)]
        self.assertEqual(worked_minutes(records, local(2026, 3, 18, 15, 30)), 0)

    def test_weekdays_between(self):
        self.assertEqual(weekdays_between(datetime(2026, 3, 1).date(), datetime(2026, 3, 18).date()), 13)


class TimeSummaryTests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.user = TestDataFactory.create_user(role='employee')
        self.now = local(2026, 3, 18, 15, 30)  # Wednesday

    def test_today_week_month(self):
        TestDataFactory.create_time_record(self.user, 'clock_in', local(2026, 3, 16, 8, 0))
        TestDataFactory.create_time_record(self.user, 'clock_out', local(2026, 3, 16, 17, 0))
        TestDataFactory.create_time_record(self.user, 'clock_in', local(2026, 3, 18, 8, 0))
        TestDataFactory.create_time_record(self.user, 'clock_out', local(2026, 3, 18, 12, 0))
        TestDataFactory.create_time_record(self.user, 'clock_in', local(2026, 3, 18, 13, 0))

        summary = time_summary(TimeRecord.objects.filter(user=self.user), self.now)

        self.assertEqual(summary['today'], {'worked_minutes': 390, 'expected_minutes': 480, 'balance_minutes': -90})
        self.assertEqual(summary['week']['worked_minutes'], 930)
        self.assertEqual(summary['week']['expected_minutes'], 3 * 480)
        self.assertEqual(summary['month']['expected_minutes'], 13 * 480)
        self.assertEqual(summary['month']['balance_minutes'], 930 - 13 * 480)

    def test_week_expectation_caps_at_five_days(self):
        sunday = local(2026, 3, 22, 10, 0)
        summary = time_summary(TimeRecord.objects.filter(user=self.user), sunday)
        self.assertEqual(summary['week']['expected_minutes'], 5 * 480)
        self.assertEqual(summary['today']['worked_minutes'], 0)


class TimeRecordAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.user = TestDataFactory.create_user(role='employee')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_clock_in_then_out(self):
        response = self.client.post('/api/time-records', {'type': 'clock_in'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user'], self.user.pk)

        status_response = self.client.get('/api/time-records/status')
        self.assertTrue(status_response.data['is_clocked_in'])
        self.assertEqual(status_response.data['latest_record']['type'], 'clock_in')

        response = self.client.post('/api/time-records', {'type': 'clock_out'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(self.client.get('/api/time-records/status').data['is_clocked_in'])

    def test_double_clock_in_rejected(self):
        self.client.post('/api/time-records', {'type': 'clock_in'}, format='json')
        response = self.client.post('/api/time-records', {'type': 'clock_in'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['type'], ['Entrada já registrada. Registre a saída primeiro.'])
        self.assertEqual(TimeRecord.objects.count(), 1)

    def test_clock_out_without_clock_in_rejected(self):
        response = self.client.post('/api/time-records', {'type': 'clock_out'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(TimeRecord.objects.exists())

    def test_client_timestamp_is_ignored(self):
        response = self.client.post('/api/time-records', {
            'type': 'clock_in', 'timestamp': '2020-01-01T08:00:00-03:00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = TimeRecord.objects.get()
        self.assertEqual(timezone.localtime(record.timestamp).date(), timezone.localdate())

    def test_list_shows_only_own_records(self):
        other = TestDataFactory.create_user(role='employee')
        TestDataFactory.create_time_record(other)
        TestDataFactory.create_time_record(self.user)
        response = self.client.get('/api/time-records')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['user'], self.user.pk)

    def test_summary_endpoint(self):
        response = self.client.get('/api/time-records/summary')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(set(response.data), {'today', 'week', 'month'})
        self.assertEqual(response.data['today']['expected_minutes'], 480)

    def test_all_and_delete_are_admin_only(self):
        record = TestDataFactory.create_time_record(self.user)
        self.assertEqual(self.client.get('/api/time-records/all').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.delete(f'/api/time-records/{record.pk}').status_code,
                         status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        response = self.client.get('/api/time-records/all', {'user': self.user.pk})
        self.assertEqual([row['id'] for row in response.data], [record.pk])
        self.assertEqual(self.client.get('/api/time-records/all', {'user': 'abc'}).status_code,
                         status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(f'/api/time-records/{record.pk}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(TimeRecord.objects.exists())
