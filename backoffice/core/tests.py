"""
Test suite for core: date filtering, role policy, masks, the entity form
lifecycle, query-set caching, authentication and system settings
"""
from datetime import date, datetime, time, timezone as dt_timezone
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import serializers, status

from backoffice.core.cache_utils import cached_query, get_query_set_version, invalidate_query_sets
from backoffice.core.crud import EntityForm, FormBusy, FormClosed
from backoffice.core.dates import (
    DateInterval, FilterSelection, filter_by_date_range, normalize_instant, resolve_field, resolve_preset,
)
from backoffice.core.masks import format_cep, format_cnpj, format_cpf, format_phone, format_rg, only_digits
from backoffice.core.models import AuditLog, Setting
from backoffice.core.permissions import access_flags, can_access, normalize_role, user_role
from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from backoffice.events.models import EventCategory
from backoffice.parties.models import Client
from backoffice.parties.views import clients
from backoffice.staff.models import EmployeeRole


def local(*args):
    return timezone.make_aware(datetime(*args))


class NormalizeInstantTests(SimpleTestCase):
    """Raw date values become aware datetimes or None"""

    def test_iso_datetime_with_offset(self):
        result = normalize_instant('2026-03-05T14:30:00-03:00')
        self.assertEqual(result, datetime(2026, 3, 5, 17, 30, tzinfo=dt_timezone.utc))

    def test_date_string_is_local_midnight(self):
        self.assertEqual(normalize_instant('2026-03-05'), local(2026, 3, 5))

    def test_date_object_is_local_midnight(self):
        self.assertEqual(normalize_instant(date(2026, 3, 5)), local(2026, 3, 5))

    def test_naive_datetime_is_made_aware(self):
        result = normalize_instant(datetime(2026, 3, 5, 10, 0))
        self.assertTrue(timezone.is_aware(result))
        self.assertEqual(result, local(2026, 3, 5, 10, 0))

    def test_epoch_seconds(self):
        result = normalize_instant(1700000000)
        self.assertEqual(result, datetime.fromtimestamp(1700000000, tz=dt_timezone.utc))

    def test_invalid_values(self):
        for value in (None, '', 0, 'not a date', '2026-02-30', float('nan'), float('inf'), True, [], object()):
            with self.subTest(value=value):
                self.assertIsNone(normalize_instant(value))

    def test_resolve_field_reads_nested_paths(self):
        record = {'event': {'date': '2026-03-05'}}
        self.assertEqual(resolve_field(record, 'event.date'), '2026-03-05')
        self.assertIsNone(resolve_field(record, 'event.missing'))
        self.assertIsNone(resolve_field({'event': None}, 'event.date'))


class ResolvePresetTests(SimpleTestCase):
    """Named presets map to inclusive calendar intervals"""

    def setUp(self):
        self.now = local(2026, 3, 18, 15, 30)  # a Wednesday

    def test_today(self):
        interval = resolve_preset('today', self.now)
        self.assertEqual(interval.start, local(2026, 3, 18))
        self.assertEqual(interval.end, timezone.make_aware(datetime.combine(date(2026, 3, 18), time.max)))

    def test_week_starts_on_monday(self):
        interval = resolve_preset('week', self.now)
        self.assertEqual(interval.start, local(2026, 3, 16))
        self.assertEqual(timezone.localtime(interval.end).date(), date(2026, 3, 22))

    def test_week_on_sunday_belongs_to_previous_monday(self):
        interval = resolve_preset('week', local(2026, 3, 22, 23, 0))
        self.assertEqual(interval.start, local(2026, 3, 16))

    def test_month(self):
        interval = resolve_preset('month', self.now)
        self.assertEqual(interval.start, local(2026, 3, 1))
        self.assertEqual(timezone.localtime(interval.end).date(), date(2026, 3, 31))

    def test_month_in_leap_february(self):
        interval = resolve_preset('month', local(2028, 2, 10))
        self.assertEqual(timezone.localtime(interval.end).date(), date(2028, 2, 29))

    def test_year(self):
        interval = resolve_preset('year', self.now)
        self.assertEqual(interval.start, local(2026, 1, 1))
        self.assertEqual(timezone.localtime(interval.end).date(), date(2026, 12, 31))

    def test_custom_has_no_interval(self):
        self.assertIsNone(resolve_preset('custom', self.now))

    def test_unknown_preset(self):
        with self.assertRaises(ValueError):
            resolve_preset('decade', self.now)


class FilterSelectionTests(SimpleTestCase):

    def setUp(self):
        self.now = local(2026, 3, 18, 15, 30)

    def test_default_is_inactive(self):
        self.assertFalse(FilterSelection().is_active)
        self.assertFalse(FilterSelection.none().is_active)

    def test_select_preset(self):
        selection = FilterSelection().select_preset('month', self.now)
        self.assertTrue(selection.is_active)
        self.assertEqual(selection.preset, 'month')

    def test_choosing_custom_discards_previous_range(self):
        selection = FilterSelection().select_preset('month', self.now).select_preset('custom')
        self.assertEqual(selection.preset, 'custom')
        self.assertIsNone(selection.range)
        self.assertFalse(selection.is_active)

    def test_custom_range_covers_whole_end_day(self):
        selection = FilterSelection().with_custom_range('2026-03-01', '2026-03-10')
        lower, upper = selection.range.bounds()
        self.assertEqual(lower, local(2026, 3, 1))
        self.assertEqual(timezone.localtime(upper).date(), date(2026, 3, 10))
        self.assertEqual(timezone.localtime(upper).time(), time.max)

    def test_custom_range_without_end_is_one_day(self):
        selection = FilterSelection().with_custom_range('2026-03-01')
        lower, upper = selection.range.bounds()
        self.assertEqual(lower, local(2026, 3, 1))
        self.assertEqual(timezone.localtime(upper).date(), date(2026, 3, 1))

    def test_clear(self):
        selection = FilterSelection().select_preset('year', self.now).clear()
        self.assertFalse(selection.is_active)

    def test_from_query(self):
        self.assertEqual(FilterSelection.from_query({'preset': 'week'}, self.now).range,
                         resolve_preset('week', self.now))
        custom = FilterSelection.from_query({'preset': 'custom', 'date_from': '2026-03-01'})
        self.assertTrue(custom.is_active)
        self.assertFalse(FilterSelection.from_query({}).is_active)

    def test_from_query_preset_wins_over_dates(self):
        selection = FilterSelection.from_query({'preset': 'today', 'date_from': '2020-01-01'}, self.now)
        self.assertEqual(selection.preset, 'today')
        self.assertEqual(selection.range.start, local(2026, 3, 18))

    def test_from_query_rejects_bad_input(self):
        with self.assertRaises(ValueError):
            FilterSelection.from_query({'date_from': 'ontem'})
        with self.assertRaises(ValueError):
            FilterSelection.from_query({'preset': 'decade'})


class FilterByDateRangeTests(SimpleTestCase):

    def setUp(self):
        self.records = [
            {'id': 1, 'date': '2026-03-01T00:00:00-03:00'},
            {'id': 2, 'date': '2026-02-28T23:59:59-03:00'},
            {'id': 3, 'date': 'garbage'},
            {'id': 4, 'date': None},
            {'id': 5, 'date': '2026-03-10T23:59:00-03:00'},
            {'id': 6, 'date': '2026-03-11T00:00:00-03:00'},
            {'id': 7, 'date': '2026-03-05'},
        ]

    def test_inactive_selection_returns_same_object(self):
        self.assertIs(filter_by_date_range(self.records, 'date', FilterSelection()), self.records)
        self.assertIs(filter_by_date_range(self.records, 'date', None), self.records)

    def test_inclusive_bounds_keep_order_and_drop_invalid(self):
        selection = FilterSelection().with_custom_range('2026-03-01', '2026-03-10')
        kept = filter_by_date_range(self.records, 'date', selection)
        self.assertEqual([record['id'] for record in kept], [1, 5, 7])

    def test_nested_field_path(self):
        records = [{'event': {'date': '2026-03-05T10:00:00-03:00'}}, {'event': {}}]
        selection = FilterSelection().with_custom_range(date(2026, 3, 5))
        self.assertEqual(len(filter_by_date_range(records, 'event.date', selection)), 1)

    def test_today_preset_ends_at_midnight(self):
        now = local(2026, 3, 18, 15, 30)
        records = [
            {'id': 1, 'date': local(2026, 3, 18, 23, 59, 59)},
            {'id': 2, 'date': local(2026, 3, 19, 0, 0, 1)},
        ]
        kept = filter_by_date_range(records, 'date', FilterSelection().select_preset('today', now))
        self.assertEqual([record['id'] for record in kept], [1])

    def test_custom_month_range(self):
        records = [
            {'id': 1, 'date': local(2024, 5, 31, 23, 59).isoformat()},
            {'id': 2, 'date': local(2024, 6, 15, 12, 0).isoformat()},
            {'id': 3, 'date': local(2024, 6, 30, 23, 59).isoformat()},
            {'id': 4, 'date': local(2024, 7, 1, 0, 0).isoformat()},
        ]
        selection = FilterSelection().with_custom_range('2024-06-01', '2024-06-30')
        kept = filter_by_date_range(records, 'date', selection)
        self.assertEqual([record['id'] for record in kept], [2, 3])

    def test_interval_contains(self):
        interval = DateInterval(local(2026, 3, 5, 12, 0))
        self.assertTrue(interval.contains(local(2026, 3, 5, 0, 0)))
        self.assertFalse(interval.contains(local(2026, 3, 6, 0, 0)))


class PermissionPolicyTests(SimpleTestCase):

    def test_role_normalization(self):
        self.assertEqual(normalize_role('Secretária'), 'secretaria')
        self.assertEqual(normalize_role(' ADMIN '), 'admin')
        self.assertEqual(normalize_role('funcionário'), 'employee')
        self.assertIsNone(normalize_role('gerente'))
        self.assertIsNone(normalize_role(None))

    def test_policy_table(self):
        self.assertTrue(can_access('admin', 'dashboard'))
        self.assertFalse(can_access('secretaria', 'dashboard'))
        self.assertTrue(can_access('employee', 'events'))
        self.assertFalse(can_access('employee', 'events', 'edit'))
        self.assertTrue(can_access('secretaria', 'inventory'))
        self.assertFalse(can_access('employee', 'inventory'))
        self.assertFalse(can_access('secretaria', 'financial'))
        self.assertTrue(can_access('employee', 'time_tracking', 'edit'))
        self.assertFalse(can_access('employee', 'time_tracking', 'manage'))

    def test_unknown_role_or_resource_gets_nothing(self):
        self.assertFalse(can_access('gerente', 'events'))
        self.assertFalse(can_access('admin', 'buffets'))

    def test_access_flags(self):
        flags = access_flags('secretaria')
        self.assertTrue(flags['can_access_clients'])
        self.assertFalse(flags['can_access_financial'])


class MaskTests(SimpleTestCase):

    def test_documents(self):
        self.assertEqual(format_cpf('12345678901'), '123.456.789-01')
        self.assertEqual(format_cpf('1234'), '123.4')
        self.assertEqual(format_cnpj('12.345.678/0001-90'), '12.345.678/0001-90')
        self.assertEqual(format_cnpj('12345678000190'), '12.345.678/0001-90')
        self.assertEqual(format_rg('123456789'), '12.345.678-9')

    def test_contact(self):
        self.assertEqual(format_cep('15000000'), '15000-000')
        self.assertEqual(format_phone('17997252950'), '(17) 99725-2950')
        self.assertEqual(format_phone('1733334444'), '(17) 3333-4444')
        self.assertEqual(format_phone(''), '')
        self.assertEqual(only_digits(None), '')


class EntityFormTests(BackofficeTestCase):
    """Create/update lifecycle shared by every editable entity"""

    def test_open_new_gives_defaults(self):
        form = EntityForm(clients)
        values = form.open()
        self.assertEqual(form.state, EntityForm.EDITING)
        self.assertEqual(form.mode, 'new')
        self.assertEqual(values['person_type'], 'fisica')
        self.assertEqual(values['name'], '')
        self.assertNotIn('event_count', values)

    def test_open_existing_gives_instance_values(self):
        client = TestDataFactory.create_client(name='Maria')
        form = EntityForm(clients)
        values = form.open(client)
        self.assertEqual(form.mode, 'existing')
        self.assertEqual(values['name'], 'Maria')

    def test_submit_success_closes_and_invalidates(self):
        version = get_query_set_version('clients')
        form = EntityForm(clients)
        form.open()
        client = form.submit({'name': 'Ana', 'person_type': 'fisica'})
        self.assertEqual(form.state, EntityForm.CLOSED)
        self.assertEqual(Client.objects.get(pk=client.pk).name, 'Ana')
        self.assertGreater(get_query_set_version('clients'), version)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Client', object_id=str(client.pk)).exists())

    def test_submit_failure_keeps_editing_and_persists_nothing(self):
        form = EntityForm(clients)
        form.open()
        with self.assertRaises(serializers.ValidationError):
            form.submit({'person_type': 'fisica', 'cpf': '123'})
        self.assertEqual(form.state, EntityForm.EDITING)
        self.assertTrue(form.error)
        self.assertIn('name', form.errors)
        self.assertEqual(Client.objects.count(), 0)

    def test_submit_requires_open_form(self):
        with self.assertRaises(FormClosed):
            EntityForm(clients).submit({'name': 'Ana'})

    def test_submit_rejected_while_submitting(self):
        form = EntityForm(clients)
        form.open()
        form.state = EntityForm.SUBMITTING
        with self.assertRaises(FormBusy):
            form.submit({'name': 'Ana'})
        self.assertEqual(Client.objects.count(), 0)


class QuerySetCacheTests(BackofficeTestCase):

    def test_cached_query_until_invalidated(self):
        calls = []

        @cached_query('settings', cache_ttl=60)
        def build(value):
            calls.append(value)
            return {'value': value}

        self.assertEqual(build(1), {'value': 1})
        self.assertEqual(build(1), {'value': 1})
        self.assertEqual(len(calls), 1)

        invalidate_query_sets('settings')
        build(1)
        self.assertEqual(len(calls), 2)

    def test_model_save_bumps_related_query_sets(self):
        version = get_query_set_version('events')
        TestDataFactory.create_client()
        self.assertGreater(get_query_set_version('events'), version)


class AuthAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_user(username='admin', password='admin123', role='admin')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_token_and_user(self):
        response = self.client.post('/api/auth/login', {'username': 'admin', 'password': 'admin123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('token', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'admin')
        self.assertTrue(AuditLog.objects.filter(action='login').exists())

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/auth/login', {'username': 'admin', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Usuário ou senha inválidos')

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('message', response.data)

    def test_me_carries_access_flags(self):
        secretary = TestDataFactory.create_user(role='Secretária')
        self.client.authenticate_user(secretary)
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'secretaria')
        self.assertFalse(response.data['is_admin'])
        self.assertTrue(response.data['can_access_events'])
        self.assertFalse(response.data['can_access_dashboard'])

    def test_register_is_admin_only(self):
        payload = {'username': 'nova', 'password': 'segredo123', 'name': 'Nova', 'role': 'employee'}
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.post('/api/auth/register', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/auth/register', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('token', response.data)
        self.assertNotIn('password', response.data['user'])

    def test_superuser_is_admin(self):
        superuser = TestDataFactory.create_user(role='employee', is_superuser=True)
        self.assertEqual(user_role(superuser), 'admin')


class SystemSettingAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_upsert_by_key(self):
        response = self.client.post('/api/settings/system', {'key': 'card_fee', 'value': '3.5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/settings/system', {'key': 'card_fee', 'value': '4.0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Setting.objects.get(key='card_fee').value, '4.0')

        response = self.client.get('/api/settings/system/card_fee')
        self.assertEqual(response.data['value'], '4.0')

    def test_upsert_requires_key(self):
        response = self.client.post('/api/settings/system', {'value': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Chave é obrigatória')

    def test_unknown_key_is_404(self):
        response = self.client.get('/api/settings/system/missing')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('message', response.data)

    def test_settings_are_admin_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.get('/api/settings/system')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SeedDefaultsCommandTests(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_defaults', stdout=StringIO())
        call_command('seed_defaults', stdout=StringIO())

        admin = get_user_model().objects.get(username='admin')
        self.assertEqual(user_role(admin), 'admin')
        self.assertTrue(admin.check_password('admin123'))
        self.assertEqual(EventCategory.objects.filter(name='Festa Infantil').count(), 1)
        self.assertTrue(EmployeeRole.objects.filter(name='Recreador').exists())
