"""
Test suite for events, completion receivables and contract documents
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status

from backoffice.core.models import AuditLog
from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from backoffice.finance.models import FinancialTransaction
from .contracts import (
    ContractData, assemble_contract, contract_filename, end_time_for, format_currency,
    format_long_date, installment_amount_for, number_to_words_pt, render_contract_pdf,
)
from .models import Event

CONTRACTOR = {
    'name': 'Alegria Eventos',
    'document': '00.000.000/0001-00',
    'address': 'Rua Principal, 1',
    'email': 'contato@alegria.com',
    'phone': '(17) 99999-0000',
    'city': 'São José do Rio Preto/SP',
}


class EventAPITests(BackofficeTestCase):
    """Event CRUD as an admin"""

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        self.customer = TestDataFactory.create_client(name='Maria')

    def _payload(self, **overrides):
        payload = {
            'client': self.customer.pk,
            'title': 'Aniversário da Júlia',
            'date': (timezone.now() + timedelta(days=10)).isoformat(),
            'location': 'Buffet Alegria',
            'contract_value': '1000.00',
        }
        payload.update(overrides)
        return payload

    def test_create_event_with_staff_and_characters(self):
        employee = TestDataFactory.create_employee(name='Lucas')
        character = TestDataFactory.create_inventory_item(name='Elsa', item_type='character', quantity=1)
        response = self.client.post('/api/events', self._payload(
            characters=[character.pk],
            event_employees=[{'employee': employee.pk, 'cache_value': '120.00'}],
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['client_name'], 'Maria')
        self.assertEqual(response.data['character_names'], ['Elsa'])
        self.assertEqual(response.data['event_employees'][0]['employee_name'], 'Lucas')
        self.assertEqual(response.data['installment_value'], '1000.00')

    def test_consumable_is_not_a_character(self):
        item = TestDataFactory.create_inventory_item(item_type='consumable')
        response = self.client.post('/api/events', self._payload(characters=[item.pk]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('characters', response.data)

    def test_date_more_than_a_year_ago_rejected(self):
        old = (timezone.now() - timedelta(days=400)).isoformat()
        response = self.client.post('/api/events', self._payload(date=old), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['date'], ['A data do evento não pode ser anterior a 1 ano da data atual'])

    def test_recent_past_date_allowed(self):
        recent = (timezone.now() - timedelta(days=30)).isoformat()
        response = self.client.post('/api/events', self._payload(date=recent), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_entry_above_contract_rejected(self):
        response = self.client.post('/api/events', self._payload(entry_value='1500.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('entry_value', response.data)

    def test_duplicate_staff_rejected(self):
        employee = TestDataFactory.create_employee()
        response = self.client.post('/api/events', self._payload(event_employees=[
            {'employee': employee.pk, 'cache_value': '100'},
            {'employee': employee.pk, 'cache_value': '100'},
        ]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_installment_value(self):
        response = self.client.post('/api/events', self._payload(
            contract_value='1000.00', entry_value='0', installments=3,
        ), format='json')
        self.assertEqual(response.data['installment_value'], '333.33')

    def test_list_filtered_by_month(self):
        TestDataFactory.create_event(client=self.customer, title='Agora', date=timezone.now())
        TestDataFactory.create_event(client=self.customer, title='Longe', date=timezone.now() + timedelta(days=400))
        response = self.client.get('/api/events', {'preset': 'month'})
        self.assertEqual([row['title'] for row in response.data], ['Agora'])


class EventCompletionTests(BackofficeTestCase):
    """Completing an event books its receivable"""

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_completion_creates_receivable(self):
        customer = TestDataFactory.create_client(name='Maria')
        event = TestDataFactory.create_event(client=customer, title='Festa', contract_value=Decimal('800.00'),
                                             payment_date=date(2026, 5, 2))
        response = self.client.patch(f'/api/events/{event.pk}', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        receivable = FinancialTransaction.objects.get(event=event)
        self.assertEqual(receivable.type, 'receivable')
        self.assertEqual(receivable.amount, Decimal('800.00'))
        self.assertEqual(receivable.description, 'Evento: Festa - Maria')
        self.assertEqual(receivable.due_date, date(2026, 5, 2))
        self.assertFalse(receivable.is_paid)

    def test_due_date_defaults_to_event_day(self):
        event = TestDataFactory.create_event(contract_value=Decimal('500.00'))
        self.client.patch(f'/api/events/{event.pk}', {'status': 'completed'}, format='json')
        receivable = FinancialTransaction.objects.get(event=event)
        self.assertEqual(receivable.due_date, timezone.localtime(event.date).date())

    def test_completed_again_does_not_duplicate(self):
        event = TestDataFactory.create_event()
        self.client.patch(f'/api/events/{event.pk}', {'status': 'completed'}, format='json')
        self.client.patch(f'/api/events/{event.pk}', {'notes': 'Tudo certo'}, format='json')
        self.assertEqual(FinancialTransaction.objects.filter(event=event).count(), 1)

    def test_zero_value_event_creates_nothing(self):
        event = TestDataFactory.create_event(contract_value=Decimal('0'))
        response = self.client.patch(f'/api/events/{event.pk}', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_completion_shows_in_transactions_list(self):
        event = TestDataFactory.create_event()
        self.assertEqual(self.client.get('/api/financial/transactions').data, [])
        self.client.patch(f'/api/events/{event.pk}', {'status': 'completed'}, format='json')
        response = self.client.get('/api/financial/transactions')
        self.assertEqual(len(response.data), 1)


class EventVisibilityTests(BackofficeTestCase):
    """What non-admin roles see of events"""

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()

    def test_employee_sees_assigned_events_without_financials(self):
        user = TestDataFactory.create_user(role='employee')
        employee = TestDataFactory.create_employee(user=user)
        mine = TestDataFactory.create_event(title='Minha festa', employees=[employee], entry_value=Decimal('100'))
        TestDataFactory.create_event(title='Outra festa')

        self.client.authenticate_user(user)
        response = self.client.get('/api/events')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [mine.pk])

        row = response.data[0]
        for name in ('contract_value', 'entry_value', 'installments', 'installment_value', 'payment_method'):
            self.assertNotIn(name, row)
        self.assertNotIn('cache_value', row['event_employees'][0])

    def test_employee_cannot_open_other_events(self):
        user = TestDataFactory.create_user(role='employee')
        TestDataFactory.create_employee(user=user)
        other = TestDataFactory.create_event()
        self.client.authenticate_user(user)
        self.assertEqual(self.client.get(f'/api/events/{other.pk}').status_code, status.HTTP_404_NOT_FOUND)

    def test_secretary_sees_all_events_without_financials(self):
        TestDataFactory.create_event()
        TestDataFactory.create_event()
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.get('/api/events')
        self.assertEqual(len(response.data), 2)
        self.assertNotIn('contract_value', response.data[0])

    def test_only_admin_edits_events(self):
        event = TestDataFactory.create_event()
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.patch(f'/api/events/{event.pk}', {'title': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ContractHelperTests(SimpleTestCase):

    def test_end_time(self):
        self.assertEqual(end_time_for('14:30'), '17:30')
        self.assertEqual(end_time_for('10:00', Decimal('1.5')), '11:30')
        self.assertEqual(end_time_for('22:00', 3), '01:00')
        self.assertEqual(end_time_for('', None), '03:00')
        self.assertEqual(end_time_for('14'), '17:00')
        self.assertEqual(end_time_for('9', 2), '11:00')

    def test_installment_amount(self):
        self.assertEqual(installment_amount_for(Decimal('1000'), Decimal('100'), 3), (3, Decimal('300.00')))
        self.assertEqual(installment_amount_for(Decimal('1000'), None, 3), (3, Decimal('333.33')))
        self.assertEqual(installment_amount_for(Decimal('100'), None, 0), (1, Decimal('100.00')))
        self.assertEqual(installment_amount_for(Decimal('100'), None, -2), (1, Decimal('100.00')))
        self.assertEqual(installment_amount_for(Decimal('0.05'), None, 2), (2, Decimal('0.03')))

    def test_number_words(self):
        self.assertEqual(number_to_words_pt(15), 'quinze')
        self.assertEqual(number_to_words_pt(21), 'vinte e um')
        self.assertEqual(number_to_words_pt(30), 'trinta')
        self.assertEqual(number_to_words_pt(45), 'quarenta e cinco')
        self.assertEqual(number_to_words_pt(50), '50')

    def test_formats(self):
        self.assertEqual(format_currency(Decimal('1234.5')), 'R$ 1.234,50')
        self.assertEqual(format_currency(None), 'R$ 0,00')
        self.assertEqual(format_long_date(date(2026, 3, 5)), '05 de março de 2026')


class AssembleContractTests(SimpleTestCase):

    def _data(self, **overrides):
        values = {
            'event_title': 'Aniversário da Júlia',
            'client_name': 'Maria',
            'event_date': datetime(2026, 3, 5, 14, 0),
            'event_time': '14:00',
            'location': 'Salão Azul',
            'contract_value': Decimal('1000.00'),
            'client_cpf': '123.456.789-01',
            'characters': ['Elsa', 'Olaf'],
        }
        values.update(overrides)
        return ContractData(**values)

    def test_party_contract(self):
        definition = assemble_contract(self._data(), today=date(2026, 2, 1), contractor=CONTRACTOR)
        self.assertEqual(definition.kind, 'fisica')
        self.assertEqual(definition.end_time, '17:00')
        self.assertEqual(definition.installment_count, 1)
        self.assertEqual(definition.installment_amount, Decimal('1000.00'))
        self.assertEqual(definition.page_size, 'A4')

        text = definition.text()
        self.assertIn('CONTRATANTE: Maria, CPF: 123.456.789-01', text)
        self.assertIn('2 personagens caracterizados: Elsa, Olaf;', text)
        self.assertIn('05 de março de 2026', text)
        self.assertIn('15 (quinze) crianças', text)
        self.assertIn('R$ 1.000,00', text)
        self.assertNotIn('Condição acordada', text)
        self.assertIn('01 de fevereiro de 2026', text)

    def test_payment_terms_when_split(self):
        definition = assemble_contract(
            self._data(entry_value=Decimal('400'), installments=3), today=date(2026, 2, 1), contractor=CONTRACTOR
        )
        self.assertIn('Condição acordada: entrada de R$ 400,00 e saldo em 3 parcelas de R$ 200,00.',
                      definition.text())

    def test_explicit_end_time_wins(self):
        definition = assemble_contract(self._data(event_end_time='18:30'), contractor=CONTRACTOR)
        self.assertEqual(definition.end_time, '18:30')

    def test_kind_override_uses_corporate_template(self):
        data = self._data(client_person_type='juridica', client_cnpj='12.345.678/0001-90',
                          employees=['Lucas', 'Ana'], duration_hours=Decimal('4'))
        definition = assemble_contract(data, contractor=CONTRACTOR)
        self.assertEqual(definition.kind, 'juridica')
        self.assertIn('EVENTO CORPORATIVO', definition.title)
        self.assertIn('2 produtores', definition.text())
        self.assertIn('4 horas', definition.text())

        forced = assemble_contract(data, client_kind='fisica', contractor=CONTRACTOR)
        self.assertEqual(forced.kind, 'fisica')

    def test_filename(self):
        definition = assemble_contract(self._data(), contractor=CONTRACTOR)
        self.assertEqual(contract_filename(definition), 'Contrato-Maria-05 de março de 2026.pdf')
        corporate = assemble_contract(self._data(), client_kind='juridica', contractor=CONTRACTOR)
        self.assertEqual(contract_filename(corporate), 'Contrato-Corporativo-Maria-05 de março de 2026.pdf')

    def test_render_pdf(self):
        definition = assemble_contract(self._data(location='Rua A & B <fundos>'), contractor=CONTRACTOR)
        pdf = render_contract_pdf(definition)
        self.assertTrue(pdf.startswith(b'%PDF'))


class EventContractAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        self.event = TestDataFactory.create_event(client=TestDataFactory.create_client(name='Maria'))

    def test_download_contract(self):
        response = self.client.get(f'/api/events/{self.event.pk}/contract')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('attachment', response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF'))
        self.assertTrue(AuditLog.objects.filter(action='contract_generate', object_id=str(self.event.pk)).exists())

    def test_unknown_kind(self):
        response = self.client.get(f'/api/events/{self.event.pk}/contract', {'kind': 'outro'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_contracts_are_admin_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.get(f'/api/events/{self.event.pk}/contract')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_event(self):
        response = self.client.get('/api/events/9999/contract')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_model_installment_value(self):
        event = Event(contract_value=Decimal('100'), entry_value=None, installments=3)
        self.assertEqual(event.installment_value, Decimal('33.33'))
