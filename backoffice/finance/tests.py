"""
Test suite for financial transactions
"""
from datetime import date, timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status

from backoffice.core.models import AuditLog
from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from .models import FinancialTransaction


class FinancialTransactionModelTests(BackofficeTestCase):

    def test_overdue(self):
        yesterday = timezone.localdate() - timedelta(days=1)
        late = TestDataFactory.create_transaction(due_date=yesterday)
        paid = TestDataFactory.create_transaction(due_date=yesterday, is_paid=True)
        upcoming = TestDataFactory.create_transaction(due_date=timezone.localdate())
        self.assertTrue(late.is_overdue)
        self.assertFalse(paid.is_overdue)
        self.assertFalse(upcoming.is_overdue)

    def test_mark_paid(self):
        transaction = TestDataFactory.create_transaction()
        transaction.mark_paid(date(2026, 3, 1))
        transaction.refresh_from_db()
        self.assertTrue(transaction.is_paid)
        self.assertEqual(transaction.paid_date, date(2026, 3, 1))


class FinancialTransactionAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_create_payable(self):
        response = self.client.post('/api/financial/transactions', {
            'type': 'payable', 'description': 'Aluguel', 'amount': '1200.00', 'due_date': '2026-03-05',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['is_paid'])
        self.assertIsNone(response.data['purchase'])

    def test_amount_must_be_positive(self):
        response = self.client.post('/api/financial/transactions', {
            'type': 'payable', 'description': 'Aluguel', 'amount': '-5', 'due_date': '2026-03-05',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_unpaid_transaction_drops_paid_date(self):
        response = self.client.post('/api/financial/transactions', {
            'type': 'receivable', 'description': 'Festa', 'amount': '300.00', 'due_date': '2026-03-05',
            'is_paid': False, 'paid_date': '2026-03-04',
        }, format='json')
        self.assertIsNone(response.data['paid_date'])

    def test_pay(self):
        transaction = TestDataFactory.create_transaction(amount=Decimal('300.00'))
        response = self.client.post(f'/api/financial/transactions/{transaction.pk}/pay')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_paid'])
        self.assertEqual(response.data['paid_date'], timezone.localdate().isoformat())
        self.assertTrue(AuditLog.objects.filter(action='transaction_pay', object_id=str(transaction.pk)).exists())

    def test_filters(self):
        TestDataFactory.create_transaction('receivable', due_date=date(2026, 3, 5), description='Festa A')
        TestDataFactory.create_transaction('payable', due_date=date(2026, 3, 6), description='Aluguel')
        TestDataFactory.create_transaction('payable', due_date=date(2026, 4, 6), description='Luz')

        response = self.client.get('/api/financial/transactions', {'type': 'payable'})
        self.assertEqual([row['description'] for row in response.data], ['Aluguel', 'Luz'])

        response = self.client.get('/api/financial/transactions', {
            'type': 'payable', 'date_from': '2026-03-01', 'date_to': '2026-03-31',
        })
        self.assertEqual([row['description'] for row in response.data], ['Aluguel'])

    def test_secretary_has_no_financial_access(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.get('/api/financial/transactions')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Acesso negado')

    def test_pay_missing_transaction(self):
        response = self.client.post('/api/financial/transactions/9999/pay')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(FinancialTransaction.objects.exists())
