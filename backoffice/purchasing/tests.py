"""
Test suite for purchases: payables and stock entries
"""
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from backoffice.finance.models import FinancialTransaction
from backoffice.inventory.models import StockMovement
from .models import Purchase
from .views import installment_due_dates


class InstallmentDueDateTests(SimpleTestCase):

    def test_monthly_from_first_date(self):
        self.assertEqual(installment_due_dates(date(2026, 3, 10), 3),
                         [date(2026, 3, 10), date(2026, 4, 10), date(2026, 5, 10)])

    def test_month_end_is_clamped(self):
        self.assertEqual(installment_due_dates(date(2026, 1, 31), 4),
                         [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)])


class PurchaseAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_cash_purchase_creates_one_payable(self):
        response = self.client.post('/api/purchases', {
            'supplier': 'Papelaria Central', 'description': 'Balões', 'amount': '150.00',
            'purchase_date': '2026-03-10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['installment_amount'])

        payable = FinancialTransaction.objects.get()
        self.assertEqual(payable.type, 'payable')
        self.assertEqual(payable.amount, Decimal('150.00'))
        self.assertEqual(payable.due_date, date(2026, 3, 10))
        self.assertEqual(payable.description, 'Compra: Balões - Papelaria Central')
        self.assertEqual(payable.purchase_id, response.data['id'])

    def test_installment_purchase_creates_monthly_payables(self):
        response = self.client.post('/api/purchases', {
            'supplier': 'Loja Festa', 'description': 'Fantasias', 'amount': '1000.00',
            'purchase_date': '2026-01-20', 'is_installment': True, 'installments': 3,
            'first_installment_date': '2026-01-31',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['installment_amount'], '333.33')

        payables = list(FinancialTransaction.objects.order_by('due_date'))
        self.assertEqual([p.due_date for p in payables], [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 31)])
        self.assertEqual({p.amount for p in payables}, {Decimal('333.33')})
        self.assertEqual(payables[1].description, 'Compra: Fantasias - Loja Festa (2/3)')

    def test_installments_need_at_least_two(self):
        response = self.client.post('/api/purchases', {
            'supplier': 'Loja', 'description': 'X', 'amount': '100.00', 'purchase_date': '2026-03-10',
            'is_installment': True, 'installments': 1, 'first_installment_date': '2026-03-10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('installments', response.data)
        self.assertFalse(Purchase.objects.exists())
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_installments_need_first_date(self):
        response = self.client.post('/api/purchases', {
            'supplier': 'Loja', 'description': 'X', 'amount': '100.00', 'purchase_date': '2026-03-10',
            'is_installment': True, 'installments': 2,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('first_installment_date', response.data)

    def test_purchase_with_item_adds_stock(self):
        item = TestDataFactory.create_inventory_item(name='Copos', quantity=5)
        response = self.client.post('/api/purchases', {
            'supplier': 'Atacado', 'description': 'Copos descartáveis', 'amount': '60.00',
            'purchase_date': '2026-03-10', 'item': item.pk, 'quantity': 100,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 105)

        movement = StockMovement.objects.get()
        self.assertEqual(movement.type, 'entrada')
        self.assertEqual(movement.notes, f"Compra #{response.data['id']} - Atacado")

    def test_item_requires_quantity(self):
        item = TestDataFactory.create_inventory_item()
        response = self.client.post('/api/purchases', {
            'supplier': 'Atacado', 'description': 'Copos', 'amount': '60.00',
            'purchase_date': '2026-03-10', 'item': item.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_update_does_not_duplicate_payables(self):
        response = self.client.post('/api/purchases', {
            'supplier': 'Loja', 'description': 'X', 'amount': '100.00', 'purchase_date': '2026-03-10',
        }, format='json')
        self.client.patch(f"/api/purchases/{response.data['id']}", {'notes': 'Nota fiscal 123'}, format='json')
        self.assertEqual(FinancialTransaction.objects.count(), 1)

    def test_delete_removes_payables(self):
        response = self.client.post('/api/purchases', {
            'supplier': 'Loja', 'description': 'X', 'amount': '100.00', 'purchase_date': '2026-03-10',
        }, format='json')
        self.client.delete(f"/api/purchases/{response.data['id']}")
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_purchases_are_admin_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        self.assertEqual(self.client.get('/api/purchases').status_code, status.HTTP_403_FORBIDDEN)
