"""
Test suite for inventory items and stock movements
"""
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from .models import InventoryItem, StockMovement


class InventoryModelTests(BackofficeTestCase):

    def test_low_stock(self):
        low = TestDataFactory.create_inventory_item(name='Balões', quantity=2, min_quantity=2)
        TestDataFactory.create_inventory_item(name='Copos', quantity=50, min_quantity=10)
        self.assertTrue(low.is_low_stock)
        self.assertEqual(list(InventoryItem.low_stock()), [low])

    def test_movement_apply(self):
        item = TestDataFactory.create_inventory_item(quantity=10)
        StockMovement.objects.create(item=item, quantity=4, type='saida').apply()
        item.refresh_from_db()
        self.assertEqual(item.quantity, 6)
        StockMovement.objects.create(item=item, quantity=10, type='entrada').apply()
        item.refresh_from_db()
        self.assertEqual(item.quantity, 16)


class InventoryAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_create_item(self):
        response = self.client.post('/api/inventory', {
            'name': 'Fantasia Homem-Aranha', 'type': 'character', 'quantity': 1, 'min_quantity': 0,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['type'], 'character')
        self.assertFalse(response.data['is_low_stock'])

    def test_negative_quantity_rejected(self):
        response = self.client.post('/api/inventory', {'name': 'Copos', 'quantity': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_low_stock_filter(self):
        TestDataFactory.create_inventory_item(name='Balões', quantity=1, min_quantity=5)
        TestDataFactory.create_inventory_item(name='Copos', quantity=50, min_quantity=5)
        response = self.client.get('/api/inventory', {'low_stock': 'true'})
        self.assertEqual([row['name'] for row in response.data], ['Balões'])

    def test_exit_updates_quantity(self):
        item = TestDataFactory.create_inventory_item(quantity=10)
        response = self.client.post(f'/api/inventory/{item.pk}/movements',
                                    {'type': 'saida', 'quantity': 3, 'notes': 'Festa'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 7)

        response = self.client.get(f'/api/inventory/{item.pk}')
        self.assertEqual(response.data['quantity'], 7)

    def test_exit_beyond_stock_rejected(self):
        item = TestDataFactory.create_inventory_item(quantity=2)
        response = self.client.post(f'/api/inventory/{item.pk}/movements',
                                    {'type': 'saida', 'quantity': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['quantity'], ['Estoque insuficiente. Disponível: 2'])
        item.refresh_from_db()
        self.assertEqual(item.quantity, 2)
        self.assertFalse(StockMovement.objects.exists())

    def test_list_movements(self):
        item = TestDataFactory.create_inventory_item(quantity=10)
        StockMovement.objects.create(item=item, quantity=2, type='entrada')
        response = self.client.get(f'/api/inventory/{item.pk}/movements', {'preset': 'today'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['item_name'], item.name)

    def test_employee_has_no_inventory_access(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='employee'))
        self.assertEqual(self.client.get('/api/inventory').status_code, status.HTTP_403_FORBIDDEN)
