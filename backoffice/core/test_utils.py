"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backoffice.events.models import Event, EventCategory, EventEmployee, Package
from backoffice.finance.models import FinancialTransaction
from backoffice.inventory.models import InventoryItem
from backoffice.parties.models import Client
from backoffice.staff.models import Employee, Skill
from backoffice.timetracking.models import TimeRecord
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='admin', name=None,
                    is_superuser=False):
        """Create a test user with an application role"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            name=name or username,
            is_superuser=is_superuser,
        )

    @staticmethod
    def create_client(name=None, person_type='fisica', **kwargs):
        """Create a test client"""
        if not name:
            name = f'Client_{TestDataFactory.random_string(6)}'
        defaults = {
            'phone': '17999990000',
            'email': f'{name.lower()}@test.com',
            'cpf': '12345678901' if person_type == 'fisica' else '',
            'cnpj': '12345678000190' if person_type == 'juridica' else '',
            'rua': 'Rua das Flores',
            'numero': '100',
            'bairro': 'Centro',
            'cidade': 'São José do Rio Preto',
            'estado': 'SP',
        }
        defaults.update(kwargs)
        return Client.objects.create(name=name, person_type=person_type, **defaults)

    @staticmethod
    def create_employee(name=None, role='Recreador', user=None, **kwargs):
        """Create a test employee"""
        if not name:
            name = f'Employee_{TestDataFactory.random_string(6)}'
        return Employee.objects.create(name=name, role=role, user=user, **kwargs)

    @staticmethod
    def create_skill(name=None):
        if not name:
            name = f'Skill_{TestDataFactory.random_string(6)}'
        return Skill.objects.create(name=name)

    @staticmethod
    def create_inventory_item(name=None, item_type='consumable', quantity=10, min_quantity=2, **kwargs):
        """Create a test inventory item"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        return InventoryItem.objects.create(
            name=name,
            type=item_type,
            quantity=quantity,
            min_quantity=min_quantity,
            **kwargs
        )

    @staticmethod
    def create_category(name=None):
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return EventCategory.objects.create(name=name)

    @staticmethod
    def create_package(name=None, price=None):
        if not name:
            name = f'Pacote_{TestDataFactory.random_string(6)}'
        return Package.objects.create(name=name, price=price)

    @staticmethod
    def create_event(client=None, title=None, date=None, contract_value=None, status='scheduled',
                     employees=(), **kwargs):
        """Create a test event, optionally staffed with ``employees``"""
        if not client:
            client = TestDataFactory.create_client()
        if not title:
            title = f'Festa_{TestDataFactory.random_string(6)}'
        if date is None:
            date = timezone.now() + timedelta(days=7)
        if contract_value is None:
            contract_value = Decimal('1500.00')
        event = Event.objects.create(
            client=client,
            title=title,
            date=date,
            location=kwargs.pop('location', 'Salão de Festas'),
            contract_value=contract_value,
            status=status,
            **kwargs
        )
        for employee in employees:
            EventEmployee.objects.create(event=event, employee=employee, cache_value=Decimal('150.00'))
        return event

    @staticmethod
    def create_transaction(transaction_type='receivable', amount=None, due_date=None, is_paid=False,
                           paid_date=None, description=None, event=None):
        """Create a test financial transaction"""
        if amount is None:
            amount = Decimal('100.00')
        if due_date is None:
            due_date = timezone.localdate()
        if is_paid and paid_date is None:
            paid_date = timezone.localdate()
        return FinancialTransaction.objects.create(
            type=transaction_type,
            description=description or f'Transaction_{TestDataFactory.random_string(6)}',
            amount=amount,
            due_date=due_date,
            is_paid=is_paid,
            paid_date=paid_date,
            event=event,
        )

    @staticmethod
    def create_time_record(user, record_type='clock_in', timestamp=None):
        return TimeRecord.objects.create(user=user, type=record_type, timestamp=timestamp or timezone.now())


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()


class BackofficeTestCase(TestCase):
    """TestCase that starts every test with an empty cache"""

    def setUp(self):
        super().setUp()
        cache.clear()
