"""
Test suite for employees, their skills and payments
"""
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from .models import Employee, EmployeePayment
from .serializers import account_role_for

User = get_user_model()


class AccountRoleTests(BackofficeTestCase):

    def test_job_title_maps_to_login_role(self):
        self.assertEqual(account_role_for('Secretária'), 'secretaria')
        self.assertEqual(account_role_for('secretaria executiva'), 'secretaria')
        self.assertEqual(account_role_for('Recreador'), 'employee')
        self.assertEqual(account_role_for(None), 'employee')


class EmployeeAPITests(BackofficeTestCase):
    """Employee CRUD and login provisioning"""

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_create_without_login(self):
        response = self.client.post('/api/employees', {'name': 'João', 'role': 'Recreador'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['has_login'])
        self.assertNotIn('user_password', response.data)

    def test_create_with_login_creates_user(self):
        response = self.client.post('/api/employees', {
            'name': 'Paula', 'role': 'Secretária',
            'user_email': 'paula@festas.com', 'user_password': 'segredo1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['has_login'])
        self.assertEqual(response.data['username'], 'paula@festas.com')

        user = User.objects.get(username='paula@festas.com')
        self.assertEqual(user.role, 'secretaria')
        self.assertTrue(user.check_password('segredo1'))

    def test_login_requires_password(self):
        response = self.client.post('/api/employees', {
            'name': 'Paula', 'role': 'Recreador', 'user_email': 'paula@festas.com',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('user_password', response.data)
        self.assertFalse(Employee.objects.exists())

    def test_duplicate_login_email(self):
        TestDataFactory.create_user(username='ja@festas.com')
        response = self.client.post('/api/employees', {
            'name': 'Outra', 'role': 'Recreador',
            'user_email': 'ja@festas.com', 'user_password': 'segredo1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['user_email'], ['Email já cadastrado como usuário'])

    def test_update_syncs_linked_user(self):
        user = TestDataFactory.create_user(role='employee')
        employee = TestDataFactory.create_employee(name='Antigo', user=user)
        response = self.client.patch(f'/api/employees/{employee.pk}', {
            'name': 'Novo Nome', 'role': 'Secretaria', 'user_password': 'outrasenha',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        user.refresh_from_db()
        self.assertEqual(user.name, 'Novo Nome')
        self.assertEqual(user.role, 'secretaria')
        self.assertTrue(user.check_password('outrasenha'))

    def test_delete_removes_login(self):
        user = TestDataFactory.create_user(role='employee')
        employee = TestDataFactory.create_employee(user=user)
        response = self.client.delete(f'/api/employees/{employee.pk}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=user.pk).exists())

    def test_invalid_cpf(self):
        response = self.client.post('/api/employees', {'name': 'X', 'role': 'Recreador', 'cpf': '12'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cpf', response.data)

    def test_secretary_can_list_but_not_create(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        self.assertEqual(self.client.get('/api/employees').status_code, status.HTTP_200_OK)
        response = self.client.post('/api/employees', {'name': 'X', 'role': 'Recreador'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_employee_role_cannot_list(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='employee'))
        self.assertEqual(self.client.get('/api/employees').status_code, status.HTTP_403_FORBIDDEN)


class EmployeeSkillAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        self.employee = TestDataFactory.create_employee()
        self.magic = TestDataFactory.create_skill('Mágica')
        self.paint = TestDataFactory.create_skill('Pintura facial')

    def test_replace_skills(self):
        url = f'/api/employees/{self.employee.pk}/skills'
        response = self.client.put(url, {'skill_ids': [self.magic.pk, self.paint.pk]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({row['name'] for row in response.data}, {'Mágica', 'Pintura facial'})

        response = self.client.put(url, {'skill_ids': [self.paint.pk]}, format='json')
        self.assertEqual([row['name'] for row in response.data], ['Pintura facial'])
        self.assertEqual(list(self.employee.skills.values_list('pk', flat=True)), [self.paint.pk])

    def test_unknown_skill_leaves_skills_untouched(self):
        self.employee.employee_skills.create(skill=self.magic)
        response = self.client.put(f'/api/employees/{self.employee.pk}/skills',
                                   {'skill_ids': [self.paint.pk, 9999]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(list(self.employee.skills.all()), [self.magic])

    def test_skill_ids_must_be_a_list(self):
        response = self.client.put(f'/api/employees/{self.employee.pk}/skills',
                                   {'skill_ids': 'abc'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_by_skill(self):
        other = TestDataFactory.create_employee()
        self.employee.employee_skills.create(skill=self.magic)
        response = self.client.get('/api/employees', {'skill': self.magic.pk})
        self.assertEqual([row['id'] for row in response.data], [self.employee.pk])
        self.assertNotIn(other.pk, [row['id'] for row in response.data])


class EmployeePaymentAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))
        self.employee = TestDataFactory.create_employee(name='Lucas')

    def test_pay_employee(self):
        response = self.client.post(f'/api/employees/{self.employee.pk}/payments', {
            'amount': '250.00', 'payment_date': '2026-03-10', 'description': 'Festa sábado',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['employee_name'], 'Lucas')
        payment = EmployeePayment.objects.get()
        self.assertEqual(payment.amount, Decimal('250.00'))
        self.assertEqual(payment.employee, self.employee)

    def test_amount_must_be_positive(self):
        response = self.client.post(f'/api/employees/{self.employee.pk}/payments', {
            'amount': '0', 'payment_date': '2026-03-10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_list_filtered_by_payment_date(self):
        EmployeePayment.objects.create(employee=self.employee, amount=Decimal('100'), payment_date=date(2026, 3, 5))
        EmployeePayment.objects.create(employee=self.employee, amount=Decimal('80'), payment_date=date(2026, 4, 5))
        response = self.client.get(f'/api/employees/{self.employee.pk}/payments',
                                   {'date_from': '2026-03-01', 'date_to': '2026-03-31'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['amount'] for row in response.data], ['100.00'])

    def test_payments_are_admin_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        response = self.client.get(f'/api/employees/{self.employee.pk}/payments')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
