"""
Test suite for clients and the CEP address lookup
"""
from unittest import mock

import requests
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from .cep import CepLookupFailed, CepNotFound, InvalidCep, lookup_cep
from .models import Client


class ClientAPITests(BackofficeTestCase):
    """Client CRUD through the API"""

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_user(role='admin')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_client_stores_digits_only(self):
        response = self.client.post('/api/clients', {
            'name': 'Maria Souza',
            'person_type': 'fisica',
            'cpf': '123.456.789-01',
            'cep': '15000-000',
            'estado': 'sp',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        client = Client.objects.get(pk=response.data['id'])
        self.assertEqual(client.cpf, '12345678901')
        self.assertEqual(client.cep, '15000000')
        self.assertEqual(client.estado, 'SP')

    def test_create_client_rejects_short_cnpj(self):
        response = self.client.post('/api/clients', {
            'name': 'Escola Alegria', 'person_type': 'juridica', 'cnpj': '1234'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cnpj', response.data)
        self.assertIn('message', response.data)

    def test_list_reflects_new_client(self):
        self.assertEqual(self.client.get('/api/clients').data, [])
        TestDataFactory.create_client(name='Ana')
        response = self.client.get('/api/clients')
        self.assertEqual([row['name'] for row in response.data], ['Ana'])

    def test_search_filter(self):
        TestDataFactory.create_client(name='Ana Lima')
        TestDataFactory.create_client(name='Bruno Reis')
        response = self.client.get('/api/clients', {'search': 'bruno'})
        self.assertEqual([row['name'] for row in response.data], ['Bruno Reis'])

    def test_form_values_for_new_and_existing(self):
        response = self.client.get('/api/clients/form')
        self.assertEqual(response.data['mode'], 'new')
        self.assertEqual(response.data['values']['person_type'], 'fisica')

        client = TestDataFactory.create_client(name='Carla')
        response = self.client.get(f'/api/clients/{client.pk}/form')
        self.assertEqual(response.data['mode'], 'existing')
        self.assertEqual(response.data['values']['name'], 'Carla')

    def test_update_and_delete(self):
        client = TestDataFactory.create_client(name='Carla')
        response = self.client.patch(f'/api/clients/{client.pk}', {'phone': '17988887777'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['phone'], '17988887777')

        response = self.client.delete(f'/api/clients/{client.pk}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Client.objects.filter(pk=client.pk).exists())

    def test_client_with_events_cannot_be_deleted(self):
        event = TestDataFactory.create_event()
        response = self.client.delete(f'/api/clients/{event.client_id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Client.objects.filter(pk=event.client_id).exists())

    def test_created_at_filter(self):
        TestDataFactory.create_client(name='Hoje')
        response = self.client.get('/api/clients', {'preset': 'today'})
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/clients', {'date_from': '2020-01-01', 'date_to': '2020-01-31'})
        self.assertEqual(response.data, [])

    def test_invalid_date_filter(self):
        response = self.client.get('/api/clients', {'date_from': 'ontem'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ClientRoleTests(BackofficeTestCase):
    """What each role may do with clients"""

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()

    def test_secretary_reads_but_cannot_write(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        TestDataFactory.create_client()
        self.assertEqual(len(self.client.get('/api/clients').data), 1)
        response = self.client.post('/api/clients', {'name': 'Nova'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_employee_sees_only_clients_of_assigned_events(self):
        user = TestDataFactory.create_user(role='employee')
        employee = TestDataFactory.create_employee(user=user)
        mine = TestDataFactory.create_event(employees=[employee])
        TestDataFactory.create_event()

        self.client.authenticate_user(user)
        response = self.client.get('/api/clients')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [mine.client_id])


class CepLookupTests(BackofficeTestCase):

    def _response(self, payload, status_code=200):
        response = mock.Mock(status_code=status_code)
        response.json.return_value = payload
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f'{status_code} error')
        else:
            response.raise_for_status.return_value = None
        return response

    @mock.patch('backoffice.parties.cep.requests.get')
    def test_lookup_maps_address_and_caches(self, mock_get):
        mock_get.return_value = self._response({
            'cep': '15015-100', 'logradouro': 'Rua Bernardino de Campos', 'bairro': 'Centro',
            'localidade': 'São José do Rio Preto', 'uf': 'SP',
        })
        address = lookup_cep('15015-100')
        self.assertEqual(address, {
            'cep': '15015100', 'rua': 'Rua Bernardino de Campos', 'bairro': 'Centro',
            'cidade': 'São José do Rio Preto', 'estado': 'SP',
        })
        lookup_cep('15015100')
        self.assertEqual(mock_get.call_count, 1)

    def test_invalid_cep(self):
        with self.assertRaises(InvalidCep):
            lookup_cep('1501')

    @mock.patch('backoffice.parties.cep.requests.get')
    def test_unknown_cep(self, mock_get):
        mock_get.return_value = self._response({'erro': True})
        with self.assertRaises(CepNotFound):
            lookup_cep('00000000')

    @mock.patch('backoffice.parties.cep.requests.get')
    def test_transport_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('offline')
        with self.assertRaises(CepLookupFailed):
            lookup_cep('15015100')

    @mock.patch('backoffice.parties.cep.requests.get')
    def test_endpoint_status_codes(self, mock_get):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user(role='admin'))

        self.assertEqual(client.get('/api/address/cep/123').status_code, status.HTTP_400_BAD_REQUEST)

        mock_get.return_value = self._response({'erro': 'true'})
        response = client.get('/api/address/cep/99999999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'CEP não encontrado')

        mock_get.return_value = self._response({}, status_code=500)
        response = client.get('/api/address/cep/15015100')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
