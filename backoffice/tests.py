"""
Test suite for the API client session
"""
import json
import os
import tempfile
from unittest import mock

from django.test import SimpleTestCase

from backoffice.session import ApiSession, SessionError


def fake_response(status_code, payload=None):
    response = mock.Mock(status_code=status_code, ok=status_code < 400)
    if payload is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = payload
    return response


class ApiSessionTests(SimpleTestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.state_path = os.path.join(self.tmpdir.name, 'session', 'state.json')
        self.session = ApiSession('http://localhost:8000/api/', self.state_path)

    def test_url(self):
        self.assertEqual(self.session.url('/events'), 'http://localhost:8000/api/events')

    def test_login_persists_and_restores(self):
        user = {'id': 1, 'username': 'ana', 'role': 'Secretária'}
        with mock.patch.object(self.session, 'post', return_value=fake_response(200, {
            'token': 'abc', 'refresh': 'r', 'user': user,
        })) as post:
            self.session.login('ana', 'segredo')

        post.assert_called_once_with('http://localhost:8000/api/auth/login',
                                     json={'username': 'ana', 'password': 'segredo'}, timeout=10)
        self.assertTrue(self.session.is_authenticated)
        self.assertEqual(self.session.headers['Authorization'], 'Bearer abc')
        self.assertEqual(self.session.role, 'secretaria')
        self.assertTrue(self.session.can_access('clients'))
        self.assertFalse(self.session.can_access('financial'))

        restored = ApiSession('http://localhost:8000/api', self.state_path)
        self.assertTrue(restored.restore())
        self.assertEqual(restored.user, user)
        self.assertEqual(restored.headers['Authorization'], 'Bearer abc')

    def test_failed_login(self):
        with mock.patch.object(self.session, 'post',
                               return_value=fake_response(401, {'message': 'Usuário ou senha inválidos'})):
            with self.assertRaises(SessionError) as ctx:
                self.session.login('ana', 'errada')
        self.assertEqual(str(ctx.exception), 'Usuário ou senha inválidos')
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertFalse(self.session.is_authenticated)
        self.assertFalse(os.path.exists(self.state_path))

    def test_restore_without_file(self):
        self.assertFalse(self.session.restore())
        self.assertFalse(self.session.is_authenticated)

    def test_restore_unreadable_file(self):
        os.makedirs(os.path.dirname(self.state_path))
        with open(self.state_path, 'w', encoding='utf-8') as fh:
            fh.write('{not json')
        self.assertFalse(self.session.restore())

        with open(self.state_path, 'w', encoding='utf-8') as fh:
            json.dump({'token': 'abc', 'user': 'ana'}, fh)
        self.assertFalse(self.session.restore())

    def test_logout_clears_state_and_file(self):
        self.session._install('abc', {'id': 1, 'role': 'admin'})
        self.session.save()
        self.session.logout()
        self.assertFalse(self.session.is_authenticated)
        self.assertNotIn('Authorization', self.session.headers)
        self.assertFalse(os.path.exists(self.state_path))
        self.session.logout()

    def test_expired_token_logs_out(self):
        self.session._install('abc', {'id': 1, 'role': 'admin'})
        self.session.save()
        with mock.patch.object(self.session, 'get', return_value=fake_response(401, {'message': 'x'})):
            with self.assertRaises(SessionError) as ctx:
                self.session.get_json('events')
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertFalse(self.session.is_authenticated)
        self.assertFalse(os.path.exists(self.state_path))

    def test_get_json(self):
        self.session._install('abc', {'id': 1, 'role': 'admin'})
        with mock.patch.object(self.session, 'get', return_value=fake_response(200, [{'id': 1}])) as get:
            self.assertEqual(self.session.get_json('events', params={'preset': 'month'}), [{'id': 1}])
        get.assert_called_once_with('http://localhost:8000/api/events', params={'preset': 'month'}, timeout=10)

        with mock.patch.object(self.session, 'get', return_value=fake_response(500)):
            with self.assertRaises(SessionError) as ctx:
                self.session.get_json('events')
        self.assertEqual(str(ctx.exception), 'Erro na requisição')
