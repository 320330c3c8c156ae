"""
Client session for the backoffice API

Holds the bearer token and the logged-in user for scripts and tools that talk
to the API. State lives in a JSON file so a later process can ``restore()``
it; ``logout()`` removes both the in-memory state and the file.

    session = ApiSession('http://localhost:8000/api', '~/.backoffice-session.json')
    if not session.restore():
        session.login('admin', 'admin123')
    events = session.get_json('events', params={'preset': 'month'})
    session.logout()
"""
import json
import logging
import os

import requests

from backoffice.core.permissions import can_access, normalize_role

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Login failed or the API rejected the session"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ApiSession(requests.Session):
    def __init__(self, base_url, state_path, timeout=10):
        super().__init__()
        self.base_url = base_url.rstrip('/')
        self.state_path = os.path.expanduser(state_path)
        self.timeout = timeout
        self.token = None
        self.user = None

    def url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    @property
    def is_authenticated(self):
        return self.token is not None

    @property
    def role(self):
        if not self.user:
            return None
        return normalize_role(self.user.get('role'))

    def can_access(self, resource, action='view'):
        return can_access(self.role, resource, action)

    def _install(self, token, user):
        self.token = token
        self.user = user
        self.headers['Authorization'] = f'Bearer {token}'

    def _clear(self):
        self.token = None
        self.user = None
        self.headers.pop('Authorization', None)

    def restore(self):
        """Load a saved session; False when there is none or it is unreadable"""
        try:
            with open(self.state_path, encoding='utf-8') as fh:
                state = json.load(fh)
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.state_path}: {str(e)}")
            return False

        token, user = state.get('token'), state.get('user')
        if not token or not isinstance(user, dict):
            return False
        self._install(token, user)
        return True

    def save(self):
        directory = os.path.dirname(self.state_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.state_path, 'w', encoding='utf-8') as fh:
            json.dump({'token': self.token, 'user': self.user}, fh)

    def login(self, username, password):
        response = self.post(self.url('auth/login'), json={'username': username, 'password': password},
                             timeout=self.timeout)
        if response.status_code != 200:
            raise SessionError(self._message(response, 'Falha no login'), response.status_code)
        payload = response.json()
        self._install(payload['token'], payload['user'])
        self.save()
        logger.info(f"Logged in as {username}")
        return self.user

    def logout(self):
        self._clear()
        try:
            os.remove(self.state_path)
        except FileNotFoundError:
            pass

    def get_json(self, path, **kwargs):
        kwargs.setdefault('timeout', self.timeout)
        response = self.get(self.url(path), **kwargs)
        if response.status_code == 401:
            self.logout()
            raise SessionError('Sessão expirada', 401)
        if not response.ok:
            raise SessionError(self._message(response, 'Erro na requisição'), response.status_code)
        return response.json()

    @staticmethod
    def _message(response, default):
        try:
            payload = response.json()
        except ValueError:
            return default
        if isinstance(payload, dict):
            return payload.get('message') or default
        return default
