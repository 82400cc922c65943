"""
Shared fixtures for the NextTrip Admin tests.

The NextTrip backend is replaced by FakeBackend, which stands in for the
requests.Session the API client uses: it answers by (method, path) and
records every call so tests can assert what was (or was not) sent.
"""

import os
import shutil
import tempfile
from unittest.mock import MagicMock

import pytest
from flask import Flask

from nexttrip_admin import NextTripAdmin
from nexttrip_admin.core.api_client import ApiClient, StaticTokenAuth
from nexttrip_admin.core.config import Config
from nexttrip_admin.core.database import Database

API_URL = 'https://api.test/api'


def make_response(status=200, body=None):
    response = MagicMock()
    response.status_code = status
    if body is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


class FakeBackend:
    """
    Answers requests by (method, path).

    on() sets the response for a route, replacing earlier ones; queue()
    adds a further response served after the previous one. The last
    response keeps being served. An exception instance as status is
    raised instead (network failures).
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, status=200, body=None):
        self.routes[(method, path)] = [(status, body)]
        return self

    def queue(self, method, path, status=200, body=None):
        self.routes.setdefault((method, path), []).append((status, body))
        return self

    def request(self, method, url, params=None, json=None, files=None, data=None,
                headers=None, timeout=None):
        path = url[len(API_URL):] if url.startswith(API_URL) else url
        self.calls.append({
            'method': method,
            'path': path,
            'params': params,
            'json': json,
            'files': files,
            'data': data,
            'headers': headers or {},
            'timeout': timeout,
        })
        responses = self.routes.get((method, path))
        if not responses:
            return make_response(404, {'success': False, 'message': 'Not found'})
        status, body = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(status, Exception):
            raise status
        return make_response(status, body)

    def calls_to(self, method, path):
        return [call for call in self.calls if call['method'] == method and call['path'] == path]

    def writes(self):
        return [call for call in self.calls if call['method'] != 'GET']


def envelope(data, **extra):
    body = {'success': True, 'data': data}
    body.update(extra)
    return body


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep logs in a temp file and ignore any token from the developer's .env."""
    monkeypatch.setattr(Config, 'LOG_DB', str(tmp_path / 'logs' / 'admin_logs.db'))
    monkeypatch.setattr(Config, 'NEXTTRIP_API_TOKEN', None)
    monkeypatch.delenv('NEXTTRIP_API_TOKEN', raising=False)
    monkeypatch.setattr(Config, 'NEXTTRIP_API_URL', API_URL)
    Database.reset()
    yield
    Database.reset()


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for the log database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="nexttrip-admin-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api_client(backend):
    return ApiClient(base_url=API_URL, auth=StaticTokenAuth('test-token'), http=backend)


@pytest.fixture
def app(tmp_db_dir, backend):
    """Flask app with every NextTrip Admin module registered and a fake backend."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "admin_logs.db")
    ext = NextTripAdmin(app, {'api_url': API_URL, 'login_url': '/login'})
    ext.http = backend
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """Test client whose session carries a backend token."""
    with client.session_transaction() as sess:
        sess['access_token'] = 'session-token'
    return client
