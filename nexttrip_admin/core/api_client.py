"""
NextTrip API Client
===================

Thin requests-based client for the NextTrip REST backend.

Every response is parsed once, here, into either a Success or a Failure.
Callers that prefer exceptions use ApiClient.request(), which raises ApiError
(or AuthenticationRequired for HTTP 401) built from the Failure.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import requests
from flask import has_request_context, session

from .config import get_config_value
from .logging_service import LoggingService

PAGINATION_KEYS = ('current_page', 'last_page', 'per_page', 'total')


class ApiError(Exception):
    """Backend call failed (HTTP error, envelope with success=false, or network)."""

    def __init__(self, message, status=0, errors=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or {}

    def to_dict(self):
        payload = {'success': False, 'error': self.message}
        if self.errors:
            payload['errors'] = self.errors
        return payload


class AuthenticationRequired(ApiError):
    """Backend rejected the bearer token (HTTP 401)."""


@dataclass
class Success:
    data: Any = None
    meta: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    status: int = 200

    ok = True


@dataclass
class Failure:
    status: int
    message: str
    errors: Dict[str, List[str]] = field(default_factory=dict)

    ok = False

    def to_error(self) -> ApiError:
        if self.status == 401:
            return AuthenticationRequired(self.message, self.status, self.errors)
        return ApiError(self.message, self.status, self.errors)


Result = Union[Success, Failure]


def _split_pagination(data, meta):
    """Unwrap paginator payloads ({data: [...], current_page, ...}) into items + meta."""
    if isinstance(data, dict) and isinstance(data.get('data'), list) and (
            'current_page' in data or 'total' in data):
        meta = meta or {k: data[k] for k in PAGINATION_KEYS if k in data}
        data = data['data']
    return data, meta


def parse_envelope(status_code: int, body: Any) -> Result:
    """
    Turn an HTTP status and decoded JSON body into a Success or Failure.

    The backend answers {success, data?, message?, errors?, meta?}, but
    some endpoints omit `success` and a few return a bare list.
    """
    if not isinstance(body, dict):
        if 200 <= status_code < 300:
            return Success(data=body, status=status_code)
        return Failure(status_code, f"HTTP Error: {status_code}")

    message = body.get('message')
    errors = body.get('errors') or {}

    if not 200 <= status_code < 300:
        return Failure(status_code, message or f"HTTP Error: {status_code}", errors)

    if body.get('success') is False:
        return Failure(status_code, message or 'Request failed', errors)

    data = body.get('data', body if 'success' not in body else None)
    meta = body.get('meta')
    if meta is None and any(k in body for k in PAGINATION_KEYS):
        meta = {k: body[k] for k in PAGINATION_KEYS if k in body}
    data, meta = _split_pagination(data, meta)

    return Success(data=data, meta=meta, message=message, status=status_code)


# ===== Auth contexts =====

class AuthContext:
    """Supplies the bearer token and forgets it when the backend rejects it."""

    def get_token(self) -> Optional[str]:
        raise NotImplementedError

    def clear(self):
        pass


class StaticTokenAuth(AuthContext):
    """Fixed token, for scripts and tests."""

    def __init__(self, token=None):
        self.token = token

    def get_token(self):
        return self.token

    def clear(self):
        self.token = None


class SessionAuth(AuthContext):
    """Token persisted in the Flask session, falling back to the configured service token."""

    SESSION_KEY = 'access_token'

    def get_token(self):
        if has_request_context():
            token = session.get(self.SESSION_KEY)
            if token:
                return token
        return get_config_value('NEXTTRIP_API_TOKEN')

    def clear(self):
        if has_request_context():
            session.pop(self.SESSION_KEY, None)
            session.pop('user', None)


# ===== Client =====

def _clean_params(params):
    """Drop empty filters; render booleans the way the backend expects them."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None or value == '':
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        cleaned[key] = value
    return cleaned or None


class ApiClient:
    """Client for the NextTrip REST API with bearer auth and envelope parsing"""

    def __init__(self, base_url: str = None, auth: AuthContext = None,
                 timeout: int = None, http: requests.Session = None):
        self.base_url = (base_url or get_config_value('NEXTTRIP_API_URL', '')).rstrip('/')
        self.auth = auth or SessionAuth()
        self.timeout = timeout or int(get_config_value('NEXTTRIP_API_TIMEOUT', 30))
        self.http = http or requests.Session()

    def _headers(self):
        headers = {'Accept': 'application/json'}
        token = self.auth.get_token()
        if token:
            headers['Authorization'] = f"Bearer {token}"
        return headers

    def call(self, method: str, endpoint: str, params: Dict[str, Any] = None,
             json: Any = None, files: Dict[str, Any] = None,
             data: Dict[str, Any] = None) -> Result:
        """Perform one request and return a Success or Failure (never raises for HTTP errors)."""
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.http.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                files=files,
                data=data,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            LoggingService.log_api_call('api_client', endpoint, method, 0, {'error': str(e)})
            return Failure(0, 'Network error')

        try:
            body = response.json()
        except ValueError:
            body = None

        result = parse_envelope(response.status_code, body)
        LoggingService.log_api_call(
            'api_client', endpoint, method, response.status_code,
            None if result.ok else {'message': result.message, 'errors': result.errors},
        )

        if not result.ok and result.status == 401:
            self.auth.clear()

        return result

    def request(self, method: str, endpoint: str, **kwargs) -> Success:
        """Like call(), but raises ApiError on failure."""
        result = self.call(method, endpoint, **kwargs)
        if not result.ok:
            raise result.to_error()
        return result

    def get(self, endpoint, params=None):
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint, body=None, **kwargs):
        return self.request('POST', endpoint, json=body, **kwargs)

    def put(self, endpoint, body=None):
        return self.request('PUT', endpoint, json=body)

    def patch(self, endpoint, body=None):
        return self.request('PATCH', endpoint, json=body)

    def delete(self, endpoint):
        return self.request('DELETE', endpoint)

    def upload(self, endpoint, file, field_name='image', extra=None):
        """
        Multipart upload of a single file.

        Args:
            endpoint: e.g. '/about-awards/7/image'
            file: werkzeug FileStorage or (filename, stream, content_type) tuple
            field_name: multipart field name the backend reads
            extra: additional form fields
        """
        if isinstance(file, tuple):
            file_tuple = file
        else:
            file_tuple = (file.filename, file.stream, file.mimetype)
        return self.request('POST', endpoint, files={field_name: file_tuple}, data=extra)
