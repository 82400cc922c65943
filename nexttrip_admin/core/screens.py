"""
CRUD Screens
============

Server-side controller for one admin screen: list -> form -> submit -> refresh.

Each screen owns its items and reports failures on itself (alert,
field_errors) instead of raising, so the route can answer with the
screen state. Only AuthenticationRequired escapes, for the 401 handler.
"""

import logging
import threading
from enum import Enum

from .api_client import ApiError, AuthenticationRequired
from .logging_service import db_log
from .ordering import CHILDREN_KEY, flatten
from .resources import ResourceApi, drop_blank_fields, validate_fields

logger = logging.getLogger(__name__)

GENERIC_ERROR = 'Something went wrong, please try again'

# (resource key, item id) of uploads in flight, shared by all request threads
_uploads = set()
_uploads_guard = threading.Lock()


def uploading_rows(resource_key):
    """Ids of the rows of one resource whose image upload is in flight."""
    with _uploads_guard:
        return {item_id for key, item_id in _uploads if key == resource_key}


def _start_upload(resource_key, item_id):
    with _uploads_guard:
        _uploads.add((resource_key, item_id))


def _finish_upload(resource_key, item_id):
    with _uploads_guard:
        _uploads.discard((resource_key, item_id))


class ScreenStatus(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    SUCCESS = 'success'
    ERROR = 'error'


class CrudScreen:
    """List/create/update/delete/toggle/upload for one resource"""

    def __init__(self, api: ResourceApi, params=None):
        self.api = api
        self.spec = api.spec
        self.params = dict(params or {})
        self.items = []
        self.meta = None
        self.status = ScreenStatus.IDLE
        self.alert = None
        self.field_errors = {}
        self.pending_confirmation = None
        self.error_status = None
        self.saved = None

    @property
    def source(self):
        return self.spec.key

    @property
    def uploading(self):
        """Rows of this resource with an upload in flight, from any request."""
        return uploading_rows(self.source)

    def _fail(self, error, action):
        """Record a backend failure for display."""
        self.status = ScreenStatus.ERROR
        self.error_status = error.status
        self.alert = error.message or GENERIC_ERROR
        self.field_errors = error.errors or {}
        db_log('error', self.source, f"{action} failed: {error.message}",
               {'status': error.status, 'errors': error.errors})

    def reset(self):
        self.status = ScreenStatus.IDLE
        self.alert = None
        self.field_errors = {}
        self.pending_confirmation = None
        self.error_status = None

    # ===== Read =====

    def load(self, **params):
        """Fetch the list. On failure the list is left empty; nothing is retried."""
        if params:
            self.params.update(params)
        self.status = ScreenStatus.LOADING
        try:
            result = self.api.list(**self.params)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            logger.error("Failed to fetch %s: %s", self.source, e)
            db_log('error', self.source, f"Failed to fetch list: {e.message}", {'status': e.status})
            self.items = []
            self.meta = None
            self.status = ScreenStatus.ERROR
            self.error_status = e.status
            return self.items

        self.items = list(result.data or [])
        self.meta = result.meta
        self.status = ScreenStatus.SUCCESS
        return self.items

    def find(self, item_id):
        for item in flatten(self.items):
            if str(item.get('id')) == str(item_id):
                return item
        return None

    def get(self, item_id):
        try:
            return self.api.get(item_id).data
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, 'Fetch')
            return None

    # ===== Write =====

    def submit(self, fields, item_id=None):
        """
        Create (item_id None) or update an item.

        Required fields are checked first; a form that fails the check is
        never sent. Returns True when saved, after reloading the list.
        """
        self.reset()
        creating = item_id is None
        fields = drop_blank_fields(self.spec, fields)
        errors = validate_fields(self.spec, fields, creating)
        if errors:
            self.field_errors = errors
            self.alert = next(iter(errors.values()))[0]
            self.error_status = 400
            self.status = ScreenStatus.ERROR
            return False

        try:
            if creating:
                result = self.api.create(fields)
            else:
                result = self.api.update(item_id, fields)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, 'Create' if creating else 'Update')
            return False

        self.saved = result.data
        db_log('info', self.source, f"{'Created' if creating else 'Updated'} item",
               {'id': item_id if item_id is not None else (result.data or {}).get('id')})
        self._reload_after_write()
        return True

    def delete(self, item_id, confirmed=False):
        """Delete after explicit confirmation. Unconfirmed calls only set pending_confirmation."""
        self.reset()
        if not confirmed:
            self.pending_confirmation = self.confirmation_message(item_id)
            return False

        try:
            self.api.delete(item_id)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, 'Delete')
            return False

        db_log('info', self.source, "Deleted item", {'id': item_id})
        self._reload_after_write()
        return True

    def confirmation_message(self, item_id):
        item = self.find(item_id)
        if item is None:
            return f"Delete this {self.spec.label.lower()} entry?"
        name = item.get('title') or item.get('name') or item.get('name_en') or item_id
        child_count = len(item.get(CHILDREN_KEY) or [])
        if child_count:
            return f'Delete "{name}" and its {child_count} sub-menu item(s)?'
        return f'Delete "{name}"?'

    def toggle(self, item_id):
        """Flip the active flag through the toggle endpoint, or through update() when there is none."""
        self.reset()
        try:
            if self.spec.toggle_path:
                self.api.toggle(item_id)
            else:
                item = self.find(item_id)
                if item is None:
                    self.load()
                    item = self.find(item_id)
                if item is None:
                    self.alert = 'Item not found'
                    self.error_status = 404
                    self.status = ScreenStatus.ERROR
                    return False
                field = self.spec.toggle_field
                self.api.update(item_id, {field: not item.get(field)})
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, 'Toggle')
            return False

        self._reload_after_write()
        return True

    def upload_image(self, item_id, file, path=None):
        """
        Upload one file for one row. While the request is in flight that row,
        and only that row, is listed as uploading by every screen of the
        resource, so list requests made meanwhile show it.
        """
        self.reset()
        _start_upload(self.source, item_id)
        try:
            self.api.upload(item_id, file, path)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, 'Upload')
            return False
        finally:
            _finish_upload(self.source, item_id)

        self._reload_after_write()
        return True

    def remove_image(self, item_id, path=None):
        self.reset()
        try:
            self.api.delete_upload(item_id, path)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, 'Remove image')
            return False
        self._reload_after_write()
        return True

    def run_action(self, method, suffix, item_id=None, body=None, params=None, reload=False):
        """
        Call a resource-specific endpoint (regions, toggle-popular, adjust...).

        Returns the Success, or None after recording the failure on the screen.
        """
        self.reset()
        try:
            result = self.api.action(method, suffix, item_id=item_id, body=body, params=params)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self._fail(e, suffix.replace('-', ' ').capitalize())
            return None
        if reload:
            self._reload_after_write()
        else:
            self.status = ScreenStatus.SUCCESS
        return result

    def _reload_after_write(self):
        if self.spec.supports('list'):
            self.load()
        else:
            self.status = ScreenStatus.SUCCESS

    def to_dict(self):
        data = {
            'success': self.alert is None and self.pending_confirmation is None,
            'status': self.status.value,
            'items': self.items,
        }
        if self.meta:
            data['meta'] = self.meta
        if self.saved is not None:
            data['saved'] = self.saved
        if self.alert:
            data['error'] = self.alert
        if self.field_errors:
            data['errors'] = self.field_errors
        if self.pending_confirmation:
            data['confirm_required'] = True
            data['message'] = self.pending_confirmation
        if self.uploading:
            data['uploading'] = sorted(self.uploading, key=str)
        return data


class SettingsScreen(CrudScreen):
    """Single settings object (about page, blog page, OTP) instead of a list."""

    def __init__(self, api: ResourceApi, params=None):
        super().__init__(api, params)
        self.settings = None

    def load(self, **params):
        self.status = ScreenStatus.LOADING
        try:
            self.settings = self.api.get().data
        except AuthenticationRequired:
            raise
        except ApiError as e:
            logger.error("Failed to fetch %s: %s", self.source, e)
            db_log('error', self.source, f"Failed to fetch settings: {e.message}", {'status': e.status})
            self.settings = None
            self.status = ScreenStatus.ERROR
            self.error_status = e.status
            return None
        self.status = ScreenStatus.SUCCESS
        return self.settings

    def save(self, fields):
        return self.submit(fields, item_id='settings')

    def _reload_after_write(self):
        self.load()

    def to_dict(self):
        data = super().to_dict()
        data.pop('items', None)
        data['settings'] = self.settings
        return data
