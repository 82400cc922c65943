"""
Optimistic Reordering
=====================

List state for the reorderable admin screens.

A move is applied to the local list first, then persisted with one bulk
/reorder call. If the call fails the local order is thrown away and the
list is fetched again from the backend.

Mutations of the same list (same resource and scope) are serialized with a
per-list lock shared by all request threads. The admin routes fetch the
list inside that lock (refresh_first=True), so each request works on the
order the previous one left on the backend. Within one instance every
local change bumps a revision so that a fetch started before the change
cannot overwrite it.
"""

import logging
import threading

from . import ordering
from .api_client import ApiError, AuthenticationRequired
from .logging_service import db_log
from .resources import ResourceApi

logger = logging.getLogger(__name__)

_locks = {}
_locks_guard = threading.Lock()


def mutation_lock(resource_key, scope=None):
    """The lock serializing reorders of one list."""
    key = (resource_key, scope)
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


class ReorderableList:
    """Ordered items of one resource with optimistic move/reorder and rollback."""

    def __init__(self, api: ResourceApi, scope=None, params=None):
        self.api = api
        self.scope = scope
        self.params = dict(params or {})
        if scope is not None and api.spec.scope_param:
            self.params[api.spec.scope_param] = scope
        self.items = []
        self.revision = 0
        self.alert = None
        self.error_status = None
        self.last_payload = None
        self._state_lock = threading.Lock()
        self._mutation_lock = mutation_lock(api.spec.key, scope)

    @property
    def source(self):
        return self.api.spec.key

    def _set_items(self, items):
        with self._state_lock:
            self.items = items
            self.revision += 1

    def refresh(self):
        """
        Fetch the authoritative list.

        Returns False when the fetch failed or its response was older
        than a local change made while it was in flight.
        """
        started_at = self.revision
        try:
            result = self.api.list(**self.params)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            logger.error("Failed to fetch %s: %s", self.source, e)
            db_log('error', self.source, f"Failed to fetch list: {e.message}", {'status': e.status})
            return False

        with self._state_lock:
            if self.revision != started_at:
                logger.debug("Dropping stale %s response (revision %s, now %s)",
                             self.source, started_at, self.revision)
                return False
            self.items = list(result.data or [])
            self.revision += 1
        return True

    def payload(self):
        return ordering.reorder_payload(self.items)

    def _load_for_mutation(self):
        """Fetch the list while holding the mutation lock; False (with alert) when it fails."""
        if self.refresh():
            return True
        self.alert = 'Could not load the list'
        self.error_status = 502
        return False

    def move(self, index, direction, refresh_first=False):
        """
        Swap the item at index with its neighbour and persist the new order.

        With refresh_first the list is fetched inside the per-list lock, so
        a move from another request always starts from the order the
        previous one left on the backend.

        Returns True when the backend accepted the order. A boundary move
        (first up, last down) changes nothing, sends nothing and returns False.
        """
        with self._mutation_lock:
            if refresh_first and not self._load_for_mutation():
                return False
            if ordering.neighbour_index(index, direction, len(self.items)) is None:
                return False
            self._set_items(ordering.move(self.items, index, direction))
            return self._persist()

    def reorder(self, ids, refresh_first=False):
        """Persist an explicit id order (drag & drop)."""
        with self._mutation_lock:
            if refresh_first and not self._load_for_mutation():
                return False
            new_items = ordering.apply_order(self.items, ids)
            if [item['id'] for item in new_items] == [item['id'] for item in self.items]:
                return False
            self._set_items(new_items)
            return self._persist()

    def _persist(self):
        self.last_payload = self.payload()
        try:
            self.api.reorder(self.last_payload)
        except AuthenticationRequired:
            raise
        except ApiError as e:
            self.alert = e.message or 'Reordering failed'
            self.error_status = e.status
            db_log('warning', self.source, "Reorder rejected, reloading list",
                   {'status': e.status, 'message': e.message})
            self.rollback()
            return False
        self.alert = None
        self.error_status = None
        return True

    def rollback(self):
        """Discard the local order and take the backend's."""
        self.refresh()

    def to_dict(self):
        return {
            'success': self.alert is None,
            'items': self.items,
            'error': self.alert,
        }


class MenuTreeList(ReorderableList):
    """Two-level menu tree for one location, reordered by drag & drop."""

    def payload(self):
        return ordering.menu_reorder_payload(self.items)

    def flat(self):
        return ordering.flatten(self.items)

    def drop(self, dragged_id, target_id, refresh_first=False):
        """
        Move dragged_id onto target_id and persist the flattened order.

        Raises MenuTreeError for drops that would nest menus three levels
        deep; nothing is sent in that case. The tree is reloaded after the
        call whether it succeeded or not so sort_order comes from the server.
        """
        with self._mutation_lock:
            if refresh_first and not self._load_for_mutation():
                return False
            new_tree = ordering.drop(self.items, dragged_id, target_id)
            if new_tree is self.items:
                return False
            self._set_items(new_tree)
            persisted = self._persist()
            if persisted:
                self.refresh()
            return persisted
