"""
Tests for optimistic reordering with rollback.
Run with: pytest tests/test_reorder.py -v
"""

import threading

import pytest
import requests

from nexttrip_admin.core import ordering
from nexttrip_admin.core.api_client import AuthenticationRequired
from nexttrip_admin.core.reorder import ReorderableList, mutation_lock
from nexttrip_admin.core.resources import ResourceApi, get_resource

from conftest import envelope

AWARDS = [
    {'id': 1, 'title': 'A', 'sort_order': 1},
    {'id': 2, 'title': 'B', 'sort_order': 2},
    {'id': 3, 'title': 'C', 'sort_order': 3},
]


def ids_of(seq):
    return [item['id'] for item in seq]


@pytest.fixture
def awards(backend, api_client):
    backend.on('GET', '/about-awards', body=envelope(AWARDS))
    backend.on('POST', '/about-awards/reorder', body={'success': True})
    awards = ReorderableList(ResourceApi(get_resource('about_awards'), api_client))
    assert awards.refresh()
    return awards


# ---------------------------------------------------------------------------
# Successful moves
# ---------------------------------------------------------------------------

def test_refresh_loads_items(awards):
    assert ids_of(awards.items) == [1, 2, 3]


def test_move_sends_one_bulk_reorder(awards, backend):
    assert awards.move(1, 'up') is True

    assert ids_of(awards.items) == [2, 1, 3]
    posts = backend.calls_to('POST', '/about-awards/reorder')
    assert len(posts) == 1
    assert posts[0]['json'] == {'items': [
        {'id': 2, 'sort_order': 1},
        {'id': 1, 'sort_order': 2},
        {'id': 3, 'sort_order': 3},
    ]}
    assert awards.alert is None


def test_successful_move_does_not_refetch(awards, backend):
    awards.move(0, 'down')
    assert len(backend.calls_to('GET', '/about-awards')) == 1


@pytest.mark.parametrize("index,direction", [(0, 'up'), (2, 'down')])
def test_boundary_move_sends_nothing(awards, backend, index, direction):
    revision = awards.revision

    assert awards.move(index, direction) is False

    assert ids_of(awards.items) == [1, 2, 3]
    assert backend.writes() == []
    assert awards.revision == revision


def test_reorder_by_ids(awards, backend):
    assert awards.reorder([3, 1, 2]) is True
    assert backend.calls_to('POST', '/about-awards/reorder')[0]['json']['items'][0] == {'id': 3, 'sort_order': 1}


def test_reorder_same_order_sends_nothing(awards, backend):
    assert awards.reorder([1, 2, 3]) is False
    assert backend.writes() == []


def test_reorder_rejects_partial_order(awards, backend):
    with pytest.raises(ValueError):
        awards.reorder([1, 2])
    assert backend.writes() == []
    assert ids_of(awards.items) == [1, 2, 3]


# ---------------------------------------------------------------------------
# Rollback
# ---------------------------------------------------------------------------

SERVER_ORDER = [
    {'id': 3, 'title': 'C', 'sort_order': 1},
    {'id': 1, 'title': 'A', 'sort_order': 2},
    {'id': 2, 'title': 'B', 'sort_order': 3},
]


@pytest.mark.parametrize("status,body", [
    (500, {'success': False, 'message': 'Server error'}),
    (422, {'success': False, 'message': 'The items field is invalid.', 'errors': {'items': ['invalid']}}),
    (requests.ConnectionError('connection refused'), None),
])
def test_failed_reorder_rolls_back_to_server_order(awards, backend, status, body):
    backend.on('GET', '/about-awards', body=envelope(SERVER_ORDER))
    backend.on('POST', '/about-awards/reorder', status=status, body=body)

    assert awards.move(1, 'up') is False

    # Whatever the cause, the list equals a fresh fetch
    assert ids_of(awards.items) == [3, 1, 2]
    assert len(backend.calls_to('GET', '/about-awards')) == 2
    assert awards.alert


def test_failure_is_reported_in_to_dict(awards, backend):
    backend.on('POST', '/about-awards/reorder', status=500, body={'success': False, 'message': 'Server error'})

    awards.move(1, 'up')

    data = awards.to_dict()
    assert data['success'] is False
    assert data['error'] == 'Server error'
    assert awards.error_status == 500


def test_next_success_clears_alert(awards, backend):
    backend.on('POST', '/about-awards/reorder', status=500, body={'success': False, 'message': 'Server error'})
    backend.queue('POST', '/about-awards/reorder', body={'success': True})

    awards.move(1, 'up')
    awards.move(1, 'up')

    assert awards.alert is None


def test_unauthenticated_reorder_raises(awards, backend):
    backend.on('POST', '/about-awards/reorder', status=401, body={'message': 'Unauthenticated.'})

    with pytest.raises(AuthenticationRequired):
        awards.move(1, 'up')


# ---------------------------------------------------------------------------
# Concurrency guards
# ---------------------------------------------------------------------------

def test_stale_refresh_does_not_overwrite_newer_local_order(awards):
    fetch = awards.api.list

    def list_while_user_moves(**params):
        result = fetch(**params)
        # A move lands while the GET is in flight
        awards._set_items(ordering.move(awards.items, 0, 'down'))
        return result

    awards.api.list = list_while_user_moves

    assert awards.refresh() is False
    assert ids_of(awards.items) == [2, 1, 3]


def test_lists_of_same_resource_share_mutation_lock(backend, api_client):
    api = ResourceApi(get_resource('about_awards'), api_client)
    first = ReorderableList(api)
    second = ReorderableList(api)

    assert first._mutation_lock is second._mutation_lock
    assert first._mutation_lock is mutation_lock('about_awards')
    assert mutation_lock('menus', 'header') is not mutation_lock('menus', 'footer_col1')


# ---------------------------------------------------------------------------
# Moves from separate requests on one list
# ---------------------------------------------------------------------------

# What the backend holds after the first move below, [A, B, C] -> [B, A, C]
AFTER_FIRST_MOVE = [
    {'id': 2, 'title': 'B', 'sort_order': 1},
    {'id': 1, 'title': 'A', 'sort_order': 2},
    {'id': 3, 'title': 'C', 'sort_order': 3},
]


@pytest.fixture
def two_requests(backend, api_client):
    """Two lists of the same resource, as built by two admin requests."""
    backend.on('GET', '/about-awards', body=envelope(AWARDS))
    backend.queue('GET', '/about-awards', body=envelope(AFTER_FIRST_MOVE))
    backend.on('POST', '/about-awards/reorder', body={'success': True})
    api = ResourceApi(get_resource('about_awards'), api_client)
    return ReorderableList(api), ReorderableList(api)


def test_second_move_starts_from_first_moves_order(two_requests, backend):
    first, second = two_requests

    assert first.move(1, 'up', refresh_first=True) is True
    assert second.move(2, 'up', refresh_first=True) is True

    posts = backend.calls_to('POST', '/about-awards/reorder')
    assert posts[0]['json']['items'] == [
        {'id': 2, 'sort_order': 1}, {'id': 1, 'sort_order': 2}, {'id': 3, 'sort_order': 3}]
    # C moved above A; B keeps the first place the first move gave it
    assert posts[1]['json']['items'] == [
        {'id': 2, 'sort_order': 1}, {'id': 3, 'sort_order': 2}, {'id': 1, 'sort_order': 3}]


def test_concurrent_move_waits_for_the_one_in_flight(two_requests, backend):
    first, second = two_requests
    first_posting = threading.Event()
    release = threading.Event()
    serve = backend.request

    def hold_first_post(method, url, **kwargs):
        if method == 'POST' and not first_posting.is_set():
            first_posting.set()
            release.wait(5)
        return serve(method, url, **kwargs)

    backend.request = hold_first_post
    first_thread = threading.Thread(target=first.move, args=(1, 'up'), kwargs={'refresh_first': True})
    second_thread = threading.Thread(target=second.move, args=(2, 'up'), kwargs={'refresh_first': True})

    first_thread.start()
    try:
        assert first_posting.wait(5)
        second_thread.start()
        second_thread.join(0.2)

        # The second request has not even fetched while the first is persisting
        assert second_thread.is_alive()
        assert len(backend.calls_to('GET', '/about-awards')) == 1
    finally:
        release.set()
        first_thread.join(5)
        second_thread.join(5)

    assert ids_of(second.items) == [2, 3, 1]
    assert backend.calls_to('POST', '/about-awards/reorder')[1]['json']['items'][0] == {'id': 2, 'sort_order': 1}


def test_refresh_first_failure_sends_nothing(backend, api_client):
    backend.on('GET', '/about-awards', status=500, body={'success': False, 'message': 'Server error'})
    awards = ReorderableList(ResourceApi(get_resource('about_awards'), api_client))

    assert awards.move(1, 'up', refresh_first=True) is False

    assert backend.writes() == []
    assert awards.alert == 'Could not load the list'
    assert awards.error_status == 502


def test_reorder_accepts_string_ids(awards, backend):
    assert awards.reorder(['3', '1', '2']) is True
    assert ids_of(awards.items) == [3, 1, 2]
    assert backend.calls_to('POST', '/about-awards/reorder')[0]['json']['items'][0] == {'id': 3, 'sort_order': 1}
