"""
Admin View Helpers
==================

Shared pieces for the module blueprints:

- admin_required: rejects requests without a backend token (401 JSON)
- screen_for / list_for: build a screen controller for a resource
- register_resource_routes: the standard JSON CRUD + reorder routes
- screen_response / list_response: screen state -> (json, status)
"""

from functools import wraps

from flask import current_app, jsonify, request

from .api_client import SessionAuth
from .config import get_config_value
from .ordering import MenuTreeError
from .reorder import MenuTreeList, ReorderableList
from .resources import ResourceApi, get_resource
from .screens import CrudScreen, ScreenStatus, SettingsScreen


DEFAULT_MENU_LOCATION = 'header'


def login_url():
    return get_config_value('NEXTTRIP_LOGIN_URL', '/login')


def auth_required_response():
    return jsonify({
        'success': False,
        'error': 'Authentication required',
        'login_url': login_url(),
    }), 401


def admin_required(f):
    """Decorator to require a backend token (session or service token)"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not SessionAuth().get_token():
            return auth_required_response()
        return f(*args, **kwargs)
    return decorated_function


def get_api_client():
    """API client for the current request, built by the NextTripAdmin extension"""
    return current_app.extensions['nexttrip_admin'].make_client()


def resource_api(key):
    return ResourceApi(get_resource(key), get_api_client())


def screen_for(key, **params):
    api = resource_api(key)
    if api.spec.singleton:
        return SettingsScreen(api, params)
    return CrudScreen(api, params)


def list_for(key, scope=None, **params):
    api = resource_api(key)
    if key == 'menus':
        scope = scope or DEFAULT_MENU_LOCATION
        return MenuTreeList(api, scope=scope, params=params)
    return ReorderableList(api, scope=scope, params=params)


def error_code(status):
    """HTTP status for a failed backend call: 4xx passes through, the rest is a bad gateway."""
    if status and 400 <= status < 500:
        return status
    return 502


def screen_response(screen, ok=True, created=False):
    data = screen.to_dict()
    if screen.pending_confirmation:
        return jsonify(data), 409
    if not ok:
        data['success'] = False
        data.setdefault('error', f"Could not load {screen.spec.label.lower()}")
        return jsonify(data), error_code(screen.error_status)
    return jsonify(data), 201 if created else 200


def action_response(screen, result):
    """Response for CrudScreen.run_action(): the endpoint's data, or the recorded failure."""
    if result is None:
        return screen_response(screen, ok=False)
    data = {'success': True, 'data': result.data}
    if result.meta:
        data['meta'] = result.meta
    if result.message:
        data['message'] = result.message
    return jsonify(data)


def list_response(items_list, persisted):
    data = items_list.to_dict()
    if items_list.alert:
        return jsonify(data), error_code(items_list.error_status)
    data['changed'] = persisted
    return jsonify(data), 200


def json_body():
    return request.get_json(silent=True) or {}


def _is_confirmed():
    value = request.args.get('confirm') or json_body().get('confirm')
    return str(value).lower() in ('1', 'true', 'yes')


def _uploaded_file():
    if 'image' in request.files:
        return request.files['image']
    if request.files:
        return next(iter(request.files.values()))
    return None


def register_resource_routes(bp, key, slug=None):
    """
    Attach the standard admin JSON routes for one resource to a blueprint.

    Lists:      GET/POST /api/<slug>, GET/PUT/DELETE /api/<slug>/<id>,
                PATCH /api/<slug>/<id>/toggle, POST/DELETE /api/<slug>/<id>/upload,
                POST /api/<slug>/move, POST /api/<slug>/reorder
    Singletons: GET/PUT /api/<slug>, POST/DELETE /api/<slug>/upload

    Only the routes for operations the resource supports are added.
    """
    spec = get_resource(key)
    slug = slug or key.replace('_', '-')
    base = f'/api/{slug}'
    item = f'{base}/<item_id>' if spec.slug_ids else f'{base}/<int:item_id>'

    def add(rule, name, view, methods):
        bp.add_url_rule(rule, f'{key}_{name}', admin_required(view), methods=methods)

    if spec.singleton:
        _register_settings_routes(add, key, spec, base)
        return

    if spec.supports('list'):
        def list_items():
            screen = screen_for(key)
            screen.load(**request.args.to_dict())
            return screen_response(screen, screen.status == ScreenStatus.SUCCESS)
        add(base, 'list', list_items, ['GET'])

    if spec.supports('create'):
        def create_item():
            screen = screen_for(key, **request.args.to_dict())
            ok = screen.submit(json_body())
            return screen_response(screen, ok, created=ok)
        add(base, 'create', create_item, ['POST'])

    if spec.supports('get'):
        def get_item(item_id):
            screen = screen_for(key)
            found = screen.get(item_id)
            if found is None:
                return screen_response(screen, ok=False)
            return jsonify({'success': True, 'data': found})
        add(item, 'get', get_item, ['GET'])

    if spec.supports('update'):
        def update_item(item_id):
            screen = screen_for(key, **request.args.to_dict())
            ok = screen.submit(json_body(), item_id)
            return screen_response(screen, ok)
        add(item, 'update', update_item, ['PUT'])

    if spec.supports('delete'):
        def delete_item(item_id):
            screen = screen_for(key, **request.args.to_dict())
            if key == 'menus':
                screen.load()
            ok = screen.delete(item_id, confirmed=_is_confirmed())
            return screen_response(screen, ok)
        add(item, 'delete', delete_item, ['DELETE'])

    if spec.supports('toggle'):
        def toggle_item(item_id):
            screen = screen_for(key, **request.args.to_dict())
            ok = screen.toggle(item_id)
            return screen_response(screen, ok)
        add(f'{item}/toggle', 'toggle', toggle_item, ['PATCH'])

    if spec.supports('upload'):
        def upload_item_image(item_id):
            file = _uploaded_file()
            if file is None or not file.filename:
                return jsonify({'success': False, 'error': 'No image file provided'}), 400
            screen = screen_for(key, **request.args.to_dict())
            ok = screen.upload_image(item_id, file)
            return screen_response(screen, ok)
        add(f'{item}/upload', 'upload', upload_item_image, ['POST'])

        def delete_item_image(item_id):
            screen = screen_for(key, **request.args.to_dict())
            ok = screen.remove_image(item_id)
            return screen_response(screen, ok)
        add(f'{item}/upload', 'delete_upload', delete_item_image, ['DELETE'])

    if spec.reorderable:
        def move_item():
            data = json_body()
            try:
                index = int(data.get('index', -1))
            except (TypeError, ValueError):
                return jsonify({'success': False, 'error': 'index must be a number'}), 400
            items_list = list_for(key, scope=data.get('scope') or request.args.get('scope'))
            try:
                moved = items_list.move(index, data.get('direction'), refresh_first=True)
            except (ValueError, IndexError) as e:
                return jsonify({'success': False, 'error': str(e)}), 400
            return list_response(items_list, moved)
        add(f'{base}/move', 'move', move_item, ['POST'])

        def reorder_items():
            data = json_body()
            order = data.get('order')
            if not order or not isinstance(order, list):
                return jsonify({'success': False, 'error': 'Order list required'}), 400
            items_list = list_for(key, scope=data.get('scope') or request.args.get('scope'))
            try:
                changed = items_list.reorder(order, refresh_first=True)
            except (TypeError, ValueError) as e:
                return jsonify({'success': False, 'error': str(e)}), 400
            return list_response(items_list, changed)
        add(f'{base}/reorder', 'reorder', reorder_items, ['POST'])


def _register_settings_routes(add, key, spec, base):
    def get_settings():
        screen = screen_for(key)
        screen.load()
        return screen_response(screen, screen.status == ScreenStatus.SUCCESS)
    add(base, 'get', get_settings, ['GET'])

    def update_settings():
        screen = screen_for(key)
        ok = screen.save(json_body())
        return screen_response(screen, ok)
    add(base, 'update', update_settings, ['PUT'])

    if spec.supports('upload'):
        def upload_settings_image():
            path = request.args.get('path')
            if not spec.allows_upload_path(path):
                return jsonify({'success': False, 'error': f"Unknown image slot: {path}"}), 400
            file = _uploaded_file()
            if file is None or not file.filename:
                return jsonify({'success': False, 'error': 'No image file provided'}), 400
            screen = screen_for(key)
            ok = screen.upload_image(None, file, path)
            return screen_response(screen, ok)
        add(f'{base}/upload', 'upload', upload_settings_image, ['POST'])

        def delete_settings_image():
            path = request.args.get('path')
            if not spec.allows_upload_path(path):
                return jsonify({'success': False, 'error': f"Unknown image slot: {path}"}), 400
            screen = screen_for(key)
            ok = screen.remove_image(None, path)
            return screen_response(screen, ok)
        add(f'{base}/upload', 'delete_upload', delete_settings_image, ['DELETE'])


def menu_tree_error_response(error: MenuTreeError):
    return jsonify({'success': False, 'error': str(error)}), 400
