"""
Resource Catalogue
==================

Declarative description of every backend resource the admin manages,
plus ResourceApi, the generic list/get/create/update/delete/toggle/
upload/reorder wrapper used by all screens.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .api_client import ApiClient, Success

ALL_OPS = ('list', 'get', 'create', 'update', 'delete', 'toggle', 'upload', 'reorder')


@dataclass(frozen=True)
class ResourceSpec:
    """How one backend resource is addressed and validated."""
    key: str
    endpoint: str
    label: str
    required: Tuple[str, ...] = ()
    # Required only when creating (e.g. a user's password)
    required_on_create: Tuple[str, ...] = ()
    # field -> exact string length (country ISO codes)
    exact_lengths: Tuple[Tuple[str, int], ...] = ()
    ops: Tuple[str, ...] = ('list', 'get', 'create', 'update', 'delete')
    reorder_key: str = 'items'
    upload_path: Optional[str] = None
    # Further image slots on the same item (about page license image)
    extra_upload_paths: Tuple[str, ...] = ()
    toggle_path: Optional[str] = None
    # Field flipped through update() when the backend has no toggle endpoint
    toggle_field: str = 'is_active'
    # Fields left out of the request body when blank (keeps stored secrets)
    omit_blank: Tuple[str, ...] = ()
    list_filters: Tuple[str, ...] = ()
    scope_param: Optional[str] = None
    paginated: bool = False
    slug_ids: bool = False
    singleton: bool = False
    validator: Optional[Callable[[Dict[str, Any], bool], Dict[str, List[str]]]] = field(
        default=None, compare=False)

    def supports(self, op):
        return op in self.ops

    @property
    def reorderable(self):
        return 'reorder' in self.ops

    def allows_upload_path(self, path):
        return path is None or path == self.upload_path or path in self.extra_upload_paths


def _is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def drop_blank_fields(spec: ResourceSpec, fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if not (k in spec.omit_blank and _is_blank(v))}


def validate_fields(spec: ResourceSpec, fields: Dict[str, Any], creating: bool) -> Dict[str, List[str]]:
    """
    Client-side checks run before anything is sent to the backend.

    Returns:
        field -> list of messages (empty dict when the form is valid)
    """
    errors: Dict[str, List[str]] = {}

    required = list(spec.required)
    if creating:
        required.extend(spec.required_on_create)

    for name in required:
        if _is_blank(fields.get(name)):
            errors.setdefault(name, []).append(f"{name.replace('_', ' ').capitalize()} is required")

    for name, length in spec.exact_lengths:
        value = fields.get(name)
        if name in errors or value is None:
            continue
        if len(str(value).strip()) != length:
            errors.setdefault(name, []).append(
                f"{name.replace('_', ' ').capitalize()} must be exactly {length} characters")

    if spec.validator:
        for name, messages in spec.validator(fields, creating).items():
            errors.setdefault(name, []).extend(messages)

    return errors


def _validate_user(fields, creating):
    errors = {}
    password = fields.get('password')
    if password and password != fields.get('password_confirmation'):
        errors['password_confirmation'] = ['Password confirmation does not match']
    if password and len(password) < 8:
        errors['password'] = ['Password must be at least 8 characters']
    return errors


# ===== Resource catalogue =====

RESOURCES: Dict[str, ResourceSpec] = {spec.key: spec for spec in (
    # Destinations
    ResourceSpec('countries', '/countries', 'Countries',
                 required=('iso2', 'iso3', 'name_en'),
                 exact_lengths=(('iso2', 2), ('iso3', 3)),
                 ops=('list', 'get', 'create', 'update', 'delete', 'toggle'),
                 toggle_path='toggle-status',
                 list_filters=('search', 'region', 'is_active', 'page', 'per_page')),
    ResourceSpec('cities', '/cities', 'Cities',
                 required=('name_en', 'country_id'),
                 ops=('list', 'get', 'create', 'update', 'delete', 'toggle'),
                 toggle_path='toggle-status',
                 list_filters=('search', 'country_id', 'is_popular', 'is_active', 'page', 'per_page')),

    # Transports and suppliers
    ResourceSpec('transports', '/transports', 'Transports',
                 required=('code', 'name'),
                 ops=('list', 'get', 'create', 'update', 'delete', 'toggle'),
                 toggle_path='toggle-status',
                 list_filters=('search', 'type', 'status', 'page', 'per_page')),
    ResourceSpec('wholesalers', '/wholesalers', 'Wholesalers',
                 required=('code', 'name'),
                 ops=('list', 'get', 'create', 'update', 'delete', 'toggle'),
                 toggle_path='toggle-active',
                 list_filters=('search', 'is_active')),

    # Back-office users
    ResourceSpec('users', '/users', 'Users',
                 required=('name', 'email'),
                 required_on_create=('password',),
                 omit_blank=('password', 'password_confirmation'),
                 list_filters=('search', 'role', 'is_active', 'page', 'per_page'),
                 paginated=True,
                 validator=_validate_user),

    # Blog
    ResourceSpec('blog_categories', '/blog-categories', 'Blog categories',
                 required=('name',),
                 ops=('list', 'create', 'update', 'delete', 'reorder')),
    ResourceSpec('blog_posts', '/blog-posts', 'Blog posts',
                 required=('title',),
                 ops=('list', 'get', 'create', 'update', 'delete', 'upload'),
                 upload_path='cover-image',
                 list_filters=('status', 'category_id', 'search', 'page'),
                 paginated=True),
    ResourceSpec('blog_settings', '/blog-settings', 'Blog page settings',
                 ops=('get', 'update', 'upload'),
                 upload_path='hero-image',
                 singleton=True),

    # About Us page
    ResourceSpec('about_settings', '/about-settings', 'About page settings',
                 ops=('get', 'update', 'upload'),
                 upload_path='hero-image',
                 extra_upload_paths=('license-image',),
                 singleton=True),
    ResourceSpec('about_associations', '/about-associations', 'Associations',
                 required=('name',),
                 ops=('list', 'create', 'update', 'delete', 'upload', 'reorder'),
                 upload_path='logo'),
    ResourceSpec('about_services', '/about-services', 'Services',
                 required=('title',),
                 ops=('list', 'create', 'update', 'delete', 'reorder')),
    ResourceSpec('about_customer_groups', '/about-customer-groups', 'Customer groups',
                 required=('title',),
                 ops=('list', 'create', 'update', 'delete', 'upload', 'reorder'),
                 upload_path='image'),
    ResourceSpec('about_awards', '/about-awards', 'Awards',
                 required=('title',),
                 ops=('list', 'create', 'update', 'delete', 'upload', 'reorder'),
                 upload_path='image'),

    # Website
    ResourceSpec('menus', '/menus', 'Menus',
                 required=('title',),
                 ops=('list', 'get', 'create', 'update', 'delete', 'toggle', 'reorder'),
                 reorder_key='menus',
                 toggle_path='toggle-status',
                 list_filters=('location',),
                 scope_param='location'),
    ResourceSpec('seo', '/seo', 'SEO settings',
                 ops=('list', 'get', 'update', 'upload'),
                 upload_path='og-image',
                 slug_ids=True),
    ResourceSpec('site_contacts', '/site-contacts', 'Site contacts',
                 required=('key', 'label', 'value'),
                 ops=('list', 'create', 'update', 'delete', 'toggle'),
                 toggle_path='toggle',
                 list_filters=('group',)),

    # Member points
    # Programme-wide endpoints (/member-points/stats); no CRUD of its own
    ResourceSpec('member_points', '/member-points', 'Member points', ops=()),
    ResourceSpec('member_levels', '/member-points/levels', 'Member levels',
                 required=('name', 'slug'),
                 ops=('list', 'create', 'update', 'delete')),
    ResourceSpec('member_rules', '/member-points/rules', 'Point rules',
                 ops=('list', 'update', 'toggle')),
    ResourceSpec('members', '/member-points/members', 'Members',
                 ops=('list', 'get'),
                 list_filters=('search', 'level_id', 'page', 'per_page'),
                 paginated=True),

    # OTP / SMS
    ResourceSpec('otp_settings', '/settings/otp', 'OTP settings',
                 required=('endpoint',),
                 omit_blank=('api_key', 'api_secret'),
                 ops=('get', 'update'),
                 singleton=True),
)}


def get_resource(key: str) -> ResourceSpec:
    try:
        return RESOURCES[key]
    except KeyError:
        raise KeyError(f"Unknown resource: {key}") from None


class ResourceApi:
    """Generic REST operations for one ResourceSpec"""

    def __init__(self, spec: ResourceSpec, client: ApiClient):
        self.spec = spec
        self.client = client

    def _item_path(self, item_id=None, suffix=None):
        path = self.spec.endpoint
        if item_id is not None and not self.spec.singleton:
            path = f"{path}/{item_id}"
        if suffix:
            path = f"{path}/{suffix}"
        return path

    def list(self, **params) -> Success:
        if self.spec.list_filters:
            params = {k: v for k, v in params.items() if k in self.spec.list_filters}
        return self.client.get(self.spec.endpoint, params=params)

    def get(self, item_id=None) -> Success:
        return self.client.get(self._item_path(item_id))

    def create(self, fields) -> Success:
        return self.client.post(self.spec.endpoint, fields)

    def update(self, item_id, fields) -> Success:
        return self.client.put(self._item_path(item_id), fields)

    def delete(self, item_id) -> Success:
        return self.client.delete(self._item_path(item_id))

    def toggle(self, item_id) -> Success:
        return self.client.patch(self._item_path(item_id, self.spec.toggle_path))

    def upload(self, item_id, file, path=None) -> Success:
        return self.client.upload(self._item_path(item_id, path or self.spec.upload_path), file)

    def delete_upload(self, item_id=None, path=None) -> Success:
        return self.client.delete(self._item_path(item_id, path or self.spec.upload_path))

    def reorder(self, entries) -> Success:
        return self.client.post(f"{self.spec.endpoint}/reorder", {self.spec.reorder_key: entries})

    def action(self, method, suffix, item_id=None, body=None, params=None) -> Success:
        """Resource-specific endpoints such as /countries/regions or /members/7/adjust"""
        path = self._item_path(item_id, suffix)
        if method == 'GET':
            return self.client.get(path, params=params)
        return self.client.request(method, path, json=body, params=params)
