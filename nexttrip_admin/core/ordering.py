"""
Ordering helpers
================

Pure list/tree operations behind the reorderable admin lists:

- move(): swap an item with its neighbour (up/down arrows)
- apply_order(): rearrange a list to an explicit id order (drag & drop)
- reorder_payload(): the [{id, sort_order}] body sent to /reorder
- flatten()/unflatten()/drop(): the two-level site menu tree

Nothing here talks to the network; see core/reorder.py for the
optimistic update + rollback flow built on top of these.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

UP = 'up'
DOWN = 'down'
DIRECTIONS = (UP, DOWN)

# Every reorder payload is 1-based (sort_order = index + 1)
POSITION_BASE = 1

CHILDREN_KEY = 'all_children'


class MenuTreeError(ValueError):
    """A drop that would break the two-level menu structure."""


# ===== Flat lists =====

def neighbour_index(index: int, direction: str, length: int) -> Optional[int]:
    """Index to swap with, or None when the move would leave the list."""
    if direction not in DIRECTIONS:
        raise ValueError(f"Invalid direction: {direction!r}")
    if not 0 <= index < length:
        raise IndexError(f"Index {index} out of range for list of {length}")
    target = index - 1 if direction == UP else index + 1
    if target < 0 or target >= length:
        return None
    return target


def move(items: Sequence[Any], index: int, direction: str) -> List[Any]:
    """
    Swap items[index] with its neighbour in the given direction.

    Returns a new list. Moving the first item up or the last item down
    returns an unchanged copy.
    """
    new_items = list(items)
    target = neighbour_index(index, direction, len(new_items))
    if target is None:
        return new_items
    new_items[index], new_items[target] = new_items[target], new_items[index]
    return new_items


def id_key(value: Any) -> str:
    """
    Comparable form of an item id. JSON clients may send 7 or "7" for the
    same row; both match. Containers are never ids.
    """
    if isinstance(value, (dict, list, tuple, set)):
        raise ValueError(f"Invalid id: {value!r}")
    return str(value)


def apply_order(items: Sequence[Dict[str, Any]], ids: Iterable[Any],
                id_field: str = 'id') -> List[Dict[str, Any]]:
    """Rearrange items to follow ids; ids must be a permutation of the item ids."""
    keys = [id_key(item_id) for item_id in ids]
    by_key = {id_key(item[id_field]): item for item in items}
    if len(keys) != len(by_key) or set(keys) != set(by_key):
        raise ValueError("Order must list every item exactly once")
    return [by_key[key] for key in keys]


def reorder_payload(items: Sequence[Dict[str, Any]], id_field: str = 'id',
                    extra_fields: Sequence[str] = ()) -> List[Dict[str, Any]]:
    """One {id, sort_order} entry per item, positions following list order."""
    payload = []
    for position, item in enumerate(items, start=POSITION_BASE):
        entry = {'id': item[id_field], 'sort_order': position}
        for name in extra_fields:
            entry[name] = item.get(name)
        payload.append(entry)
    return payload


def with_positions(items: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copies of items with sort_order matching their list position."""
    return [dict(item, sort_order=position)
            for position, item in enumerate(items, start=POSITION_BASE)]


# ===== Menu tree =====

def flatten(tree: Sequence[Dict[str, Any]], children_key: str = CHILDREN_KEY) -> List[Dict[str, Any]]:
    """Pre-order walk: each root followed by its children, in display order."""
    flat = []
    for node in tree:
        flat.append(node)
        children = node.get(children_key) or []
        if children:
            flat.extend(flatten(children, children_key))
    return flat


def unflatten(flat: Sequence[Dict[str, Any]], children_key: str = CHILDREN_KEY) -> List[Dict[str, Any]]:
    """
    Rebuild the two-level tree from a flat sequence using parent_id.

    Roots keep their order of appearance; children are grouped under
    their parent in order of appearance. A child whose parent is not in
    the sequence is promoted to root.
    """
    ids = {node['id'] for node in flat}
    roots = []
    copies = {}
    children: Dict[Any, List[Dict[str, Any]]] = {}

    for node in flat:
        copy = {k: v for k, v in node.items() if k != children_key}
        copies[node['id']] = (copy, children_key in node)
        parent_id = node.get('parent_id')
        if parent_id is not None and parent_id in ids:
            children.setdefault(parent_id, []).append(copy)
            if children_key in node:
                copy[children_key] = []
        else:
            roots.append(copy)

    for root in roots:
        had_key = copies[root['id']][1]
        kids = children.get(root['id'], [])
        if kids or had_key:
            root[children_key] = kids
    return roots


def move_in_flat(flat: Sequence[Dict[str, Any]], from_index: int, to_index: int) -> List[Dict[str, Any]]:
    """Remove the node at from_index and reinsert it at to_index."""
    new_flat = list(flat)
    node = new_flat.pop(from_index)
    new_flat.insert(to_index, node)
    return new_flat


def find_index(flat: Sequence[Dict[str, Any]], node_id: Any) -> int:
    key = id_key(node_id)
    for index, node in enumerate(flat):
        if id_key(node['id']) == key:
            return index
    return -1


def drop(tree: List[Dict[str, Any]], dragged_id: Any, target_id: Any,
         children_key: str = CHILDREN_KEY) -> List[Dict[str, Any]]:
    """
    Drag-and-drop of one menu node onto another.

    The dragged node takes the target's place in the flattened sequence
    (landing after the target when dragged downward, before it when
    dragged upward) and joins the target's level: its parent_id becomes
    the target's parent_id. A node with children cannot be dropped onto
    a child row because menus are at most two levels deep.

    Returns the regrouped tree with sort_order set to the new 1-based
    flattened positions, or the input tree itself when the drop is a no-op.
    """
    if id_key(dragged_id) == id_key(target_id):
        return tree

    flat = flatten(tree, children_key)
    drag_index = find_index(flat, dragged_id)
    drop_index = find_index(flat, target_id)
    if drag_index == -1 or drop_index == -1:
        return tree

    dragged = flat[drag_index]
    target = flat[drop_index]
    new_parent = target.get('parent_id')

    if new_parent is not None and dragged.get(children_key):
        raise MenuTreeError("A menu with sub-menus cannot be moved under another menu")

    flat = move_in_flat(flat, drag_index, drop_index)
    flat[drop_index] = dict(dragged, parent_id=new_parent)

    regrouped = unflatten(flat, children_key)
    return _number_tree(regrouped, children_key)


def _number_tree(tree, children_key):
    position = POSITION_BASE
    numbered = []
    for root in tree:
        root = dict(root, sort_order=position)
        position += 1
        if root.get(children_key):
            kids = []
            for child in root[children_key]:
                kids.append(dict(child, sort_order=position))
                position += 1
            root[children_key] = kids
        numbered.append(root)
    return numbered


def menu_reorder_payload(tree: Sequence[Dict[str, Any]],
                         children_key: str = CHILDREN_KEY) -> List[Dict[str, Any]]:
    """Flattened {id, sort_order, parent_id} entries for POST /menus/reorder."""
    return reorder_payload(flatten(tree, children_key), extra_fields=('parent_id',))
