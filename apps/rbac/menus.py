"""
Permission-filtered navigation menu trees.
"""
from typing import Dict, Iterable, List, Optional, Set

from apps.rbac.stores import MenuRecord


def promotes_to_root(parent_id: Optional[str], visible: Dict[str, dict]) -> bool:
    """
    Orphaned-but-visible nodes become roots.

    A node sits at the root level when it has no parent menu or when its
    parent was filtered out. Visibility depends only on the node's own
    permission, never on its ancestors'.
    """
    return parent_id is None or parent_id not in visible


def _sort_siblings(nodes: List[dict]) -> List[dict]:
    # sorted() is stable, so equal orders keep their storage order
    nodes = sorted(nodes, key=lambda node: node['order'])
    for node in nodes:
        node['children'] = _sort_siblings(node['children'])
    return nodes


def build_menu_tree(menus: Iterable[MenuRecord], allowed: Set[str]) -> List[dict]:
    """
    Build the ordered menu forest a holder of ``allowed`` may see.

    Args:
        menus: Active menus in storage order.
        allowed: Effective permission codes of the viewer.

    Returns:
        Root nodes sorted by ``order``, each a dict with ``id``, ``name``,
        ``path``, ``icon``, ``order``, ``permission_code`` and ``children``.
    """
    visible: Dict[str, dict] = {}
    parents: Dict[str, Optional[str]] = {}
    for menu in menus:
        if menu.permission_code not in allowed:
            continue
        visible[menu.id] = {
            'id': menu.id,
            'name': menu.name,
            'path': menu.path,
            'icon': menu.icon,
            'order': menu.order,
            'permission_code': menu.permission_code,
            'children': [],
        }
        parents[menu.id] = menu.parent_id

    roots = []
    for menu_id, node in visible.items():
        parent_id = parents[menu_id]
        if promotes_to_root(parent_id, visible):
            roots.append(node)
        else:
            visible[parent_id]['children'].append(node)

    return _sort_siblings(roots)
