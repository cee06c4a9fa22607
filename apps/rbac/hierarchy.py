"""
Permission hierarchy rules.

Two independent hierarchies exist over permission codes:

- The lexical hierarchy, implied by splitting a code on ``.``. It is the
  only hierarchy consulted when computing effective permissions: a code is
  effective only if every dot-prefix of it is also granted.
- The display hierarchy, given by each permission's stored ``parent_code``.
  It only shapes the permission tree shown to administrators and may
  disagree with the lexical one.

Nothing here performs I/O.
"""
from typing import Dict, Iterable, List, Set


def lexical_ancestors(code: str) -> List[str]:
    """
    Return every dot-prefix of ``code``, shortest first.

    ``"a.b.c"`` yields ``["a", "a.b"]``. A code is never its own ancestor,
    so a code without dots has no ancestors.
    """
    parts = code.split('.')
    return ['.'.join(parts[:i]) for i in range(1, len(parts))]


def is_effective(code: str, granted: Set[str]) -> bool:
    """
    True if every lexical ancestor of ``code`` is literally in ``granted``.

    Each level is checked against ``granted`` directly, so ``a.b.c`` is
    rejected when ``a`` is missing even if ``a.b`` is present.
    """
    return all(ancestor in granted for ancestor in lexical_ancestors(code))


def normalize_permissions(codes: Iterable[str]) -> Set[str]:
    """Drop every code whose lexical ancestors are not all granted."""
    granted = set(codes)
    return {code for code in granted if is_effective(code, granted)}


def build_permission_display_tree(permissions: Iterable[dict]) -> List[dict]:
    """
    Nest permissions under their stored ``parent_code``.

    Args:
        permissions: Dicts with at least ``code`` and ``parent_code`` keys,
            in display order.

    Returns:
        Root nodes, each with a ``children`` list. A permission whose
        ``parent_code`` is unset or unknown is a root. The dot-path of the
        code is not consulted.
    """
    nodes: Dict[str, dict] = {}
    ordered = []
    for permission in permissions:
        node = {key: value for key, value in permission.items() if key != 'parent_code'}
        node['children'] = []
        nodes[permission['code']] = node
        ordered.append((permission.get('parent_code'), node))

    roots = []
    for parent_code, node in ordered:
        parent = nodes.get(parent_code) if parent_code else None
        if parent is not None and parent is not node:
            parent['children'].append(node)
        else:
            roots.append(node)
    return roots
