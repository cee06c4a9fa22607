"""
Tests for the permission hierarchy rules.
"""
from hypothesis import given, strategies as st

from apps.rbac.hierarchy import (
    build_permission_display_tree,
    is_effective,
    lexical_ancestors,
    normalize_permissions,
)

segments = st.text(alphabet='abcdefgh_', min_size=1, max_size=4)
codes = st.lists(segments, min_size=1, max_size=4).map('.'.join)


class TestLexicalAncestors:
    """Test dot-prefix computation."""

    def test_three_levels(self):
        assert lexical_ancestors('a.b.c') == ['a', 'a.b']

    def test_single_segment_has_no_ancestors(self):
        assert lexical_ancestors('dashboard') == []

    @given(codes)
    def test_ancestors_are_proper_prefixes(self, code):
        ancestors = lexical_ancestors(code)
        assert len(ancestors) == code.count('.')
        for ancestor in ancestors:
            assert code.startswith(ancestor + '.')


class TestNormalizePermissions:
    """Test effective permission normalization."""

    def test_keeps_fully_rooted_codes(self):
        assert normalize_permissions({'users', 'users.view'}) == {'users', 'users.view'}

    def test_drops_code_missing_its_root(self):
        assert normalize_permissions({'users.view'}) == set()

    def test_every_level_is_checked(self):
        """a.b.c needs a even when a.b is granted."""
        assert normalize_permissions({'a.b', 'a.b.c'}) == set()

    def test_missing_middle_level(self):
        assert normalize_permissions({'a', 'a.b.c'}) == {'a'}

    def test_empty(self):
        assert normalize_permissions([]) == set()

    def test_is_effective_uses_granted_set_only(self):
        assert is_effective('a.b', {'a'}) is True
        assert is_effective('a.b', {'a.b'}) is False

    @given(st.sets(codes, max_size=12))
    def test_result_is_subset_of_input(self, granted):
        assert normalize_permissions(granted) <= granted

    @given(st.sets(codes, max_size=12))
    def test_result_is_closed_under_ancestors(self, granted):
        effective = normalize_permissions(granted)
        for code in effective:
            for ancestor in lexical_ancestors(code):
                assert ancestor in effective

    @given(st.sets(codes, max_size=12))
    def test_idempotent(self, granted):
        once = normalize_permissions(granted)
        assert normalize_permissions(once) == once

    @given(st.sets(codes, max_size=12), codes)
    def test_monotonic_in_grants(self, granted, extra):
        assert normalize_permissions(granted) <= normalize_permissions(granted | {extra})


class TestPermissionDisplayTree:
    """Test the parent_code display tree."""

    def test_nests_by_parent_code(self):
        tree = build_permission_display_tree([
            {'code': 'users', 'parent_code': None},
            {'code': 'users.view', 'parent_code': 'users'},
        ])

        assert len(tree) == 1
        assert tree[0]['code'] == 'users'
        assert [child['code'] for child in tree[0]['children']] == ['users.view']
        assert 'parent_code' not in tree[0]['children'][0]

    def test_ignores_dot_path(self):
        """The display parent may disagree with the lexical hierarchy."""
        tree = build_permission_display_tree([
            {'code': 'meetings', 'parent_code': None},
            {'code': 'dashboard.meetings', 'parent_code': 'meetings'},
        ])

        assert [node['code'] for node in tree] == ['meetings']
        assert tree[0]['children'][0]['code'] == 'dashboard.meetings'

    def test_unknown_parent_becomes_root(self):
        tree = build_permission_display_tree([
            {'code': 'audit.view', 'parent_code': 'audit'},
        ])

        assert [node['code'] for node in tree] == ['audit.view']

    def test_self_parent_becomes_root(self):
        tree = build_permission_display_tree([{'code': 'x', 'parent_code': 'x'}])

        assert [node['code'] for node in tree] == ['x']
        assert tree[0]['children'] == []

    def test_preserves_input_order(self):
        tree = build_permission_display_tree([
            {'code': 'b', 'parent_code': None},
            {'code': 'a', 'parent_code': None},
        ])

        assert [node['code'] for node in tree] == ['b', 'a']

    def test_extra_fields_kept(self):
        tree = build_permission_display_tree([
            {'code': 'users', 'parent_code': None, 'name': 'User Management', 'is_active': True},
        ])

        assert tree[0]['name'] == 'User Management'
        assert tree[0]['is_active'] is True
