"""
RBAC (group-based access control) application.

Provides:
- Users, groups, dot-path permissions and permission-gated menus
- Effective permission resolution with lexical-ancestor normalization
- Per-user cached permission sets and menu trees with signal-driven invalidation
- Permission-filtered navigation menu trees
"""
