"""Permission vocabulary and matching.

Defines:
- Permissions: built-in permission string constants (resource.action format)
- PermissionAction / RoleScope: action vocabulary and role breadth levels
- PermissionCatalog: read-only permission table injected into validation
- parse_grant() / has_permission(): held-side wildcard matching
"""

from .catalog import (
    DEFAULT_PERMISSION_CATALOG,
    DEFAULT_PERMISSIONS,
    Permission,
    PermissionCatalog,
)
from .constants import UNIVERSAL_PERMISSIONS, PermissionAction, Permissions, RoleScope, is_wildcard
from .matching import (
    GrantKind,
    PermissionGrant,
    has_permission,
    has_universal,
    parse_grant,
    permission_matches,
)

__all__ = [
    "DEFAULT_PERMISSIONS",
    "DEFAULT_PERMISSION_CATALOG",
    "GrantKind",
    "Permission",
    "PermissionAction",
    "PermissionCatalog",
    "PermissionGrant",
    "Permissions",
    "RoleScope",
    "UNIVERSAL_PERMISSIONS",
    "has_permission",
    "has_universal",
    "is_wildcard",
    "parse_grant",
    "permission_matches",
]
