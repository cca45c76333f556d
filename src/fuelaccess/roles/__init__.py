"""Roles, assignments and role administration.

Defines:
- Role / RoleDraft / UserRole / AccessScope: typed records
- RoleRegistry / SYSTEM_ROLE_DEFINITIONS: role storage and built-in roles
- get_effective_permissions(): inheritance through the parent chain
- validate_role(): aggregated validation of role definitions
- build_role_hierarchy(): parent/child tree for display
"""

from .hierarchy import HierarchyNode, build_role_hierarchy, flatten_hierarchy
from .inheritance import collect_permissions, get_effective_permissions, live_roles
from .models import AccessScope, Role, RoleDraft, UserRole
from .registry import SYSTEM_ROLE_DEFINITIONS, RoleRegistry, SystemRoleDefinition, build_system_roles
from .validation import RoleCandidate, ValidationResult, validate_role

__all__ = [
    "AccessScope",
    "HierarchyNode",
    "Role",
    "RoleCandidate",
    "RoleDraft",
    "RoleRegistry",
    "SYSTEM_ROLE_DEFINITIONS",
    "SystemRoleDefinition",
    "UserRole",
    "ValidationResult",
    "build_role_hierarchy",
    "build_system_roles",
    "collect_permissions",
    "flatten_hierarchy",
    "get_effective_permissions",
    "live_roles",
    "validate_role",
]
