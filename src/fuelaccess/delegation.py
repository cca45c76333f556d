"""Delegation guard: may one user grant a role to another.

No one may delegate a role that grants more than their own effective
permissions, and only users who may edit users at the target scope may
delegate at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .access import check_access
from .permissions.constants import Permissions
from .permissions.matching import has_permission, has_universal
from .roles.inheritance import collect_permissions, get_effective_permissions, live_roles
from .roles.models import AccessScope, Role, UserRole


@dataclass(frozen=True)
class AssignDecision:
    can_assign: bool
    reason: str

    def __bool__(self) -> bool:
        return self.can_assign


def can_assign_role(
    assigner_roles: Sequence[UserRole],
    roles: Sequence[Role],
    role_to_assign: Role,
    target_scope: AccessScope,
    *,
    now: Optional[datetime] = None,
) -> AssignDecision:
    """Decide whether the assigner may grant ``role_to_assign`` at ``target_scope``.

    Checks in order:
    1. ``system.admin`` or ``*`` among the assigner's effective permissions
       grants unconditionally.
    2. The assigner must hold ``users.update`` at ``target_scope``.
    3. Every effective permission of ``role_to_assign`` must be covered by the
       union of the assigner's effective permissions (wildcards held by the
       assigner cover narrower codes).

    Expired assigner assignments contribute nothing.
    """
    assigner_role_list = [role for _, role in live_roles(assigner_roles, roles, now=now)]
    assigner_permissions = collect_permissions(assigner_role_list, roles)

    if has_universal(assigner_permissions):
        return AssignDecision(True, "System administrator privileges")

    manage = check_access(assigner_roles, roles, Permissions.USERS_UPDATE, target_scope, now=now)
    if not manage.has_access:
        return AssignDecision(False, "Insufficient permissions to manage users")

    wanted = get_effective_permissions(role_to_assign, roles)
    if not all(has_permission(assigner_permissions, code) for code in wanted):
        return AssignDecision(False, "Cannot assign role with higher privileges than own")

    return AssignDecision(True, "Sufficient permissions to assign role")


__all__ = [
    "AssignDecision",
    "can_assign_role",
]
