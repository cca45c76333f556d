"""Effective permissions: a role's own codes plus everything inherited.

Provides:
- ``get_effective_permissions()``: own + ancestor permissions of one role.
- ``live_roles()``: resolve non-expired assignments to their roles.
- ``collect_permissions()``: union of effective permissions over many roles.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Iterator, Optional, Sequence

from .models import Role, UserRole


def get_effective_permissions(role: Role, all_roles: Sequence[Role]) -> frozenset[str]:
    """Expand a role's permissions through its parent chain.

    Every role is expanded at most once; a cyclic parent chain stops at the
    first revisit and keeps what was collected so far. A dangling
    ``parent_role_id`` ends the chain.

    Args:
        role: Role to expand.
        all_roles: Every known role, used to resolve parents.

    Returns:
        Frozenset of permission codes.

    Example::

        base = Role(id="b", name="Base", code="base", scope="global", permissions=["tanks.read"])
        child = Role(id="c", name="Child", code="child", scope="global", parent_role_id="b")
        get_effective_permissions(child, [base, child])  # frozenset({"tanks.read"})
    """
    by_id = {r.id: r for r in all_roles}
    permissions: set[str] = set()
    visited: set[str] = set()

    current: Optional[Role] = role
    while current is not None and current.id not in visited:
        visited.add(current.id)
        permissions.update(current.permissions)
        parent_id = current.parent_role_id
        current = by_id.get(parent_id) if parent_id else None

    return frozenset(permissions)


def live_roles(
    user_roles: Iterable[UserRole],
    roles: Sequence[Role],
    *,
    now: Optional[datetime] = None,
) -> Iterator[tuple[UserRole, Role]]:
    """Yield ``(assignment, role)`` for assignments that are live and resolvable.

    Expired assignments and dangling role ids are skipped silently.
    """
    by_id = {r.id: r for r in roles}
    for assignment in user_roles:
        role = by_id.get(assignment.role_id)
        if role is None:
            continue
        if assignment.is_expired(now=now):
            continue
        yield assignment, role


def collect_permissions(role_list: Iterable[Role], all_roles: Sequence[Role]) -> frozenset[str]:
    """Union of effective permissions over ``role_list``."""
    combined: set[str] = set()
    for role in role_list:
        combined |= get_effective_permissions(role, all_roles)
    return frozenset(combined)


__all__ = [
    "collect_permissions",
    "get_effective_permissions",
    "live_roles",
]
