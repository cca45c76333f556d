"""Role definition validation.

``validate_role()`` checks a candidate role against the existing ones and a
permission catalog. It never raises and never stops at the first problem:
every violation is collected so a form can show them all at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from ..permissions.catalog import DEFAULT_PERMISSION_CATALOG, PermissionCatalog
from ..permissions.constants import RoleScope
from .models import Role, RoleDraft


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


RoleCandidate = Union[RoleDraft, Role, Mapping[str, Any]]


def _as_draft(candidate: RoleCandidate) -> RoleDraft:
    if isinstance(candidate, RoleDraft):
        return candidate
    if isinstance(candidate, Role):
        return RoleDraft.from_role(candidate)
    return RoleDraft.model_validate(dict(candidate))


def _field_error(err: Mapping[str, Any]) -> str:
    field_name = ".".join(str(part) for part in err["loc"]) or "role"
    return f"Invalid field '{field_name}': {err['msg']}"


def _reaches(start_id: str, target_id: str, roles: Sequence[Role]) -> bool:
    """True if walking parents from ``start_id`` arrives at ``target_id``."""
    parents = {r.id: r.parent_role_id for r in roles}
    visited: set[str] = set()
    current: Optional[str] = start_id
    while current and current not in visited:
        if current == target_id:
            return True
        visited.add(current)
        current = parents.get(current)
    return False


def validate_role(
    candidate: RoleCandidate,
    existing_roles: Sequence[Role],
    *,
    catalog: PermissionCatalog = DEFAULT_PERMISSION_CATALOG,
    role_id: Optional[str] = None,
) -> ValidationResult:
    """Validate a role before it is created or updated.

    Args:
        candidate: Role data as a ``RoleDraft``, ``Role`` or plain mapping.
        existing_roles: Roles already stored.
        catalog: Permission catalog used to recognize codes.
        role_id: Id of the role being edited; that role's own code does not
            count as a duplicate.

    Returns:
        :class:`ValidationResult` with every error found.
    """
    try:
        draft = _as_draft(candidate)
    except ValidationError as e:
        return ValidationResult(is_valid=False, errors=[_field_error(err) for err in e.errors()])

    errors: list[str] = []

    if not draft.name.strip():
        errors.append("Role name is required")

    if not draft.code.strip():
        errors.append("Role code is required")
    elif any(r.code == draft.code and r.id != role_id for r in existing_roles):
        errors.append(f"Role with code '{draft.code}' already exists (duplicate code)")

    if draft.scope not in RoleScope.values():
        errors.append(f"Invalid role scope '{draft.scope}'")

    if not draft.permissions:
        errors.append("Role must have at least one permission")

    invalid = [code for code in draft.permissions if not catalog.is_acceptable(code)]
    if invalid:
        errors.append(f"Invalid permissions: {', '.join(invalid)}")

    if draft.parent_role_id:
        parent = next((r for r in existing_roles if r.id == draft.parent_role_id), None)
        if parent is None:
            errors.append(f"Parent role '{draft.parent_role_id}' not found")
        elif parent.scope.value != draft.scope:
            errors.append("Role scope must match parent role scope")
        if role_id is not None and _reaches(draft.parent_role_id, role_id, existing_roles):
            errors.append("Role inheritance would create a cycle")

    return ValidationResult(is_valid=not errors, errors=errors)


__all__ = [
    "RoleCandidate",
    "ValidationResult",
    "validate_role",
]
