"""Role, assignment and access-scope models.

These are Pydantic models. They accept snake_case keyword arguments and the
camelCase keys the console's REST layer returns (``parentRoleId``,
``tradingPointId``, ...), so rows validate directly::

    Role.model_validate({"id": "r1", "name": "Net admin", "code": "net_admin",
                         "scope": "network", "permissions": ["prices.update"],
                         "parentRoleId": None, "isSystem": False})
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from ..permissions.constants import RoleScope

_MODEL_CONFIG: Any = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Role(BaseModel):
    """A named bundle of permission codes with a breadth level.

    ``parent_role_id`` gives single-parent inheritance. The parent must have
    the same scope; :func:`fuelaccess.roles.validation.validate_role` enforces
    that, evaluation trusts the stored graph.
    """

    model_config = _MODEL_CONFIG

    id: str
    name: str
    code: str
    scope: RoleScope
    permissions: list[str] = Field(default_factory=list)
    parent_role_id: Optional[str] = None
    is_system: bool = False
    description: str = ""


class RoleDraft(BaseModel):
    """Candidate role data submitted for validation.

    ``scope`` is a plain string here so that an unrecognized value reaches
    the validator and is reported as an error instead of raising. Null
    ``name``, ``code``, ``description`` and ``permissions`` from REST rows
    read as empty.
    """

    model_config = _MODEL_CONFIG

    name: str = ""
    code: str = ""
    scope: str = ""
    permissions: list[str] = Field(default_factory=list)
    parent_role_id: Optional[str] = None
    is_system: bool = False
    description: str = ""

    @field_validator("scope", mode="before")
    @classmethod
    def scope_to_str(cls, v: Any) -> str:
        if isinstance(v, RoleScope):
            return v.value
        return "" if v is None else str(v)

    @field_validator("name", "code", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("permissions", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("is_system", mode="before")
    @classmethod
    def none_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    @classmethod
    def from_role(cls, role: Role) -> RoleDraft:
        return cls(**role.model_dump(exclude={"id"}))

    def to_role(self, role_id: str) -> Role:
        """Materialize a validated draft.

        Raises:
            pydantic.ValidationError: If ``scope`` is not a recognized value.
        """
        return Role(id=role_id, **self.model_dump())


class UserRole(BaseModel):
    """Assignment of a role to a user, optionally narrowed to one org unit.

    The assignment stays in storage after ``expires_at``; it is ignored at
    check time from then on. Naive datetimes are taken as UTC.
    """

    model_config = _MODEL_CONFIG

    user_id: str
    role_id: str
    network_id: Optional[str] = None
    trading_point_id: Optional[str] = None
    granted_by: str = ""
    granted_at: datetime = Field(default_factory=_utcnow)
    expires_at: Optional[datetime] = None

    @field_validator("granted_at", "expires_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    def is_expired(self, *, now: Optional[datetime] = None) -> bool:
        """Check if the assignment has lapsed.

        An assignment expiring exactly at ``now`` is still live.
        """
        if self.expires_at is None:
            return False
        t = _utcnow() if now is None else _as_utc(now)
        return self.expires_at < t


class AccessScope(BaseModel):
    """The org-unit context an access check is performed in.

    Distinct from a role's breadth and from an assignment's concrete unit:
    this is what the caller is asking to touch.
    """

    model_config = _MODEL_CONFIG

    type: RoleScope
    network_id: Optional[str] = None
    trading_point_id: Optional[str] = None

    @classmethod
    def global_(cls) -> AccessScope:
        return cls(type=RoleScope.GLOBAL)

    @classmethod
    def network(cls, network_id: str) -> AccessScope:
        return cls(type=RoleScope.NETWORK, network_id=network_id)

    @classmethod
    def trading_point(cls, trading_point_id: str, network_id: Optional[str] = None) -> AccessScope:
        return cls(type=RoleScope.TRADING_POINT, trading_point_id=trading_point_id, network_id=network_id)


__all__ = [
    "AccessScope",
    "Role",
    "RoleDraft",
    "UserRole",
]
