"""Permission matching.

A held permission is parsed once into a :class:`PermissionGrant`:

- ``UNIVERSAL``: ``*`` or ``system.admin``, matches everything.
- ``PREFIX``: ``resource.*`` or ``prefix*``, matches codes starting with the
  part before the ``*``.
- ``EXACT``: anything else, matches only the identical code.

Matching is decided on the held side only: requiring ``*`` is satisfied by a
universal grant, never by a narrower one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable

from .constants import UNIVERSAL_PERMISSIONS


class GrantKind(str, Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    UNIVERSAL = "universal"


@dataclass(frozen=True)
class PermissionGrant:
    """A held permission, classified once.

    Attributes:
        code: The original permission code.
        kind: How the code matches required permissions.
        prefix: For ``PREFIX`` grants, the part of the code before ``*``.
    """

    code: str
    kind: GrantKind
    prefix: str = ""

    def matches(self, required: str) -> bool:
        if self.kind is GrantKind.UNIVERSAL:
            return True
        if self.kind is GrantKind.PREFIX:
            return required.startswith(self.prefix)
        return required == self.code


@lru_cache(maxsize=1024)
def parse_grant(code: str) -> PermissionGrant:
    """Classify a held permission code.

    Example::

        parse_grant("users.*").matches("users.create")   # True
        parse_grant("users.*").matches("roles.create")   # False
        parse_grant("system.admin").matches("anything")  # True
    """
    if code in UNIVERSAL_PERMISSIONS:
        return PermissionGrant(code=code, kind=GrantKind.UNIVERSAL)
    if code.endswith("*"):
        return PermissionGrant(code=code, kind=GrantKind.PREFIX, prefix=code[:-1])
    return PermissionGrant(code=code, kind=GrantKind.EXACT)


def permission_matches(held: str, required: str) -> bool:
    """Check if one held permission covers ``required``."""
    return parse_grant(held).matches(required)


def has_permission(held: Iterable[str], required: str) -> bool:
    """Check if any held permission covers ``required``.

    Unknown or malformed codes never raise; they simply fail to match.
    """
    return any(parse_grant(code).matches(required) for code in held)


def has_universal(held: Iterable[str]) -> bool:
    """True if the held set contains ``*`` or ``system.admin``."""
    return any(code in UNIVERSAL_PERMISSIONS for code in held)


__all__ = [
    "GrantKind",
    "PermissionGrant",
    "has_permission",
    "has_universal",
    "parse_grant",
    "permission_matches",
]
