"""Shared fixtures for fuelaccess tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from fuelaccess import Role, UserRole

NOW = datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc)


def make_role(role_id: str, scope: str, permissions: list[str], **kwargs: Any) -> Role:
    """Build a role with code/name derived from the id."""
    kwargs.setdefault("code", role_id)
    kwargs.setdefault("name", role_id.replace("_", " ").title())
    return Role(id=role_id, scope=scope, permissions=permissions, **kwargs)


def assign(role_id: str, user_id: str = "u1", **kwargs: Any) -> UserRole:
    """Build an assignment granted by 'admin' an hour before NOW."""
    kwargs.setdefault("granted_by", "admin")
    kwargs.setdefault("granted_at", NOW - timedelta(hours=1))
    return UserRole(user_id=user_id, role_id=role_id, **kwargs)


@pytest.fixture()
def now() -> datetime:
    return NOW
