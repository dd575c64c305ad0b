"""
Role → permission rules.

| role              | can_create | can_edit | can_delete |
|-------------------|------------|----------|------------|
| admin, developer  | true       | true     | true       |
| user              | stored     | stored   | stored     |
| viewer, unknown   | false      | false    | false      |

Editing or deleting a record also requires owning it, unless the actor
holds a privileged role. The API enforces these rules; ``GET /api/me``
exposes the same result so the UI can hide actions.
"""
from __future__ import annotations

from typing import Literal, Optional

from paybox.errors import AuthorizationError
from paybox.schemas import Permissions, Role

PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.DEVELOPER})

Action = Literal["create", "edit", "delete"]


def parse_role(value: Optional[str]) -> Role:
    try:
        return Role(value)
    except ValueError:
        return Role.VIEWER


def is_privileged(role: Role | str | None) -> bool:
    return parse_role(role) in PRIVILEGED_ROLES


def effective_permissions(role: Role | str | None, stored: Permissions) -> Permissions:
    role = parse_role(role)
    if role in PRIVILEGED_ROLES:
        return Permissions(can_create=True, can_edit=True, can_delete=True)
    if role == Role.USER:
        return Permissions(
            can_create=stored.can_create,
            can_edit=stored.can_edit,
            can_delete=stored.can_delete,
        )
    return Permissions()


def can_act(
    role: Role | str | None,
    stored: Permissions,
    action: Action,
    actor_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> bool:
    perms = effective_permissions(role, stored)
    if not getattr(perms, f"can_{action}"):
        return False
    if action == "create" or owner_id is None or is_privileged(role):
        return True
    return actor_id == owner_id


def require(
    role: Role | str | None,
    stored: Permissions,
    action: Action,
    actor_id: Optional[str] = None,
    owner_id: Optional[str] = None,
) -> None:
    if not getattr(effective_permissions(role, stored), f"can_{action}"):
        raise AuthorizationError(f"Your role does not allow you to {action} records")
    if not can_act(role, stored, action, actor_id, owner_id):
        raise AuthorizationError(f"Only the creator can {action} this record")


def require_privileged(role: Role | str | None) -> None:
    if not is_privileged(role):
        raise AuthorizationError("Admin or developer role required")
