"""
Role/permission graph evaluation.

A user holds roles and direct permission grants. The effective permission
set is the union of every role's permissions and the direct grants,
deduplicated by name. Nothing here is cached: callers load the graph per
request so changes to roles take effect immediately.
"""

from typing import Iterable, Optional, Set
from sqlalchemy.orm import Session, selectinload

from school_backend.model.auth import User
from school_backend.model.role import Role
from school_backend.permissions.principal import Principal


def effective_permissions(user: User) -> Set[str]:
    """Union of role permissions and direct permissions"""
    names = {permission.name for permission in user.permissions}
    for role in user.roles:
        names.update(permission.name for permission in role.permissions)
    return names


def has_permission(user: User, name: str) -> bool:
    """Membership test, direct grants first, then role grants"""
    for permission in user.permissions:
        if permission.name == name:
            return True
    for role in user.roles:
        for permission in role.permissions:
            if permission.name == name:
                return True
    return False


def authorize(effective: Iterable[str], required: str) -> bool:
    return required in set(effective)


def build_principal(user: User) -> Principal:
    return Principal(
        user_id=user.id,
        roles=sorted(role.name for role in user.roles),
        permissions=effective_permissions(user)
    )


def db_get_user_with_grants(user_id: str, db: Session) -> Optional[User]:
    """Load a user together with roles, role permissions and direct permissions"""
    return (
        db.query(User)
        .options(
            selectinload(User.roles).selectinload(Role.permissions),
            selectinload(User.permissions)
        )
        .filter(User.id == user_id)
        .first()
    )
