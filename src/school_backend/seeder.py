"""
Initialize system data: the permission registry, the built-in roles and the
administrator account. Every step is idempotent and safe to run at each
startup.
"""

import logging
from typing import Dict
from sqlalchemy.orm import Session

from school_backend.database import transaction
from school_backend.model.auth import User
from school_backend.model.role import Permission, Role
from school_backend.permissions.passwords import hash_password
from school_backend.permissions.registry import ADMIN_ROLE, BUILTIN_ROLES, PERMISSION_DESCRIPTIONS, is_registered
from school_backend.settings import settings

logger = logging.getLogger(__name__)


def seed_permissions(db: Session) -> Dict[str, Permission]:
    """Create missing registry permissions and return all of them by name."""
    existing = {permission.name: permission for permission in db.query(Permission).all()}

    for name in existing:
        if not is_registered(name):
            logger.warning(f"Permission {name} is stored but not part of the registry")

    with transaction(db):
        for name, description in PERMISSION_DESCRIPTIONS.items():
            if name not in existing:
                existing[name] = Permission(name=name, description=description)
                db.add(existing[name])
                logger.info(f"Seeded permission {name}")

    return existing


def seed_roles(db: Session, permissions: Dict[str, Permission]) -> None:
    """Create missing built-in roles; existing roles keep their permissions."""
    with transaction(db):
        for name, (description, is_default, grants) in BUILTIN_ROLES.items():
            role = db.query(Role).filter(Role.name == name).first()
            if role is not None:
                continue

            if is_default and db.query(Role).filter(Role.is_default.is_(True)).first() is not None:
                is_default = False

            db.add(Role(
                name=name,
                description=description,
                is_default=is_default,
                permissions=[permissions[grant] for grant in grants]
            ))
            logger.info(f"Seeded role {name}")


def seed_admin(db: Session, email: str = None, username: str = None, password: str = None) -> User:
    """Create the administrator account unless a user with that email or username exists."""
    email = email or settings.ADMIN_EMAIL
    username = username or settings.ADMIN_USERNAME
    password = password or settings.ADMIN_PASSWORD

    admin = db.query(User).filter((User.email == email) | (User.username == username)).first()
    if admin is not None:
        return admin

    role = db.query(Role).filter(Role.name == ADMIN_ROLE).first()
    if role is None:
        raise RuntimeError(f"role {ADMIN_ROLE} missing, seed roles first")

    with transaction(db):
        admin = User(
            name="Administrator",
            username=username,
            email=email,
            password=hash_password(password),
            roles=[role]
        )
        db.add(admin)

    logger.info(f"Seeded admin user {username}")
    return admin


def seed(db: Session) -> None:
    permissions = seed_permissions(db)
    seed_roles(db, permissions)
    seed_admin(db)
