"""
Administrative user management.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import ConflictException, InternalServerException, NotFoundException
from ..interface.users import UserCreate, UserUpdate
from ..model.auth import User
from ..permissions.passwords import hash_password, validate_password_complexity
from ..repositories.users import PermissionRepository, RoleRepository, UserRepository
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.roles = RoleRepository(db)
        self.permissions = PermissionRepository(db)

    def create(self, payload: UserCreate) -> User:
        if self.users.find_by_email(payload.email) is not None:
            raise ConflictException("email already exists")
        if self.users.find_by_username(payload.username) is not None:
            raise ConflictException("username already exists")

        validate_password_complexity(payload.password)

        if payload.roles:
            roles = self._roles_by_name(payload.roles)
        else:
            default_role = self.roles.find_default()
            if default_role is None:
                raise InternalServerException("default role not configured")
            roles = [default_role]

        user = User(
            name=payload.name,
            username=payload.username,
            email=payload.email,
            password=hash_password(payload.password)
        )
        user.roles = roles

        with repository_errors("email or username already exists"):
            user = self.users.create(user)
        logger.info(f"Created user {user.username}")
        return user

    def list(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[User]:
        return self.users.search(search, limit=limit, offset=skip)

    def get(self, user_id: str) -> User:
        return get_or_404(self.users, user_id, "user not found")

    def update(self, user_id: str, payload: UserUpdate) -> User:
        user = self.get(user_id)
        updates = patch_fields(payload)

        email = updates.get("email")
        if email and email != user.email and self.users.find_by_email(email) is not None:
            raise ConflictException("email already exists")
        username = updates.get("username")
        if username and username != user.username and self.users.find_by_username(username) is not None:
            raise ConflictException("username already exists")

        with repository_errors("email or username already exists"):
            return self.users.save(user, updates)

    def delete(self, user_id: str) -> None:
        self.get(user_id)
        with repository_errors():
            self.users.delete(user_id)
        logger.info(f"Deleted user {user_id}")

    def reset_password(self, user_id: str, new_password: str) -> None:
        """Set another user's password and end their session"""
        user = self.get(user_id)
        validate_password_complexity(new_password)
        self.users.save(user, {"password": hash_password(new_password), "current_token_hash": None})
        logger.info(f"Password reset for user {user.username}")

    def sync_roles(self, user_id: str, names: List[str]) -> User:
        user = self.get(user_id)
        user.roles = self._roles_by_name(names)
        with repository_errors():
            return self.users.save(user)

    def sync_permissions(self, user_id: str, names: List[str]) -> User:
        """Replace the user's direct permission grants"""
        user = self.get(user_id)
        wanted = list(dict.fromkeys(names))
        found = {p.name: p for p in self.permissions.find_by_names(wanted)}
        for name in wanted:
            if name not in found:
                raise NotFoundException(f"permission not found: {name}")
        user.permissions = [found[name] for name in wanted]
        with repository_errors():
            return self.users.save(user)

    def _roles_by_name(self, names: List[str]):
        wanted = list(dict.fromkeys(names))
        found = {r.name: r for r in self.roles.find_by_names(wanted)}
        for name in wanted:
            if name not in found:
                raise NotFoundException(f"role not found: {name}")
        return [found[name] for name in wanted]
