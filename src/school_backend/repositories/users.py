"""
User, role and permission repositories.
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.auth import User
from ..model.role import Permission, Role


class UserRepository(BaseRepository[User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_one_by(email=email)

    def find_by_username(self, username: str) -> Optional[User]:
        return self.find_one_by(username=username)

    def find_by_login(self, login: str) -> Optional[User]:
        """
        Find a user by email or username.

        Args:
            login: Email address or username

        Returns:
            User if found, None otherwise
        """
        return self.db.query(User).filter(
            or_(User.email == login, User.username == login)
        ).first()

    def search(self, search: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None) -> List[User]:
        query = self.db.query(User)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                User.name.ilike(pattern),
                User.username.ilike(pattern),
                User.email.ilike(pattern)
            ))
        query = query.order_by(User.created_at.desc())
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def set_token_hash(self, user: User, token_hash: Optional[str]) -> User:
        """Replace the stored session hash; None revokes every issued access token."""
        return self.save(user, {"current_token_hash": token_hash})


class RoleRepository(BaseRepository[Role]):
    """Repository for Role entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, Role)

    def find_by_name(self, name: str) -> Optional[Role]:
        return self.find_one_by(name=name)

    def find_default(self) -> Optional[Role]:
        return self.db.query(Role).filter(Role.is_default.is_(True)).first()

    def find_by_names(self, names: List[str]) -> List[Role]:
        if not names:
            return []
        return self.db.query(Role).filter(Role.name.in_(names)).all()

    def clear_default(self, except_id: Optional[str] = None) -> None:
        """Unset is_default on every role other than except_id (not committed)."""
        query = self.db.query(Role).filter(Role.is_default.is_(True))
        if except_id is not None:
            query = query.filter(Role.id != except_id)
        for role in query.all():
            role.is_default = False


class PermissionRepository(BaseRepository[Permission]):
    """Repository for Permission entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, Permission)

    def find_by_name(self, name: str) -> Optional[Permission]:
        return self.find_one_by(name=name)

    def find_by_names(self, names: List[str]) -> List[Permission]:
        if not names:
            return []
        return self.db.query(Permission).filter(Permission.name.in_(names)).all()

    def list_all(self) -> List[Permission]:
        return self.db.query(Permission).order_by(Permission.name).all()
