"""
Role management. A role flagged ``is_default`` is what self-registration
assigns; at most one role carries the flag and it can never be deleted.
"""

import logging
from typing import List
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, ConflictException, NotFoundException
from ..database import transaction
from ..interface.roles import RoleCreate, RoleUpdate
from ..model.role import Permission, Role
from ..repositories.users import PermissionRepository, RoleRepository
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)


class RoleService:

    def __init__(self, db: Session):
        self.db = db
        self.roles = RoleRepository(db)
        self.permissions = PermissionRepository(db)

    def create(self, payload: RoleCreate) -> Role:
        if self.roles.find_by_name(payload.name) is not None:
            raise ConflictException("role already exists")

        role = Role(name=payload.name, description=payload.description, is_default=payload.is_default)
        role.permissions = self._permissions_by_name(payload.permissions)

        with repository_errors("role already exists"), transaction(self.db):
            if payload.is_default:
                self.roles.clear_default()
            self.roles.add(role)

        self.db.refresh(role)
        logger.info(f"Created role {role.name}")
        return role

    def list(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.name).all()

    def get(self, role_id: str) -> Role:
        return get_or_404(self.roles, role_id, "role not found")

    def update(self, role_id: str, payload: RoleUpdate) -> Role:
        role = self.get(role_id)
        updates = patch_fields(payload)

        name = updates.get("name")
        if name and name != role.name and self.roles.find_by_name(name) is not None:
            raise ConflictException("role already exists")

        permission_names = updates.pop("permissions", None)
        permissions = self._permissions_by_name(permission_names) if permission_names is not None else None

        with repository_errors("role already exists"), transaction(self.db):
            if updates.get("is_default"):
                self.roles.clear_default(except_id=role.id)
            for key, value in updates.items():
                if key == "is_default" and value is None:
                    continue
                setattr(role, key, value)
            if permissions is not None:
                role.permissions = permissions

        self.db.refresh(role)
        return role

    def delete(self, role_id: str) -> None:
        role = self.get(role_id)
        if role.is_default:
            raise BadRequestException("cannot delete default role")
        with repository_errors():
            self.roles.delete(role_id)
        logger.info(f"Deleted role {role.name}")

    def _permissions_by_name(self, names: List[str]) -> List[Permission]:
        wanted = list(dict.fromkeys(names))
        found = {p.name: p for p in self.permissions.find_by_names(wanted)}
        for name in wanted:
            if name not in found:
                raise NotFoundException(f"permission not found: {name}")
        return [found[name] for name in wanted]
