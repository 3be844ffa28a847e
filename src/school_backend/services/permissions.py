import logging
from typing import List
from sqlalchemy.orm import Session

from ..api.exceptions import ConflictException
from ..interface.permissions import PermissionCreate, PermissionUpdate
from ..model.role import Permission
from ..permissions.registry import is_registered
from ..repositories.users import PermissionRepository
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)


class PermissionService:

    def __init__(self, db: Session):
        self.db = db
        self.permissions = PermissionRepository(db)

    def create(self, payload: PermissionCreate) -> Permission:
        if self.permissions.find_by_name(payload.name) is not None:
            raise ConflictException("permission already exists")
        if not is_registered(payload.name):
            logger.warning(f"Permission {payload.name} is not checked by any route")

        with repository_errors("permission already exists"):
            return self.permissions.create(Permission(name=payload.name, description=payload.description))

    def list(self) -> List[Permission]:
        return self.permissions.list_all()

    def get(self, permission_id: str) -> Permission:
        return get_or_404(self.permissions, permission_id, "permission not found")

    def update(self, permission_id: str, payload: PermissionUpdate) -> Permission:
        permission = self.get(permission_id)
        updates = patch_fields(payload)
        name = updates.get("name")
        if name and name != permission.name and self.permissions.find_by_name(name) is not None:
            raise ConflictException("permission already exists")
        with repository_errors("permission already exists"):
            return self.permissions.save(permission, updates)

    def delete(self, permission_id: str) -> None:
        self.get(permission_id)
        with repository_errors():
            self.permissions.delete(permission_id)
