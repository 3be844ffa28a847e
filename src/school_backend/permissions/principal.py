from typing import List, Optional, Set
from pydantic import BaseModel, Field

from school_backend.api.exceptions import ForbiddenException, NotFoundException

FORBIDDEN_MESSAGE = "You don't have permission to access this resource"


class Principal(BaseModel):
    """Authenticated caller with the effective permission set resolved for this request"""

    user_id: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    permissions: Set[str] = Field(default_factory=set)

    def get_user_id_or_throw(self) -> str:
        """Get user ID or raise exception"""
        if self.user_id is None:
            raise NotFoundException("User ID not found")
        return self.user_id

    def permitted(self, permission: str) -> bool:
        """Check if the effective set contains the permission"""
        return permission in self.permissions

    def authorize(self, permission: str) -> None:
        """Raise ForbiddenException unless the permission is granted"""
        if not self.permitted(permission):
            raise ForbiddenException(FORBIDDEN_MESSAGE)
