from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet, not_null


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    is_default: bool = False
    permissions: List[str] = Field(default_factory=list, description="Permission names")


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_default: Optional[bool] = None
    permissions: Optional[List[str]] = Field(None, description="Replaces the permission set when given")

    check_required = not_null("name")


class RolePermission(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class RoleGet(BaseEntityGet):
    id: str
    name: str
    description: Optional[str] = None
    is_default: bool
    permissions: List[RolePermission] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
