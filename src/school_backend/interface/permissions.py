from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet, not_null


class PermissionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Dotted permission name, e.g. students.read")
    description: Optional[str] = None


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    check_required = not_null("name")


class PermissionGet(BaseEntityGet):
    id: str
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
