from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .auth import RoleSummary
from .base import BaseEntityGet, BaseEntityList, ListQuery, not_null


def check_username(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.replace('_', '').replace('-', '').replace('.', '').isalnum():
        raise ValueError('Username can only contain alphanumeric characters, underscores, hyphens, and dots')
    return v


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Display name")
    username: str = Field(min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(description="Unique email address")
    password: str
    roles: Optional[List[str]] = Field(None, description="Role names; the default role is used when omitted")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return check_username(v)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None

    check_required = not_null("name", "username", "email")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return check_username(v)


class UserPermissionSummary(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserGet(BaseEntityGet):
    id: str
    name: str
    username: str
    email: str
    roles: List[RoleSummary] = Field(default_factory=list)
    permissions: List[UserPermissionSummary] = Field(default_factory=list, description="Direct grants")

    model_config = ConfigDict(from_attributes=True)


class UserList(BaseEntityList):
    id: str
    name: str
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserQuery(ListQuery):
    pass


class ResetPasswordRequest(BaseModel):
    new_password: str


class SyncNamesRequest(BaseModel):
    names: List[str] = Field(default_factory=list)
