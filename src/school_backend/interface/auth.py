from typing import List, Optional, Set
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .base import BaseEntityGet


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Display name")
    username: str = Field(min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(description="Unique email address")
    password: str = Field(description="Plain text password, checked against the complexity rules")
    # Accepted for compatibility and ignored; self-registration always gets the default role
    roles: Optional[List[str]] = Field(None, description="Ignored")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.replace('_', '').replace('-', '').replace('.', '').isalnum():
            raise ValueError('Username can only contain alphanumeric characters, underscores, hyphens, and dots')
        return v


class LoginRequest(BaseModel):
    login: str = Field(min_length=1, description="Email or username")
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str


class RoleSummary(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserProfile(BaseEntityGet):
    id: str = Field(description="User unique identifier")
    name: str
    username: str
    email: str
    roles: List[RoleSummary] = Field(default_factory=list)
    permissions: Set[str] = Field(default_factory=set, description="Effective permission names")

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")
    user: UserProfile
