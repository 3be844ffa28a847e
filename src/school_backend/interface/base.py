from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ListQuery(BaseModel):
    skip: Optional[int] = Field(0, ge=0)
    limit: Optional[int] = Field(100, ge=1, le=1000)
    search: Optional[str] = Field(None, description="Free text filter")


class BaseEntityList(BaseModel):
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Update timestamp")


class BaseEntityGet(BaseEntityList):
    pass


class MessageResponse(BaseModel):
    message: str


def strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def not_null(*fields: str):
    """
    Validator for patch models: the listed fields may be left out but not
    sent as an explicit null, since their columns are required.
    """

    def check(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    return field_validator(*fields)(check)
