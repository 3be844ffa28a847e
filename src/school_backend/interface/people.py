"""
Shared pieces of the student, parent, guardian and employee DTOs.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AddressFields(BaseModel):
    address: Optional[str] = None
    rt: Optional[str] = Field(None, max_length=5)
    rw: Optional[str] = Field(None, max_length=5)
    sub_district: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = Field(None, max_length=10)


class LinkUserRequest(BaseModel):
    user_id: str = Field(description="User account to link")


class ParentSummary(BaseModel):
    id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    life_status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
