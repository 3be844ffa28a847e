from typing import Optional
from pydantic import ConfigDict, EmailStr, Field

from .base import BaseEntityGet, BaseEntityList, ListQuery, not_null
from .people import AddressFields


class GuardianCreate(AddressFields):
    full_name: str = Field(min_length=1, max_length=255)
    nik: Optional[str] = None
    gender: Optional[str] = None
    phone_number: str = Field(min_length=1, max_length=20)
    email: Optional[EmailStr] = None
    relationship_to_student: Optional[str] = Field(None, description="e.g. UNCLE, GRANDPARENT")
    user_id: Optional[str] = None


class GuardianUpdate(AddressFields):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    nik: Optional[str] = None
    gender: Optional[str] = None
    phone_number: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[EmailStr] = None
    relationship_to_student: Optional[str] = None

    check_required = not_null("full_name")


class GuardianList(BaseEntityList):
    id: str
    full_name: str
    phone_number: str
    email: Optional[str] = None
    relationship_to_student: Optional[str] = None
    user_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class GuardianGet(GuardianList, BaseEntityGet):
    nik: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    rt: Optional[str] = None
    rw: Optional[str] = None
    sub_district: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None


class GuardianQuery(ListQuery):
    pass
