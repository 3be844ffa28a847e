from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .base import BaseEntityGet, BaseEntityList, ListQuery, not_null
from .people import AddressFields


class ParentCreate(AddressFields):
    full_name: str = Field(min_length=1, max_length=255)
    nik: Optional[str] = None
    gender: Optional[str] = None
    place_of_birth: Optional[str] = None
    date_of_birth: Optional[date] = None
    life_status: str = Field("alive", description="alive or deceased")
    marital_status: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    education_level: Optional[str] = None
    occupation: Optional[str] = None
    income_range: Optional[str] = None
    user_id: Optional[str] = None


class ParentUpdate(AddressFields):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    nik: Optional[str] = None
    gender: Optional[str] = None
    place_of_birth: Optional[str] = None
    date_of_birth: Optional[date] = None
    life_status: Optional[str] = None
    marital_status: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    education_level: Optional[str] = None
    occupation: Optional[str] = None
    income_range: Optional[str] = None

    check_required = not_null("full_name", "life_status")


class ParentList(BaseEntityList):
    id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    life_status: Optional[str] = None
    user_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ParentChild(BaseModel):
    student_id: str
    full_name: str
    relationship_type: str


class ParentGet(ParentList, BaseEntityGet):
    nik: Optional[str] = None
    gender: Optional[str] = None
    place_of_birth: Optional[str] = None
    date_of_birth: Optional[date] = None
    marital_status: Optional[str] = None
    education_level: Optional[str] = None
    occupation: Optional[str] = None
    income_range: Optional[str] = None
    address: Optional[str] = None
    rt: Optional[str] = None
    rw: Optional[str] = None
    sub_district: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    students: List[ParentChild] = Field(default_factory=list, description="Linked students")


class ParentQuery(ListQuery):
    pass
