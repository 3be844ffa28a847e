from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet, BaseEntityList, ListQuery, not_null


class EmployeeCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    nip: Optional[str] = Field(None, max_length=30, description="Employee registration number")
    job_title: str = Field(min_length=1, max_length=255)
    nik: Optional[str] = None
    gender: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    join_date: Optional[date] = None
    employment_status: Optional[str] = Field(None, description="e.g. PERMANENT, CONTRACT")
    user_id: Optional[str] = None


class EmployeeUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    nip: Optional[str] = Field(None, max_length=30)
    job_title: Optional[str] = Field(None, min_length=1, max_length=255)
    nik: Optional[str] = None
    gender: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    join_date: Optional[date] = None
    employment_status: Optional[str] = None

    check_required = not_null("full_name", "job_title")


class EmployeeList(BaseEntityList):
    id: str
    full_name: str
    nip: Optional[str] = None
    job_title: str
    phone_number: Optional[str] = None
    employment_status: Optional[str] = None
    user_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EmployeeGet(EmployeeList, BaseEntityGet):
    nik: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    join_date: Optional[date] = None


class EmployeeQuery(ListQuery):
    pass
