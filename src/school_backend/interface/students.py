from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import BaseEntityGet, BaseEntityList, ListQuery, not_null
from .people import AddressFields, ParentSummary

GuardianType = Literal["parent", "guardian"]


class StudentCreate(AddressFields):
    full_name: str = Field(min_length=1, max_length=255)
    nik: Optional[str] = Field(None, description="National ID number, stored encrypted")
    no_kk: Optional[str] = Field(None, description="Family card number, stored encrypted")
    nisn: Optional[str] = Field(None, max_length=20)
    nim: Optional[str] = Field(None, max_length=20)
    gender: Optional[str] = None
    place_of_birth: Optional[str] = None
    date_of_birth: Optional[date] = None
    user_id: Optional[str] = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty or only whitespace')
        return v.strip()


class StudentUpdate(AddressFields):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    nik: Optional[str] = None
    no_kk: Optional[str] = None
    nisn: Optional[str] = Field(None, max_length=20)
    nim: Optional[str] = Field(None, max_length=20)
    gender: Optional[str] = None
    place_of_birth: Optional[str] = None
    date_of_birth: Optional[date] = None

    check_required = not_null("full_name")


class GuardianInfo(BaseModel):
    """Resolved guardian of a student, whichever table it lives in"""
    id: str
    full_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    type: GuardianType
    relationship: Optional[str] = None


class StudentParentInfo(BaseModel):
    relationship_type: str
    parent: ParentSummary

    model_config = ConfigDict(from_attributes=True)


class StudentList(BaseEntityList):
    id: str
    full_name: str
    nisn: Optional[str] = None
    nim: Optional[str] = None
    gender: Optional[str] = None
    user_id: Optional[str] = None
    guardian_type: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StudentGet(StudentList, BaseEntityGet):
    nik: Optional[str] = Field(None, description="Decrypted national ID")
    no_kk: Optional[str] = Field(None, description="Decrypted family card number")
    place_of_birth: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    rt: Optional[str] = None
    rw: Optional[str] = None
    sub_district: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    guardian_id: Optional[str] = None
    parents: List[StudentParentInfo] = Field(default_factory=list)
    guardian: Optional[GuardianInfo] = None


class StudentQuery(ListQuery):
    pass


class SetGuardianRequest(BaseModel):
    guardian_id: str = Field(min_length=1)
    guardian_type: GuardianType


class ParentLink(BaseModel):
    parent_id: str = Field(min_length=1)
    relationship_type: str = Field(min_length=1, max_length=20, description="FATHER, MOTHER, ...")

    @field_validator('relationship_type')
    @classmethod
    def normalize_relationship(cls, v):
        return v.strip().upper()


class SyncParentsRequest(BaseModel):
    parents: List[ParentLink] = Field(default_factory=list)
