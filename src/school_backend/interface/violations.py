from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet, ListQuery, not_null


class ViolationCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class ViolationCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    check_required = not_null("name")


class ViolationCategoryGet(BaseEntityGet):
    id: str
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ViolationTypeCreate(BaseModel):
    category_id: str
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    default_points: int = Field(0, ge=0)


class ViolationTypeUpdate(BaseModel):
    category_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    default_points: Optional[int] = Field(None, ge=0)


class ViolationTypeGet(BaseEntityGet):
    id: str
    category_id: str
    name: str
    description: Optional[str] = None
    default_points: int
    category: Optional[ViolationCategoryGet] = None

    model_config = ConfigDict(from_attributes=True)


class StudentViolationCreate(BaseModel):
    student_id: str
    violation_type_id: str
    violation_date: date
    action_taken: Optional[str] = None
    notes: Optional[str] = None


class StudentViolationUpdate(BaseModel):
    violation_date: Optional[date] = None
    action_taken: Optional[str] = None
    notes: Optional[str] = None


class StudentViolationGet(BaseEntityGet):
    id: str
    student_id: str
    violation_type_id: str
    violation_date: date
    points: int
    action_taken: Optional[str] = None
    notes: Optional[str] = None
    violation_type: Optional[ViolationTypeGet] = None

    model_config = ConfigDict(from_attributes=True)


class StudentViolationQuery(ListQuery):
    student_id: Optional[str] = None


class StudentPointsGet(BaseModel):
    student_id: str
    total_points: int
