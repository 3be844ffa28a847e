import re
from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import BaseEntityGet, BaseEntityList, not_null

AcademicYearStatus = Literal["ACTIVE", "INACTIVE"]

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DAY_NAMES = {
    1: "Senin",
    2: "Selasa",
    3: "Rabu",
    4: "Kamis",
    5: "Jumat",
    6: "Sabtu",
    7: "Ahad",
}


def check_time(v: Optional[str]) -> Optional[str]:
    if v is not None and not _TIME_PATTERN.match(v):
        raise ValueError('time must use the 24 hour HH:MM format')
    return v


# Academic years

class AcademicYearCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50, description="e.g. 2024/2025")
    status: AcademicYearStatus = "INACTIVE"
    start_date: date
    end_date: date


class AcademicYearUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[AcademicYearStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    check_required = not_null("name", "status", "start_date", "end_date")


class AcademicYearGet(BaseEntityGet):
    id: str
    name: str
    status: str
    start_date: date
    end_date: date

    model_config = ConfigDict(from_attributes=True)


# Subjects

class SubjectCreate(BaseModel):
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=255)
    type: Optional[str] = Field(None, description="e.g. GENERAL, RELIGIOUS, VOCATIONAL")
    description: Optional[str] = None


class SubjectUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = None
    description: Optional[str] = None

    check_required = not_null("code", "name")


class SubjectGet(BaseEntityGet):
    id: str
    code: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# Classrooms

class ClassroomCreate(BaseModel):
    academic_year_id: str
    homeroom_teacher_id: Optional[str] = None
    name: str = Field(min_length=1, max_length=50)
    level: str = Field(min_length=1, max_length=10)
    major: Optional[str] = None
    description: Optional[str] = None


class ClassroomUpdate(BaseModel):
    academic_year_id: Optional[str] = None
    homeroom_teacher_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    level: Optional[str] = Field(None, min_length=1, max_length=10)
    major: Optional[str] = None
    description: Optional[str] = None

    check_required = not_null("name", "level")


class EmployeeSummary(BaseModel):
    id: str
    full_name: str
    nip: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClassroomStudent(BaseModel):
    id: str
    full_name: str
    nisn: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClassroomList(BaseEntityList):
    id: str
    academic_year_id: str
    homeroom_teacher_id: Optional[str] = None
    name: str
    level: str
    major: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClassroomGet(ClassroomList, BaseEntityGet):
    description: Optional[str] = None
    homeroom_teacher: Optional[EmployeeSummary] = None
    students: List[ClassroomStudent] = Field(default_factory=list)


class ClassroomStudentsRequest(BaseModel):
    student_ids: List[str] = Field(min_length=1)


# Teaching assignments

class TeachingAssignmentCreate(BaseModel):
    classroom_id: str
    subject_id: str
    teacher_id: str = Field(description="Employee id of the teacher")


class TeachingAssignmentUpdate(BaseModel):
    teacher_id: str


class TeachingAssignmentGet(BaseEntityGet):
    id: str
    classroom_id: str
    subject_id: str
    teacher_id: str
    classroom: Optional[ClassroomList] = None
    subject: Optional[SubjectGet] = None
    teacher: Optional[EmployeeSummary] = None

    model_config = ConfigDict(from_attributes=True)


# Schedules

class ScheduleCreate(BaseModel):
    teaching_assignment_id: str
    day_of_week: int = Field(ge=1, le=7, description="1 = Monday (Senin) ... 7 = Sunday (Ahad)")
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM")

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_time(cls, v):
        return check_time(v)


class ScheduleUpdate(BaseModel):
    teaching_assignment_id: Optional[str] = None
    day_of_week: Optional[int] = Field(None, ge=1, le=7)
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_time(cls, v):
        return check_time(v)


class ScheduleGet(BaseEntityGet):
    id: str
    teaching_assignment_id: str
    day_of_week: int
    start_time: str
    end_time: str
    teaching_assignment: Optional[TeachingAssignmentGet] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def day_name(self) -> str:
        return DAY_NAMES.get(self.day_of_week, "")


class ScheduleQuery(BaseModel):
    classroom_id: Optional[str] = None
    teacher_id: Optional[str] = None
    teaching_assignment_id: Optional[str] = None
    day_of_week: Optional[int] = Field(None, ge=1, le=7)
