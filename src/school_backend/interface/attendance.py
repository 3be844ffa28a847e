import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet

AttendanceStatus = Literal["PRESENT", "SICK", "PERMISSION", "ABSENT"]


class StudentAttendanceInput(BaseModel):
    student_id: str
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceSubmit(BaseModel):
    schedule_id: str
    date: datetime.date
    topic: Optional[str] = None
    notes: Optional[str] = None
    students: List[StudentAttendanceInput] = Field(min_length=1)


class AttendanceDetailGet(BaseModel):
    student_id: str
    student_name: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class AttendanceSessionGet(BaseEntityGet):
    id: Optional[str] = Field(None, description="None when the sheet has not been saved yet")
    schedule_id: str
    date: datetime.date
    topic: Optional[str] = None
    notes: Optional[str] = None
    details: List[AttendanceDetailGet] = Field(default_factory=list)
    summary: Dict[str, int] = Field(default_factory=dict, description="Count per attendance status")


class AttendanceHistoryItem(BaseModel):
    id: str
    schedule_id: str
    date: datetime.date
    topic: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
