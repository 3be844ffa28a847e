import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet

AssessmentType = Literal["ASSIGNMENT", "MID_EXAM", "FINAL_EXAM", "QUIZ"]


class AssessmentCreate(BaseModel):
    teaching_assignment_id: str
    title: str = Field(min_length=1, max_length=255)
    type: AssessmentType
    max_score: int = Field(100, gt=0)
    date: datetime.date
    description: Optional[str] = None


class AssessmentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[AssessmentType] = None
    max_score: Optional[int] = Field(None, gt=0)
    date: Optional[datetime.date] = None
    description: Optional[str] = None


class StudentScoreGet(BaseModel):
    id: str
    student_id: str
    score: float
    feedback: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AssessmentGet(BaseEntityGet):
    id: str
    teaching_assignment_id: str
    title: str
    type: str
    max_score: int
    date: datetime.date
    description: Optional[str] = None
    scores: List[StudentScoreGet] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ScoreInput(BaseModel):
    student_id: str
    score: float = Field(ge=0)
    feedback: Optional[str] = None


class SubmitScoresRequest(BaseModel):
    scores: List[ScoreInput] = Field(min_length=1)
