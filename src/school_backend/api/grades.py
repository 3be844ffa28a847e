from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.grades import AssessmentCreate, AssessmentGet, AssessmentUpdate, SubmitScoresRequest
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import ASSESSMENTS_READ, ASSIGNMENTS_MANAGE, GRADES_WRITE
from school_backend.services.grades import GradeService

grade_router = APIRouter()


@grade_router.post("/assessments", response_model=AssessmentGet, status_code=status.HTTP_201_CREATED)
def create_assessment(
    payload: AssessmentCreate,
    principal: Annotated[Principal, Depends(require_permission(ASSIGNMENTS_MANAGE))],
    db: Session = Depends(get_db)
):
    return GradeService(db).create_assessment(payload)


@grade_router.get("/assessments", response_model=List[AssessmentGet])
def list_assessments(
    principal: Annotated[Principal, Depends(require_permission(ASSESSMENTS_READ))],
    teaching_assignment_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return GradeService(db).list_assessments(teaching_assignment_id)


@grade_router.get("/assessments/{assessment_id}", response_model=AssessmentGet)
def get_assessment(
    assessment_id: str,
    principal: Annotated[Principal, Depends(require_permission(ASSESSMENTS_READ))],
    db: Session = Depends(get_db)
):
    return GradeService(db).get_assessment(assessment_id)


@grade_router.patch("/assessments/{assessment_id}", response_model=AssessmentGet)
def update_assessment(
    assessment_id: str,
    payload: AssessmentUpdate,
    principal: Annotated[Principal, Depends(require_permission(ASSIGNMENTS_MANAGE))],
    db: Session = Depends(get_db)
):
    return GradeService(db).update_assessment(assessment_id, payload)


@grade_router.delete("/assessments/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assessment(
    assessment_id: str,
    principal: Annotated[Principal, Depends(require_permission(ASSIGNMENTS_MANAGE))],
    db: Session = Depends(get_db)
):
    GradeService(db).delete_assessment(assessment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@grade_router.put("/assessments/{assessment_id}/scores", response_model=AssessmentGet)
def submit_scores(
    assessment_id: str,
    payload: SubmitScoresRequest,
    principal: Annotated[Principal, Depends(require_permission(GRADES_WRITE))],
    db: Session = Depends(get_db)
):
    """Insert or overwrite scores; students not listed keep their current score"""
    return GradeService(db).submit_scores(assessment_id, payload.scores)
