import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..database import transaction
from ..interface.grades import AssessmentCreate, AssessmentUpdate, ScoreInput
from ..model.grade import Assessment, StudentScore
from ..repositories.academic import TeachingAssignmentRepository
from ..repositories.grade import AssessmentRepository, StudentScoreRepository
from ..repositories.people import StudentRepository
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)


class GradeService:
    """Assessments per teaching assignment and the scores students earn on them"""

    def __init__(self, db: Session):
        self.db = db
        self.assessments = AssessmentRepository(db)
        self.scores = StudentScoreRepository(db)
        self.assignments = TeachingAssignmentRepository(db)
        self.students = StudentRepository(db)

    def create_assessment(self, payload: AssessmentCreate) -> Assessment:
        if not self.assignments.exists(payload.teaching_assignment_id):
            raise NotFoundException("teaching assignment not found")
        with repository_errors():
            return self.assessments.create(Assessment(**payload.model_dump()))

    def list_assessments(self, teaching_assignment_id: Optional[str] = None) -> List[Assessment]:
        return self.assessments.list_by_assignment(teaching_assignment_id)

    def get_assessment(self, assessment_id: str) -> Assessment:
        return get_or_404(self.assessments, assessment_id, "assessment not found")

    def update_assessment(self, assessment_id: str, payload: AssessmentUpdate) -> Assessment:
        assessment = self.get_assessment(assessment_id)
        updates = {key: value for key, value in patch_fields(payload).items() if value is not None or key == "description"}
        max_score = updates.get("max_score")
        if max_score is not None and any(score.score > max_score for score in assessment.scores):
            raise BadRequestException("existing scores exceed the new max_score")
        with repository_errors():
            return self.assessments.save(assessment, updates)

    def delete_assessment(self, assessment_id: str) -> None:
        self.get_assessment(assessment_id)
        with repository_errors():
            self.assessments.delete(assessment_id)

    def submit_scores(self, assessment_id: str, entries: List[ScoreInput]) -> Assessment:
        """Insert or overwrite one score per student for the assessment"""
        assessment = self.get_assessment(assessment_id)

        seen = set()
        for entry in entries:
            if entry.student_id in seen:
                raise BadRequestException("duplicate student_id")
            seen.add(entry.student_id)
            if entry.score < 0 or entry.score > assessment.max_score:
                raise BadRequestException(f"score must be between 0 and {assessment.max_score}")
            if not self.students.exists(entry.student_id):
                raise NotFoundException(f"student not found: {entry.student_id}")

        with repository_errors(), transaction(self.db):
            for entry in entries:
                score = self.scores.find_for(assessment.id, entry.student_id)
                if score is None:
                    self.scores.add(StudentScore(
                        assessment_id=assessment.id,
                        student_id=entry.student_id,
                        score=entry.score,
                        feedback=entry.feedback
                    ))
                else:
                    score.score = entry.score
                    score.feedback = entry.feedback

        self.db.refresh(assessment)
        logger.info(f"Saved {len(entries)} score(s) for assessment {assessment_id}")
        return assessment
