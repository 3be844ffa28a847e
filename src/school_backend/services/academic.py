"""
Academic calendar services: years, subjects, classrooms, teaching
assignments and weekly schedules.
"""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, ConflictException, NotFoundException
from ..database import transaction
from ..interface.academic import (
    AcademicYearCreate,
    AcademicYearUpdate,
    ClassroomCreate,
    ClassroomUpdate,
    ScheduleCreate,
    ScheduleQuery,
    ScheduleUpdate,
    SubjectCreate,
    SubjectUpdate,
    TeachingAssignmentCreate,
    TeachingAssignmentUpdate
)
from ..model.academic import AcademicYear, Classroom, Schedule, Subject, TeachingAssignment
from ..repositories.academic import (
    AcademicYearRepository,
    ClassroomRepository,
    ScheduleRepository,
    SubjectRepository,
    TeachingAssignmentRepository
)
from ..repositories.people import EmployeeRepository, StudentRepository
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)

ACTIVE = "ACTIVE"
INACTIVE = "INACTIVE"


class AcademicYearService:

    def __init__(self, db: Session):
        self.db = db
        self.years = AcademicYearRepository(db)

    def create(self, payload: AcademicYearCreate) -> AcademicYear:
        if payload.start_date >= payload.end_date:
            raise BadRequestException("start date must be before end date")

        with repository_errors(), transaction(self.db):
            if payload.status == ACTIVE:
                self.years.deactivate_all()
            year = self.years.add(AcademicYear(**payload.model_dump()))

        self.db.refresh(year)
        return year

    def list(self) -> List[AcademicYear]:
        return self.db.query(AcademicYear).order_by(AcademicYear.start_date.desc()).all()

    def get(self, year_id: str) -> AcademicYear:
        return get_or_404(self.years, year_id, "academic year not found")

    def active(self) -> AcademicYear:
        year = self.years.find_active()
        if year is None:
            raise NotFoundException("no active academic year")
        return year

    def update(self, year_id: str, payload: AcademicYearUpdate) -> AcademicYear:
        year = self.get(year_id)
        updates = patch_fields(payload)

        start = updates.get("start_date") or year.start_date
        end = updates.get("end_date") or year.end_date
        if start >= end:
            raise BadRequestException("start date must be before end date")

        status = updates.pop("status", None)
        if status == ACTIVE:
            return self._apply_and_activate(year, updates)

        if status == INACTIVE:
            updates["status"] = INACTIVE
        with repository_errors():
            return self.years.save(year, updates)

    def activate(self, year_id: str) -> AcademicYear:
        """Make one year the only ACTIVE year"""
        return self._apply_and_activate(self.get(year_id), {})

    def delete(self, year_id: str) -> None:
        year = self.get(year_id)
        if year.status == ACTIVE:
            raise BadRequestException("Cannot delete active academic year")
        with repository_errors():
            self.years.delete(year_id)

    def _apply_and_activate(self, year: AcademicYear, updates: dict) -> AcademicYear:
        with repository_errors(), transaction(self.db):
            self.years.deactivate_all()
            for key, value in updates.items():
                setattr(year, key, value)
            year.status = ACTIVE

        self.db.refresh(year)
        logger.info(f"Academic year {year.name} activated")
        return year


class SubjectService:

    def __init__(self, db: Session):
        self.db = db
        self.subjects = SubjectRepository(db)

    def create(self, payload: SubjectCreate) -> Subject:
        if self.subjects.find_by_code(payload.code) is not None:
            raise ConflictException("subject code already exists")
        with repository_errors("subject code already exists"):
            return self.subjects.create(Subject(**payload.model_dump()))

    def list(self) -> List[Subject]:
        return self.db.query(Subject).order_by(Subject.code).all()

    def get(self, subject_id: str) -> Subject:
        return get_or_404(self.subjects, subject_id, "subject not found")

    def update(self, subject_id: str, payload: SubjectUpdate) -> Subject:
        subject = self.get(subject_id)
        updates = patch_fields(payload)
        code = updates.get("code")
        if code and code != subject.code and self.subjects.find_by_code(code) is not None:
            raise ConflictException("subject code already exists")
        with repository_errors("subject code already exists"):
            return self.subjects.save(subject, updates)

    def delete(self, subject_id: str) -> None:
        self.get(subject_id)
        with repository_errors():
            self.subjects.delete(subject_id)


class ClassroomService:

    def __init__(self, db: Session):
        self.db = db
        self.classrooms = ClassroomRepository(db)
        self.years = AcademicYearRepository(db)
        self.employees = EmployeeRepository(db)
        self.students = StudentRepository(db)

    def create(self, payload: ClassroomCreate) -> Classroom:
        values = payload.model_dump()
        self._check_references(values)
        with repository_errors():
            return self.classrooms.create(Classroom(**values))

    def list(self, academic_year_id: Optional[str] = None) -> List[Classroom]:
        return self.classrooms.list_by_academic_year(academic_year_id)

    def get(self, classroom_id: str) -> Classroom:
        return get_or_404(self.classrooms, classroom_id, "classroom not found")

    def update(self, classroom_id: str, payload: ClassroomUpdate) -> Classroom:
        classroom = self.get(classroom_id)
        updates = patch_fields(payload)
        if updates.get("academic_year_id") is None:
            updates.pop("academic_year_id", None)
        self._check_references(updates)
        with repository_errors():
            return self.classrooms.save(classroom, updates)

    def delete(self, classroom_id: str) -> None:
        self.get(classroom_id)
        with repository_errors():
            self.classrooms.delete(classroom_id)

    def add_students(self, classroom_id: str, student_ids: List[str]) -> Classroom:
        """Enrol students; ones already in the classroom are left as they are"""
        classroom = self.get(classroom_id)
        enrolled = {student.id for student in classroom.students}

        to_add = []
        for student_id in dict.fromkeys(student_ids):
            student = self.students.get_by_id_optional(student_id)
            if student is None:
                raise NotFoundException(f"student not found: {student_id}")
            if student.id not in enrolled:
                to_add.append(student)

        with repository_errors(), transaction(self.db):
            classroom.students.extend(to_add)

        self.db.refresh(classroom)
        return classroom

    def remove_student(self, classroom_id: str, student_id: str) -> Classroom:
        classroom = self.get(classroom_id)
        student = next((s for s in classroom.students if s.id == student_id), None)
        if student is None:
            raise NotFoundException("student is not in this classroom")

        with repository_errors(), transaction(self.db):
            classroom.students.remove(student)

        self.db.refresh(classroom)
        return classroom

    def _check_references(self, values: dict) -> None:
        if "academic_year_id" in values and not self.years.exists(values["academic_year_id"]):
            raise NotFoundException("academic year not found")
        teacher_id = values.get("homeroom_teacher_id")
        if teacher_id and not self.employees.exists(teacher_id):
            raise NotFoundException("homeroom teacher not found")


class TeachingAssignmentService:

    def __init__(self, db: Session):
        self.db = db
        self.assignments = TeachingAssignmentRepository(db)
        self.classrooms = ClassroomRepository(db)
        self.subjects = SubjectRepository(db)
        self.employees = EmployeeRepository(db)

    def create(self, payload: TeachingAssignmentCreate) -> TeachingAssignment:
        if not self.classrooms.exists(payload.classroom_id):
            raise NotFoundException("classroom not found")
        if not self.subjects.exists(payload.subject_id):
            raise NotFoundException("subject not found")
        if not self.employees.exists(payload.teacher_id):
            raise NotFoundException("teacher not found")
        if self.assignments.find_by_classroom_subject(payload.classroom_id, payload.subject_id) is not None:
            raise ConflictException("this subject already has a teacher in this class")

        with repository_errors("this subject already has a teacher in this class"):
            return self.assignments.create(TeachingAssignment(**payload.model_dump()))

    def list(self, classroom_id: Optional[str] = None, teacher_id: Optional[str] = None) -> List[TeachingAssignment]:
        return self.assignments.list(classroom_id=classroom_id, teacher_id=teacher_id)

    def get(self, assignment_id: str) -> TeachingAssignment:
        return get_or_404(self.assignments, assignment_id, "teaching assignment not found")

    def update(self, assignment_id: str, payload: TeachingAssignmentUpdate) -> TeachingAssignment:
        assignment = self.get(assignment_id)
        if not self.employees.exists(payload.teacher_id):
            raise NotFoundException("teacher not found")
        with repository_errors():
            return self.assignments.save(assignment, {"teacher_id": payload.teacher_id})

    def delete(self, assignment_id: str) -> None:
        self.get(assignment_id)
        with repository_errors():
            self.assignments.delete(assignment_id)


class ScheduleService:
    """
    Weekly timetable. Two schedules on the same day overlap when
    ``start < other.end and end > other.start``; a classroom and a teacher
    can each be in only one place at a time.
    """

    def __init__(self, db: Session):
        self.db = db
        self.schedules = ScheduleRepository(db)
        self.assignments = TeachingAssignmentRepository(db)
        self.employees = EmployeeRepository(db)

    def create(self, payload: ScheduleCreate) -> Schedule:
        assignment = self._assignment(payload.teaching_assignment_id)
        self._check_slot(assignment, payload.day_of_week, payload.start_time, payload.end_time)
        with repository_errors():
            return self.schedules.create(Schedule(**payload.model_dump()))

    def list(self, query: Optional[ScheduleQuery] = None) -> List[Schedule]:
        params = query.model_dump() if query is not None else {}
        return self.schedules.list_by(**params)

    def get(self, schedule_id: str) -> Schedule:
        return get_or_404(self.schedules, schedule_id, "schedule not found")

    def update(self, schedule_id: str, payload: ScheduleUpdate) -> Schedule:
        schedule = self.get(schedule_id)
        updates = {key: value for key, value in patch_fields(payload).items() if value is not None}

        assignment_id = updates.get("teaching_assignment_id", schedule.teaching_assignment_id)
        assignment = self._assignment(assignment_id)
        self._check_slot(
            assignment,
            updates.get("day_of_week", schedule.day_of_week),
            updates.get("start_time", schedule.start_time),
            updates.get("end_time", schedule.end_time),
            exclude_id=schedule.id
        )
        with repository_errors():
            return self.schedules.save(schedule, updates)

    def delete(self, schedule_id: str) -> None:
        self.get(schedule_id)
        with repository_errors():
            self.schedules.delete(schedule_id)

    def today_for_user(self, user_id: str, now: Optional[datetime] = None) -> List[Schedule]:
        """Schedules the employee linked to user_id teaches today"""
        employee = self.employees.find_by_user_id(user_id)
        if employee is None:
            raise NotFoundException("teacher/employee profile not found")
        # isoweekday: Monday = 1 ... Sunday = 7
        day = (now or datetime.now()).isoweekday()
        return self.schedules.list_by(teacher_id=employee.id, day_of_week=day)

    def _assignment(self, assignment_id: str) -> TeachingAssignment:
        assignment = self.assignments.get_by_id_optional(assignment_id)
        if assignment is None:
            raise NotFoundException("teaching assignment not found")
        return assignment

    def _check_slot(self, assignment: TeachingAssignment, day_of_week: int, start_time: str, end_time: str,
                    exclude_id: Optional[str] = None) -> None:
        if end_time <= start_time:
            raise BadRequestException("end time must be after start time")

        if self.schedules.find_classroom_conflict(assignment.classroom_id, day_of_week, start_time, end_time, exclude_id):
            raise ConflictException("Classroom is occupied at this time")

        if self.schedules.find_teacher_conflict(assignment.teacher_id, day_of_week, start_time, end_time, exclude_id):
            raise ConflictException("Teacher is teaching in another class at this time")
