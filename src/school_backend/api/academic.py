from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.academic import (
    AcademicYearCreate,
    AcademicYearGet,
    AcademicYearUpdate,
    ClassroomCreate,
    ClassroomGet,
    ClassroomList,
    ClassroomStudentsRequest,
    ClassroomUpdate,
    ScheduleCreate,
    ScheduleGet,
    ScheduleQuery,
    ScheduleUpdate,
    SubjectCreate,
    SubjectGet,
    SubjectUpdate,
    TeachingAssignmentCreate,
    TeachingAssignmentGet,
    TeachingAssignmentUpdate
)
from school_backend.permissions.auth import get_current_principal, require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    ACADEMIC_READ,
    ACADEMIC_YEARS_MANAGE,
    ASSIGNMENTS_MANAGE,
    CLASSROOMS_MANAGE,
    CLASSROOMS_MANAGE_STUDENTS,
    SCHEDULES_MANAGE,
    SUBJECTS_MANAGE
)
from school_backend.services.academic import (
    AcademicYearService,
    ClassroomService,
    ScheduleService,
    SubjectService,
    TeachingAssignmentService
)

academic_year_router = APIRouter()
subject_router = APIRouter()
classroom_router = APIRouter()
teaching_assignment_router = APIRouter()
schedule_router = APIRouter()

Read = Annotated[Principal, Depends(require_permission(ACADEMIC_READ))]


# Academic years

@academic_year_router.post("", response_model=AcademicYearGet, status_code=status.HTTP_201_CREATED)
def create_academic_year(
    payload: AcademicYearCreate,
    principal: Annotated[Principal, Depends(require_permission(ACADEMIC_YEARS_MANAGE))],
    db: Session = Depends(get_db)
):
    return AcademicYearService(db).create(payload)


@academic_year_router.get("", response_model=List[AcademicYearGet])
def list_academic_years(principal: Read, db: Session = Depends(get_db)):
    return AcademicYearService(db).list()


@academic_year_router.get("/active", response_model=AcademicYearGet)
def get_active_academic_year(principal: Read, db: Session = Depends(get_db)):
    return AcademicYearService(db).active()


@academic_year_router.get("/{year_id}", response_model=AcademicYearGet)
def get_academic_year(year_id: str, principal: Read, db: Session = Depends(get_db)):
    return AcademicYearService(db).get(year_id)


@academic_year_router.patch("/{year_id}", response_model=AcademicYearGet)
def update_academic_year(
    year_id: str,
    payload: AcademicYearUpdate,
    principal: Annotated[Principal, Depends(require_permission(ACADEMIC_YEARS_MANAGE))],
    db: Session = Depends(get_db)
):
    return AcademicYearService(db).update(year_id, payload)


@academic_year_router.post("/{year_id}/activate", response_model=AcademicYearGet)
def activate_academic_year(
    year_id: str,
    principal: Annotated[Principal, Depends(require_permission(ACADEMIC_YEARS_MANAGE))],
    db: Session = Depends(get_db)
):
    """Make this the only active academic year"""
    return AcademicYearService(db).activate(year_id)


@academic_year_router.delete("/{year_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_academic_year(
    year_id: str,
    principal: Annotated[Principal, Depends(require_permission(ACADEMIC_YEARS_MANAGE))],
    db: Session = Depends(get_db)
):
    AcademicYearService(db).delete(year_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Subjects

@subject_router.post("", response_model=SubjectGet, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    principal: Annotated[Principal, Depends(require_permission(SUBJECTS_MANAGE))],
    db: Session = Depends(get_db)
):
    return SubjectService(db).create(payload)


@subject_router.get("", response_model=List[SubjectGet])
def list_subjects(principal: Read, db: Session = Depends(get_db)):
    return SubjectService(db).list()


@subject_router.get("/{subject_id}", response_model=SubjectGet)
def get_subject(subject_id: str, principal: Read, db: Session = Depends(get_db)):
    return SubjectService(db).get(subject_id)


@subject_router.patch("/{subject_id}", response_model=SubjectGet)
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    principal: Annotated[Principal, Depends(require_permission(SUBJECTS_MANAGE))],
    db: Session = Depends(get_db)
):
    return SubjectService(db).update(subject_id, payload)


@subject_router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(
    subject_id: str,
    principal: Annotated[Principal, Depends(require_permission(SUBJECTS_MANAGE))],
    db: Session = Depends(get_db)
):
    SubjectService(db).delete(subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Classrooms

@classroom_router.post("", response_model=ClassroomGet, status_code=status.HTTP_201_CREATED)
def create_classroom(
    payload: ClassroomCreate,
    principal: Annotated[Principal, Depends(require_permission(CLASSROOMS_MANAGE))],
    db: Session = Depends(get_db)
):
    return ClassroomService(db).create(payload)


@classroom_router.get("", response_model=List[ClassroomList])
def list_classrooms(principal: Read, academic_year_id: Optional[str] = None, db: Session = Depends(get_db)):
    return ClassroomService(db).list(academic_year_id)


@classroom_router.get("/{classroom_id}", response_model=ClassroomGet)
def get_classroom(classroom_id: str, principal: Read, db: Session = Depends(get_db)):
    return ClassroomService(db).get(classroom_id)


@classroom_router.patch("/{classroom_id}", response_model=ClassroomGet)
def update_classroom(
    classroom_id: str,
    payload: ClassroomUpdate,
    principal: Annotated[Principal, Depends(require_permission(CLASSROOMS_MANAGE))],
    db: Session = Depends(get_db)
):
    return ClassroomService(db).update(classroom_id, payload)


@classroom_router.delete("/{classroom_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_classroom(
    classroom_id: str,
    principal: Annotated[Principal, Depends(require_permission(CLASSROOMS_MANAGE))],
    db: Session = Depends(get_db)
):
    ClassroomService(db).delete(classroom_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@classroom_router.post("/{classroom_id}/students", response_model=ClassroomGet)
def add_classroom_students(
    classroom_id: str,
    payload: ClassroomStudentsRequest,
    principal: Annotated[Principal, Depends(require_permission(CLASSROOMS_MANAGE_STUDENTS))],
    db: Session = Depends(get_db)
):
    return ClassroomService(db).add_students(classroom_id, payload.student_ids)


@classroom_router.delete("/{classroom_id}/students/{student_id}", response_model=ClassroomGet)
def remove_classroom_student(
    classroom_id: str,
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(CLASSROOMS_MANAGE_STUDENTS))],
    db: Session = Depends(get_db)
):
    return ClassroomService(db).remove_student(classroom_id, student_id)


# Teaching assignments

@teaching_assignment_router.post("", response_model=TeachingAssignmentGet, status_code=status.HTTP_201_CREATED)
def create_teaching_assignment(
    payload: TeachingAssignmentCreate,
    principal: Annotated[Principal, Depends(require_permission(ASSIGNMENTS_MANAGE))],
    db: Session = Depends(get_db)
):
    return TeachingAssignmentService(db).create(payload)


@teaching_assignment_router.get("", response_model=List[TeachingAssignmentGet])
def list_teaching_assignments(
    principal: Read,
    classroom_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return TeachingAssignmentService(db).list(classroom_id, teacher_id)


@teaching_assignment_router.get("/{assignment_id}", response_model=TeachingAssignmentGet)
def get_teaching_assignment(assignment_id: str, principal: Read, db: Session = Depends(get_db)):
    return TeachingAssignmentService(db).get(assignment_id)


@teaching_assignment_router.patch("/{assignment_id}", response_model=TeachingAssignmentGet)
def update_teaching_assignment(
    assignment_id: str,
    payload: TeachingAssignmentUpdate,
    principal: Annotated[Principal, Depends(require_permission(ASSIGNMENTS_MANAGE))],
    db: Session = Depends(get_db)
):
    return TeachingAssignmentService(db).update(assignment_id, payload)


@teaching_assignment_router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_teaching_assignment(
    assignment_id: str,
    principal: Annotated[Principal, Depends(require_permission(ASSIGNMENTS_MANAGE))],
    db: Session = Depends(get_db)
):
    TeachingAssignmentService(db).delete(assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Schedules

@schedule_router.post("", response_model=ScheduleGet, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    principal: Annotated[Principal, Depends(require_permission(SCHEDULES_MANAGE))],
    db: Session = Depends(get_db)
):
    return ScheduleService(db).create(payload)


@schedule_router.get("", response_model=List[ScheduleGet])
def list_schedules(principal: Read, params: ScheduleQuery = Depends(), db: Session = Depends(get_db)):
    return ScheduleService(db).list(params)


@schedule_router.get("/today", response_model=List[ScheduleGet])
def today_schedules(principal: Annotated[Principal, Depends(get_current_principal)], db: Session = Depends(get_db)):
    """Today's lessons for the teacher linked to the calling user"""
    return ScheduleService(db).today_for_user(principal.get_user_id_or_throw())


@schedule_router.get("/{schedule_id}", response_model=ScheduleGet)
def get_schedule(schedule_id: str, principal: Read, db: Session = Depends(get_db)):
    return ScheduleService(db).get(schedule_id)


@schedule_router.patch("/{schedule_id}", response_model=ScheduleGet)
def update_schedule(
    schedule_id: str,
    payload: ScheduleUpdate,
    principal: Annotated[Principal, Depends(require_permission(SCHEDULES_MANAGE))],
    db: Session = Depends(get_db)
):
    return ScheduleService(db).update(schedule_id, payload)


@schedule_router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    schedule_id: str,
    principal: Annotated[Principal, Depends(require_permission(SCHEDULES_MANAGE))],
    db: Session = Depends(get_db)
):
    ScheduleService(db).delete(schedule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
