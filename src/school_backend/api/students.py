from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.people import LinkUserRequest
from school_backend.interface.students import (
    GuardianInfo,
    SetGuardianRequest,
    StudentCreate,
    StudentGet,
    StudentList,
    StudentQuery,
    StudentUpdate,
    SyncParentsRequest
)
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    STUDENTS_CREATE,
    STUDENTS_DELETE,
    STUDENTS_MANAGE_ACCOUNT,
    STUDENTS_MANAGE_GUARDIAN,
    STUDENTS_MANAGE_PARENTS,
    STUDENTS_READ,
    STUDENTS_UPDATE
)
from school_backend.services.students import StudentService

student_router = APIRouter()


@student_router.post("", response_model=StudentGet, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreate,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_CREATE))],
    db: Session = Depends(get_db)
):
    service = StudentService(db)
    student = service.create(payload)
    return service.detail(student.id)


@student_router.get("", response_model=List[StudentList])
def list_students(
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_READ))],
    params: StudentQuery = Depends(),
    db: Session = Depends(get_db)
):
    return StudentService(db).list(params.search, params.skip, params.limit)


@student_router.get("/{student_id}", response_model=StudentGet)
def get_student(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_READ))],
    db: Session = Depends(get_db)
):
    """Student with decrypted identity numbers, parents and guardian"""
    return StudentService(db).detail(student_id)


@student_router.patch("/{student_id}", response_model=StudentGet)
def update_student(
    student_id: str,
    payload: StudentUpdate,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_UPDATE))],
    db: Session = Depends(get_db)
):
    service = StudentService(db)
    service.update(student_id, payload)
    return service.detail(student_id)


@student_router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_DELETE))],
    db: Session = Depends(get_db)
):
    StudentService(db).delete(student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@student_router.get("/{student_id}/guardian", response_model=Optional[GuardianInfo])
def get_guardian(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_READ))],
    db: Session = Depends(get_db)
):
    """Resolved guardian, null when none is set"""
    return StudentService(db).detail(student_id).guardian


@student_router.put("/{student_id}/guardian", response_model=StudentGet)
def set_guardian(
    student_id: str,
    payload: SetGuardianRequest,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_MANAGE_GUARDIAN))],
    db: Session = Depends(get_db)
):
    service = StudentService(db)
    service.set_guardian(student_id, payload.guardian_id, payload.guardian_type)
    return service.detail(student_id)


@student_router.delete("/{student_id}/guardian", response_model=StudentGet)
def remove_guardian(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_MANAGE_GUARDIAN))],
    db: Session = Depends(get_db)
):
    service = StudentService(db)
    service.remove_guardian(student_id)
    return service.detail(student_id)


@student_router.put("/{student_id}/parents", response_model=StudentGet)
def sync_parents(
    student_id: str,
    payload: SyncParentsRequest,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_MANAGE_PARENTS))],
    db: Session = Depends(get_db)
):
    """Replace every parent link of the student with the given list"""
    service = StudentService(db)
    service.sync_parents(student_id, payload.parents)
    return service.detail(student_id)


@student_router.put("/{student_id}/user", response_model=StudentGet)
def link_user(
    student_id: str,
    payload: LinkUserRequest,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_MANAGE_ACCOUNT))],
    db: Session = Depends(get_db)
):
    service = StudentService(db)
    service.link_user(student_id, payload.user_id)
    return service.detail(student_id)


@student_router.delete("/{student_id}/user", response_model=StudentGet)
def unlink_user(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(STUDENTS_MANAGE_ACCOUNT))],
    db: Session = Depends(get_db)
):
    service = StudentService(db)
    service.unlink_user(student_id)
    return service.detail(student_id)
