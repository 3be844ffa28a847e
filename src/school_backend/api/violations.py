from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.violations import (
    StudentViolationCreate,
    StudentPointsGet,
    StudentViolationGet,
    StudentViolationQuery,
    StudentViolationUpdate,
    ViolationCategoryCreate,
    ViolationCategoryGet,
    ViolationCategoryUpdate,
    ViolationTypeCreate,
    ViolationTypeGet,
    ViolationTypeUpdate
)
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    VIOLATION_CATEGORY_MANAGE,
    VIOLATION_CATEGORY_READ,
    VIOLATION_RECORD_CREATE,
    VIOLATION_RECORD_DELETE,
    VIOLATION_RECORD_READ,
    VIOLATION_RECORD_READ_ALL,
    VIOLATION_RECORD_UPDATE,
    VIOLATION_TYPE_MANAGE,
    VIOLATION_TYPE_READ
)
from school_backend.services.violations import ViolationService

violation_router = APIRouter()


# Categories

@violation_router.post("/categories", response_model=ViolationCategoryGet, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: ViolationCategoryCreate,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_CATEGORY_MANAGE))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).create_category(payload)


@violation_router.get("/categories", response_model=List[ViolationCategoryGet])
def list_categories(
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_CATEGORY_READ))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).list_categories()


@violation_router.patch("/categories/{category_id}", response_model=ViolationCategoryGet)
def update_category(
    category_id: str,
    payload: ViolationCategoryUpdate,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_CATEGORY_MANAGE))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).update_category(category_id, payload)


@violation_router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_CATEGORY_MANAGE))],
    db: Session = Depends(get_db)
):
    ViolationService(db).delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Types

@violation_router.post("/types", response_model=ViolationTypeGet, status_code=status.HTTP_201_CREATED)
def create_type(
    payload: ViolationTypeCreate,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_TYPE_MANAGE))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).create_type(payload)


@violation_router.get("/types", response_model=List[ViolationTypeGet])
def list_types(
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_TYPE_READ))],
    category_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return ViolationService(db).list_types(category_id)


@violation_router.patch("/types/{type_id}", response_model=ViolationTypeGet)
def update_type(
    type_id: str,
    payload: ViolationTypeUpdate,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_TYPE_MANAGE))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).update_type(type_id, payload)


@violation_router.delete("/types/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_type(
    type_id: str,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_TYPE_MANAGE))],
    db: Session = Depends(get_db)
):
    ViolationService(db).delete_type(type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Student violations

@violation_router.post("/records", response_model=StudentViolationGet, status_code=status.HTTP_201_CREATED)
def record_violation(
    payload: StudentViolationCreate,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_CREATE))],
    db: Session = Depends(get_db)
):
    """Record a violation; its points are copied from the violation type"""
    return ViolationService(db).record(payload)


@violation_router.get("/records", response_model=List[StudentViolationGet])
def list_violations(
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_READ_ALL))],
    params: StudentViolationQuery = Depends(),
    db: Session = Depends(get_db)
):
    return ViolationService(db).list_records(params.student_id, params.skip, params.limit)


@violation_router.get("/students/{student_id}", response_model=List[StudentViolationGet])
def list_student_violations(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_READ))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).list_records(student_id)


@violation_router.get("/records/{violation_id}", response_model=StudentViolationGet)
def get_violation(
    violation_id: str,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_READ))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).get_record(violation_id)


@violation_router.patch("/records/{violation_id}", response_model=StudentViolationGet)
def update_violation(
    violation_id: str,
    payload: StudentViolationUpdate,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_UPDATE))],
    db: Session = Depends(get_db)
):
    return ViolationService(db).update_record(violation_id, payload)


@violation_router.delete("/records/{violation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_violation(
    violation_id: str,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_DELETE))],
    db: Session = Depends(get_db)
):
    ViolationService(db).delete_record(violation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@violation_router.get("/students/{student_id}/points", response_model=StudentPointsGet)
def student_violation_points(
    student_id: str,
    principal: Annotated[Principal, Depends(require_permission(VIOLATION_RECORD_READ))],
    db: Session = Depends(get_db)
):
    return StudentPointsGet(student_id=student_id, total_points=ViolationService(db).total_points(student_id))
