from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.employees import (
    EmployeeCreate,
    EmployeeGet,
    EmployeeList,
    EmployeeQuery,
    EmployeeUpdate
)
from school_backend.interface.people import LinkUserRequest
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    EMPLOYEES_CREATE,
    EMPLOYEES_DELETE,
    EMPLOYEES_MANAGE_ACCOUNT,
    EMPLOYEES_READ,
    EMPLOYEES_UPDATE
)
from school_backend.services.employees import EmployeeService

employee_router = APIRouter()


@employee_router.post("", response_model=EmployeeGet, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_CREATE))],
    db: Session = Depends(get_db)
):
    service = EmployeeService(db)
    return service.detail(service.create(payload).id)


@employee_router.get("", response_model=List[EmployeeList])
def list_employees(
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_READ))],
    params: EmployeeQuery = Depends(),
    db: Session = Depends(get_db)
):
    return EmployeeService(db).list(params.search, params.skip, params.limit)


@employee_router.get("/{employee_id}", response_model=EmployeeGet)
def get_employee(
    employee_id: str,
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_READ))],
    db: Session = Depends(get_db)
):
    return EmployeeService(db).detail(employee_id)


@employee_router.patch("/{employee_id}", response_model=EmployeeGet)
def update_employee(
    employee_id: str,
    payload: EmployeeUpdate,
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_UPDATE))],
    db: Session = Depends(get_db)
):
    service = EmployeeService(db)
    service.update(employee_id, payload)
    return service.detail(employee_id)


@employee_router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: str,
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_DELETE))],
    db: Session = Depends(get_db)
):
    EmployeeService(db).delete(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@employee_router.put("/{employee_id}/user", response_model=EmployeeGet)
def link_user(
    employee_id: str,
    payload: LinkUserRequest,
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_MANAGE_ACCOUNT))],
    db: Session = Depends(get_db)
):
    service = EmployeeService(db)
    service.link_user(employee_id, payload.user_id)
    return service.detail(employee_id)


@employee_router.delete("/{employee_id}/user", response_model=EmployeeGet)
def unlink_user(
    employee_id: str,
    principal: Annotated[Principal, Depends(require_permission(EMPLOYEES_MANAGE_ACCOUNT))],
    db: Session = Depends(get_db)
):
    service = EmployeeService(db)
    service.unlink_user(employee_id)
    return service.detail(employee_id)
