from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.parents import ParentCreate, ParentGet, ParentList, ParentQuery, ParentUpdate
from school_backend.interface.people import LinkUserRequest
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    PARENTS_CREATE,
    PARENTS_DELETE,
    PARENTS_MANAGE_ACCOUNT,
    PARENTS_READ,
    PARENTS_UPDATE
)
from school_backend.services.parents import ParentService

parent_router = APIRouter()


@parent_router.post("", response_model=ParentGet, status_code=status.HTTP_201_CREATED)
def create_parent(
    payload: ParentCreate,
    principal: Annotated[Principal, Depends(require_permission(PARENTS_CREATE))],
    db: Session = Depends(get_db)
):
    service = ParentService(db)
    return service.detail(service.create(payload).id)


@parent_router.get("", response_model=List[ParentList])
def list_parents(
    principal: Annotated[Principal, Depends(require_permission(PARENTS_READ))],
    params: ParentQuery = Depends(),
    db: Session = Depends(get_db)
):
    return ParentService(db).list(params.search, params.skip, params.limit)


@parent_router.get("/{parent_id}", response_model=ParentGet)
def get_parent(
    parent_id: str,
    principal: Annotated[Principal, Depends(require_permission(PARENTS_READ))],
    db: Session = Depends(get_db)
):
    return ParentService(db).detail(parent_id)


@parent_router.patch("/{parent_id}", response_model=ParentGet)
def update_parent(
    parent_id: str,
    payload: ParentUpdate,
    principal: Annotated[Principal, Depends(require_permission(PARENTS_UPDATE))],
    db: Session = Depends(get_db)
):
    service = ParentService(db)
    service.update(parent_id, payload)
    return service.detail(parent_id)


@parent_router.delete("/{parent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_parent(
    parent_id: str,
    principal: Annotated[Principal, Depends(require_permission(PARENTS_DELETE))],
    db: Session = Depends(get_db)
):
    """Delete a parent; students using it as guardian lose that reference"""
    ParentService(db).delete(parent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@parent_router.put("/{parent_id}/user", response_model=ParentGet)
def link_user(
    parent_id: str,
    payload: LinkUserRequest,
    principal: Annotated[Principal, Depends(require_permission(PARENTS_MANAGE_ACCOUNT))],
    db: Session = Depends(get_db)
):
    service = ParentService(db)
    service.link_user(parent_id, payload.user_id)
    return service.detail(parent_id)


@parent_router.delete("/{parent_id}/user", response_model=ParentGet)
def unlink_user(
    parent_id: str,
    principal: Annotated[Principal, Depends(require_permission(PARENTS_MANAGE_ACCOUNT))],
    db: Session = Depends(get_db)
):
    service = ParentService(db)
    service.unlink_user(parent_id)
    return service.detail(parent_id)
