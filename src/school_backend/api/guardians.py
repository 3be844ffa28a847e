from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.guardians import (
    GuardianCreate,
    GuardianGet,
    GuardianList,
    GuardianQuery,
    GuardianUpdate
)
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import GUARDIANS_CREATE, GUARDIANS_DELETE, GUARDIANS_READ, GUARDIANS_UPDATE
from school_backend.services.guardians import GuardianService

guardian_router = APIRouter()


@guardian_router.post("", response_model=GuardianGet, status_code=status.HTTP_201_CREATED)
def create_guardian(
    payload: GuardianCreate,
    principal: Annotated[Principal, Depends(require_permission(GUARDIANS_CREATE))],
    db: Session = Depends(get_db)
):
    service = GuardianService(db)
    return service.detail(service.create(payload).id)


@guardian_router.get("", response_model=List[GuardianList])
def list_guardians(
    principal: Annotated[Principal, Depends(require_permission(GUARDIANS_READ))],
    params: GuardianQuery = Depends(),
    db: Session = Depends(get_db)
):
    return GuardianService(db).list(params.search, params.skip, params.limit)


@guardian_router.get("/{guardian_id}", response_model=GuardianGet)
def get_guardian(
    guardian_id: str,
    principal: Annotated[Principal, Depends(require_permission(GUARDIANS_READ))],
    db: Session = Depends(get_db)
):
    return GuardianService(db).detail(guardian_id)


@guardian_router.patch("/{guardian_id}", response_model=GuardianGet)
def update_guardian(
    guardian_id: str,
    payload: GuardianUpdate,
    principal: Annotated[Principal, Depends(require_permission(GUARDIANS_UPDATE))],
    db: Session = Depends(get_db)
):
    service = GuardianService(db)
    service.update(guardian_id, payload)
    return service.detail(guardian_id)


@guardian_router.delete("/{guardian_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guardian(
    guardian_id: str,
    principal: Annotated[Principal, Depends(require_permission(GUARDIANS_DELETE))],
    db: Session = Depends(get_db)
):
    GuardianService(db).delete(guardian_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
