from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.permissions import PermissionCreate, PermissionGet, PermissionUpdate
from school_backend.interface.roles import RoleCreate, RoleGet, RoleUpdate
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import PERMISSIONS_MANAGE, ROLES_MANAGE
from school_backend.services.permissions import PermissionService
from school_backend.services.roles import RoleService

role_router = APIRouter()
permission_router = APIRouter()

ManageRoles = Annotated[Principal, Depends(require_permission(ROLES_MANAGE))]
ManagePermissions = Annotated[Principal, Depends(require_permission(PERMISSIONS_MANAGE))]


@role_router.post("", response_model=RoleGet, status_code=status.HTTP_201_CREATED)
def create_role(payload: RoleCreate, principal: ManageRoles, db: Session = Depends(get_db)):
    return RoleService(db).create(payload)


@role_router.get("", response_model=List[RoleGet])
def list_roles(principal: ManageRoles, db: Session = Depends(get_db)):
    return RoleService(db).list()


@role_router.get("/{role_id}", response_model=RoleGet)
def get_role(role_id: str, principal: ManageRoles, db: Session = Depends(get_db)):
    return RoleService(db).get(role_id)


@role_router.patch("/{role_id}", response_model=RoleGet)
def update_role(role_id: str, payload: RoleUpdate, principal: ManageRoles, db: Session = Depends(get_db)):
    return RoleService(db).update(role_id, payload)


@role_router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: str, principal: ManageRoles, db: Session = Depends(get_db)):
    """Delete a role; the default role cannot be deleted"""
    RoleService(db).delete(role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@permission_router.post("", response_model=PermissionGet, status_code=status.HTTP_201_CREATED)
def create_permission(payload: PermissionCreate, principal: ManagePermissions, db: Session = Depends(get_db)):
    return PermissionService(db).create(payload)


@permission_router.get("", response_model=List[PermissionGet])
def list_permissions(principal: ManagePermissions, db: Session = Depends(get_db)):
    return PermissionService(db).list()


@permission_router.get("/{permission_id}", response_model=PermissionGet)
def get_permission(permission_id: str, principal: ManagePermissions, db: Session = Depends(get_db)):
    return PermissionService(db).get(permission_id)


@permission_router.patch("/{permission_id}", response_model=PermissionGet)
def update_permission(permission_id: str, payload: PermissionUpdate, principal: ManagePermissions,
                      db: Session = Depends(get_db)):
    return PermissionService(db).update(permission_id, payload)


@permission_router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission(permission_id: str, principal: ManagePermissions, db: Session = Depends(get_db)):
    PermissionService(db).delete(permission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
