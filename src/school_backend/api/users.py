from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.users import (
    ResetPasswordRequest,
    SyncNamesRequest,
    UserCreate,
    UserGet,
    UserList,
    UserQuery,
    UserUpdate
)
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    USERS_CHANGE_PASSWORD_OTHERS,
    USERS_CREATE,
    USERS_DELETE,
    USERS_MANAGE_PERMISSIONS,
    USERS_MANAGE_ROLES,
    USERS_READ,
    USERS_UPDATE
)
from school_backend.services.users import UserService

user_router = APIRouter()


@user_router.post("", response_model=UserGet, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    principal: Annotated[Principal, Depends(require_permission(USERS_CREATE))],
    db: Session = Depends(get_db)
):
    return UserService(db).create(payload)


@user_router.get("", response_model=List[UserList])
def list_users(
    principal: Annotated[Principal, Depends(require_permission(USERS_READ))],
    params: UserQuery = Depends(),
    db: Session = Depends(get_db)
):
    return UserService(db).list(params.search, params.skip, params.limit)


@user_router.get("/{user_id}", response_model=UserGet)
def get_user(
    user_id: str,
    principal: Annotated[Principal, Depends(require_permission(USERS_READ))],
    db: Session = Depends(get_db)
):
    return UserService(db).get(user_id)


@user_router.patch("/{user_id}", response_model=UserGet)
def update_user(
    user_id: str,
    payload: UserUpdate,
    principal: Annotated[Principal, Depends(require_permission(USERS_UPDATE))],
    db: Session = Depends(get_db)
):
    return UserService(db).update(user_id, payload)


@user_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    principal: Annotated[Principal, Depends(require_permission(USERS_DELETE))],
    db: Session = Depends(get_db)
):
    UserService(db).delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@user_router.post("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def reset_password(
    user_id: str,
    payload: ResetPasswordRequest,
    principal: Annotated[Principal, Depends(require_permission(USERS_CHANGE_PASSWORD_OTHERS))],
    db: Session = Depends(get_db)
):
    UserService(db).reset_password(user_id, payload.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@user_router.put("/{user_id}/roles", response_model=UserGet)
def sync_roles(
    user_id: str,
    payload: SyncNamesRequest,
    principal: Annotated[Principal, Depends(require_permission(USERS_MANAGE_ROLES))],
    db: Session = Depends(get_db)
):
    """Replace the user's roles with the named ones"""
    return UserService(db).sync_roles(user_id, payload.names)


@user_router.put("/{user_id}/permissions", response_model=UserGet)
def sync_permissions(
    user_id: str,
    payload: SyncNamesRequest,
    principal: Annotated[Principal, Depends(require_permission(USERS_MANAGE_PERMISSIONS))],
    db: Session = Depends(get_db)
):
    """Replace the user's direct permission grants with the named ones"""
    return UserService(db).sync_permissions(user_id, payload.names)
