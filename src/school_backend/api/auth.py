from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserProfile
)
from school_backend.permissions.auth import get_current_principal
from school_backend.permissions.principal import Principal
from school_backend.services.auth import AuthService, build_profile

auth_router = APIRouter()


@auth_router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Self-registration; the account receives the default role only"""
    user = AuthService(db).register(payload)
    return build_profile(user)


@auth_router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return AuthService(db).login(payload.login, payload.password)


@auth_router.post("/refresh", response_model=AuthResponse)
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    return AuthService(db).refresh(payload.refresh_token)


@auth_router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(principal: Annotated[Principal, Depends(get_current_principal)], db: Session = Depends(get_db)):
    AuthService(db).logout(principal.get_user_id_or_throw())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@auth_router.get("/me", response_model=UserProfile)
def me(principal: Annotated[Principal, Depends(get_current_principal)], db: Session = Depends(get_db)):
    """Current user with roles and effective permissions"""
    return AuthService(db).profile(principal.get_user_id_or_throw())


@auth_router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    """Change own password; the current session ends and a new login is required"""
    AuthService(db).change_password(principal.get_user_id_or_throw(), payload.current_password, payload.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
