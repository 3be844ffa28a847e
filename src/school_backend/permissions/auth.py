"""
FastAPI dependencies that turn a bearer token into a Principal and gate
routes on a single permission name.
"""

import logging
from typing import Annotated, Callable
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from school_backend.api.exceptions import UnauthorizedException
from school_backend.database import get_db
from school_backend.permissions.core import build_principal, db_get_user_with_grants
from school_backend.permissions.principal import Principal
from school_backend.services.auth import AuthService

logger = logging.getLogger(__name__)


def parse_authorization_header(request: Request) -> str:
    """Extract the token from ``Authorization: Bearer <token>``"""
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise UnauthorizedException("Authorization header is required")

    scheme, param = get_authorization_scheme_param(authorization)
    if scheme != "Bearer" or not param or " " in param:
        raise UnauthorizedException("Authorization header format must be Bearer {token}")

    return param


def get_current_principal(
    token: Annotated[str, Depends(parse_authorization_header)],
    db: Session = Depends(get_db)
) -> Principal:
    """Validate the access token and load the caller's roles and permissions."""
    try:
        user = AuthService(db).validate_token(token)
    except UnauthorizedException as e:
        logger.debug(f"Rejected bearer token: {e.detail}")
        raise UnauthorizedException("Invalid token")

    # Permission data is re-read on every request
    user = db_get_user_with_grants(user.id, db)
    if user is None:
        raise UnauthorizedException("Invalid token")

    return build_principal(user)


def require_permission(permission: str) -> Callable[..., Principal]:
    """
    Dependency factory for routes guarded by one permission.

    Usage:
        principal: Annotated[Principal, Depends(require_permission(STUDENTS_READ))]
    """

    def dependency(principal: Annotated[Principal, Depends(get_current_principal)]) -> Principal:
        principal.authorize(permission)
        return principal

    dependency.__name__ = f"require_{permission.replace('.', '_')}"
    return dependency
