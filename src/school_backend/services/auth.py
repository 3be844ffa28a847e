"""
Authentication: registration, login, token refresh, logout and the
single-active-session check.

Every successful login or refresh stores ``sha256(access_token)`` on the
user row. An access token is only accepted while its hash equals that
stored value, so a new login supersedes the previous session and logout
(which clears the hash) revokes it.
"""

import logging
from sqlalchemy.orm import Session

from ..api.exceptions import (
    BadRequestException,
    ConflictException,
    InternalServerException,
    NotFoundException,
    UnauthorizedException
)
from ..interface.auth import AuthResponse, RegisterRequest, RoleSummary, UserProfile
from ..model.auth import User
from ..permissions.core import db_get_user_with_grants, effective_permissions
from ..permissions.passwords import hash_password, validate_password_complexity, verify_password
from ..permissions.tokens import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    TokenError,
    access_token_lifetime_seconds,
    create_token,
    decode_token,
    hash_token
)
from ..repositories.users import RoleRepository, UserRepository
from .base import repository_errors

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid login or password"
LOGGED_OUT = "token revoked - user logged out"
SUPERSEDED = "token revoked - new login detected"


def build_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        name=user.name,
        username=user.username,
        email=user.email,
        roles=[RoleSummary.model_validate(role) for role in user.roles],
        permissions=effective_permissions(user),
        created_at=user.created_at,
        updated_at=user.updated_at
    )


class AuthService:
    """Credential checks and the access/refresh token life cycle"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.roles = RoleRepository(db)

    def register(self, payload: RegisterRequest) -> User:
        """
        Create a self-registered account holding exactly the default role.

        Any roles in the payload are ignored.

        Raises:
            ConflictException: email or username taken
            BadRequestException: password fails the complexity rules
            InternalServerException: no default role is configured
        """
        if self.users.find_by_email(payload.email) is not None:
            raise ConflictException("email already exists")
        if self.users.find_by_username(payload.username) is not None:
            raise ConflictException("username already exists")

        validate_password_complexity(payload.password)

        default_role = self.roles.find_default()
        if default_role is None:
            logger.error("Registration attempted without a default role")
            raise InternalServerException("registration failed: default role not configured")

        user = User(
            name=payload.name,
            username=payload.username,
            email=payload.email,
            password=hash_password(payload.password)
        )
        user.roles = [default_role]

        with repository_errors("email or username already exists"):
            user = self.users.create(user)

        logger.info(f"Registered user {user.username}")
        return user

    def login(self, login: str, password: str) -> AuthResponse:
        user = self.users.find_by_login(login)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login attempt")
            raise UnauthorizedException(INVALID_CREDENTIALS)

        response = self._issue_tokens(user)
        logger.info(f"User {user.username} logged in")
        return response

    def refresh(self, refresh_token: str) -> AuthResponse:
        """Exchange a refresh token for a new pair; the previous access token stops working."""
        try:
            user_id = decode_token(refresh_token, REFRESH_TOKEN)
        except TokenError as e:
            logger.debug(f"Refresh rejected: {e}")
            raise UnauthorizedException("invalid refresh token")

        user = self.users.get_by_id_optional(user_id)
        if user is None:
            raise UnauthorizedException("user not found")

        return self._issue_tokens(user)

    def logout(self, user_id: str) -> None:
        user = self.users.get_by_id_optional(user_id)
        if user is None:
            raise NotFoundException("user not found")
        self.users.set_token_hash(user, None)
        logger.info(f"User {user.username} logged out")

    def validate_token(self, access_token: str) -> User:
        """
        Accept an access token only if it is the user's current session.

        Returns:
            The user the token belongs to

        Raises:
            UnauthorizedException: bad signature, wrong type, expired,
                unknown user, logged out or superseded by a newer login
        """
        try:
            user_id = decode_token(access_token, ACCESS_TOKEN)
        except TokenError as e:
            raise UnauthorizedException(str(e))

        user = self.users.get_by_id_optional(user_id)
        if user is None:
            raise UnauthorizedException("user not found")

        if user.current_token_hash is None:
            logger.debug(f"Rejected token for {user_id}: logged out")
            raise UnauthorizedException(LOGGED_OUT)

        if hash_token(access_token) != user.current_token_hash:
            logger.debug(f"Rejected token for {user_id}: superseded")
            raise UnauthorizedException(SUPERSEDED)

        return user

    def profile(self, user_id: str) -> UserProfile:
        user = db_get_user_with_grants(user_id, self.db)
        if user is None:
            raise NotFoundException("user not found")
        return build_profile(user)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """Change own password; ends the current session."""
        user = self.users.get_by_id_optional(user_id)
        if user is None:
            raise NotFoundException("user not found")
        if not verify_password(current_password, user.password):
            raise BadRequestException("current password is incorrect")

        validate_password_complexity(new_password)

        self.users.save(user, {"password": hash_password(new_password), "current_token_hash": None})
        logger.info(f"User {user.username} changed password")

    def _issue_tokens(self, user: User) -> AuthResponse:
        access_token = create_token(user.id, ACCESS_TOKEN)
        refresh_token = create_token(user.id, REFRESH_TOKEN)

        # Overwrites any previous session
        self.users.set_token_hash(user, hash_token(access_token))

        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="Bearer",
            expires_in=access_token_lifetime_seconds(),
            user=build_profile(user)
        )
