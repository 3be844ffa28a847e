from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class ApiException(HTTPException):
    """HTTP error with a fixed status code and a fallback message"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"
    default_headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=headers or self.default_headers
        )


class BadRequestException(ApiException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class UnauthorizedException(ApiException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"
    default_headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenException(ApiException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundException(ApiException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictException(ApiException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InternalServerException(ApiException):
    pass
