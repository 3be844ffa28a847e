"""
Authorization for the school backend.

- ``registry``: closed set of permission names and the built-in roles
- ``core``: effective permission evaluation over the role/permission graph
- ``principal``: the per-request caller model
- ``passwords`` / ``tokens``: credential primitives
- ``auth``: FastAPI dependencies
"""

from school_backend.permissions.principal import Principal, FORBIDDEN_MESSAGE
from school_backend.permissions.core import (
    effective_permissions,
    has_permission,
    authorize,
    build_principal,
    db_get_user_with_grants
)

__all__ = [
    'Principal',
    'FORBIDDEN_MESSAGE',
    'effective_permissions',
    'has_permission',
    'authorize',
    'build_principal',
    'db_get_user_with_grants',
]
