"""
Helpers shared by the service layer.

Services raise the HTTP exceptions from ``api.exceptions`` directly; these
helpers translate repository and driver errors into them so no database
error text reaches a response body.
"""

import logging
from contextlib import contextmanager
from typing import Any, Optional, TypeVar

from sqlalchemy.exc import DataError, IntegrityError

from ..api.exceptions import BadRequestException, ConflictException, InternalServerException, NotFoundException
from ..repositories.base import (
    BaseRepository,
    ConstraintError,
    DuplicateError,
    NotFoundError,
    RepositoryError,
    integrity_error
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


@contextmanager
def repository_errors(conflict_message: Optional[str] = None):
    try:
        yield
    except NotFoundError as e:
        raise NotFoundException(f"{e.entity_type.lower()} not found") from e
    except IntegrityError as e:
        # Raised by a flush or commit inside database.transaction
        _raise_mapped(integrity_error("resource", e), conflict_message, e)
    except DataError as e:
        _raise_mapped(ConstraintError("resource", str(e.orig).split("\n")[0]), conflict_message, e)
    except (DuplicateError, ConstraintError) as e:
        _raise_mapped(e, conflict_message, e)
    except RepositoryError as e:
        logger.error(f"Repository failure: {e}")
        raise InternalServerException("internal server error") from e


def _raise_mapped(error: RepositoryError, conflict_message: Optional[str], cause: Exception):
    if isinstance(error, DuplicateError):
        logger.info(f"Unique constraint violated: {error}")
        raise ConflictException(conflict_message or "resource already exists") from cause
    logger.info(f"Constraint violated: {error}")
    raise BadRequestException("request violates a data constraint") from cause


def get_or_404(repository: BaseRepository[T], entity_id: Any, message: Optional[str] = None) -> T:
    entity = repository.get_by_id_optional(entity_id)
    if entity is None:
        raise NotFoundException(message or f"{repository.model.__name__.lower()} not found")
    return entity


def patch_fields(payload) -> dict:
    """Fields the caller actually sent, for partial updates"""
    return payload.model_dump(exclude_unset=True)
