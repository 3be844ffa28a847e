"""
Generic SQLAlchemy repository.

A repository owns the queries for one model. ``create``/``save``/``delete``
commit on their own; ``add``/``flush`` only stage work so that a service can
group several writes inside ``database.transaction``.
"""

from abc import ABC
from typing import TypeVar, Generic, List, Optional, Dict, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError

T = TypeVar('T')


class RepositoryError(Exception):
    """Any failed database operation."""
    pass


class NotFoundError(RepositoryError):

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateError(RepositoryError):
    """A unique constraint rejected the write."""

    def __init__(self, entity_type: str, detail: str):
        super().__init__(f"{entity_type} violates a unique constraint: {detail}")
        self.entity_type = entity_type
        self.detail = detail


class ConstraintError(RepositoryError):
    """A NOT NULL, foreign key or check constraint, or a value the column cannot hold."""

    def __init__(self, entity_type: str, detail: str):
        super().__init__(f"{entity_type} violates a constraint: {detail}")
        self.entity_type = entity_type
        self.detail = detail


# SQLSTATE 23505 on PostgreSQL; SQLite only reports it in the message
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(error.orig)


def integrity_error(entity_type: str, error: IntegrityError) -> RepositoryError:
    """Classify a driver integrity error as a duplicate or another constraint failure"""
    detail = str(error.orig).split("\n")[0]
    if is_unique_violation(error):
        return DuplicateError(entity_type, detail)
    return ConstraintError(entity_type, detail)


class BaseRepository(ABC, Generic[T]):

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    def _query(self, criteria: Dict[str, Any], skip_none: bool = False):
        query = self.db.query(self.model)
        for key, value in criteria.items():
            if skip_none and value is None:
                continue
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)
        return query

    def _commit(self, entity: Optional[T], action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise integrity_error(self.model.__name__, e)
        except DataError as e:
            self.db.rollback()
            raise ConstraintError(self.model.__name__, str(e.orig).split("\n")[0])
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to {action} {self.model.__name__}: {e}")
        if entity is not None:
            self.db.refresh(entity)

    # Reads

    def get_by_id(self, entity_id: Any) -> T:
        """
        Raises:
            NotFoundError: no row with this id
        """
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise NotFoundError(self.model.__name__, entity_id)
        return entity

    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        return self._query({"id": entity_id}).first()

    def exists(self, entity_id: Any) -> bool:
        return self._query({"id": entity_id}).count() > 0

    def find_by(self, **criteria) -> List[T]:
        return self._query(criteria).all()

    def find_one_by(self, **criteria) -> Optional[T]:
        return self._query(criteria).first()

    def list(self, limit: Optional[int] = None, offset: Optional[int] = None, **filters) -> List[T]:
        """Newest first; filters equal to None are ignored"""
        query = self._query(filters, skip_none=True)
        if hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    # Writes

    def create(self, entity: T) -> T:
        """
        Insert and commit.

        Raises:
            DuplicateError: a unique constraint rejected the row
            ConstraintError: any other constraint or an invalid value
            RepositoryError: any other database failure
        """
        self.db.add(entity)
        self._commit(entity, "create")
        return entity

    def save(self, entity: T, updates: Optional[Dict[str, Any]] = None) -> T:
        """Apply updates to a loaded entity and commit."""
        for key, value in (updates or {}).items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        self._commit(entity, "update")
        return entity

    def delete(self, entity_id: Any) -> None:
        self.db.delete(self.get_by_id(entity_id))
        self._commit(None, "delete")

    def add(self, entity: T) -> T:
        """Stage an entity without committing."""
        self.db.add(entity)
        return entity

    def flush(self) -> None:
        self.db.flush()
