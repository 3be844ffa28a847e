"""
Behaviour shared by every entity that carries an encrypted national ID
(NIK) and an optional link to a login account.

The NIK is stored twice: AES-GCM ciphertext in ``nik`` and an HMAC blind
index in ``nik_hash``. Uniqueness is decided on the blind index only.
"""

import logging
from typing import Any, Callable, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import ConflictException, NotFoundException
from ..encryption import EncryptionService, get_encryption_service
from ..repositories.base import BaseRepository
from ..repositories.users import UserRepository
from .base import get_or_404, repository_errors

logger = logging.getLogger(__name__)


class PersonService:
    label = "person"

    def __init__(self, db: Session, repository: BaseRepository, encryption: Optional[EncryptionService] = None):
        self.db = db
        self.repository = repository
        self.users = UserRepository(db)
        self.encryption = encryption or get_encryption_service()

    def get(self, entity_id: str):
        return get_or_404(self.repository, entity_id, f"{self.label} not found")

    def delete(self, entity_id: str) -> None:
        self.get(entity_id)
        with repository_errors():
            self.repository.delete(entity_id)
        logger.info(f"Deleted {self.label} {entity_id}")

    def apply_nik(self, values: dict, current_id: Optional[str] = None) -> None:
        """Replace a plaintext ``nik`` in values with ciphertext plus blind index"""
        if "nik" not in values:
            return
        nik = values["nik"]
        if not nik:
            values["nik"] = None
            values["nik_hash"] = None
            return

        nik_hash = self.encryption.hash(nik)
        existing = self.repository.find_by_nik_hash(nik_hash)
        if existing is not None and existing.id != current_id:
            raise ConflictException("nik already exists")

        values["nik"] = self.encryption.encrypt(nik)
        values["nik_hash"] = nik_hash

    def ensure_unique(self, finder: Callable[[Any], Any], value: Any, message: str,
                      current_id: Optional[str] = None) -> None:
        if value is None or value == "":
            return
        existing = finder(value)
        if existing is not None and existing.id != current_id:
            raise ConflictException(message)

    def reveal(self, ciphertext: Optional[str], field: str) -> Optional[str]:
        return self.encryption.decrypt_for_display(ciphertext, field)

    def ensure_user_linkable(self, user_id: str, current_id: Optional[str] = None) -> None:
        if self.users.get_by_id_optional(user_id) is None:
            raise NotFoundException("user not found")
        holder = self.repository.find_by_user_id(user_id)
        if holder is not None and holder.id != current_id:
            raise ConflictException(f"this user account is already linked to another {self.label}")

    def link_user(self, entity_id: str, user_id: str):
        entity = self.get(entity_id)
        self.ensure_user_linkable(user_id, current_id=entity.id)
        with repository_errors(f"this user account is already linked to another {self.label}"):
            entity = self.repository.save(entity, {"user_id": user_id})
        logger.info(f"Linked user {user_id} to {self.label} {entity_id}")
        return entity

    def unlink_user(self, entity_id: str):
        entity = self.get(entity_id)
        with repository_errors():
            return self.repository.save(entity, {"user_id": None})


def blank_to_none(values: dict) -> dict:
    """Empty strings from forms become NULL so unique columns do not collide on ''"""
    return {key: (None if value == "" else value) for key, value in values.items()}
