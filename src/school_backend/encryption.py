"""
Field-level encryption for personally identifiable data.

Values such as national ID numbers (NIK) and family-card numbers (No KK) are
stored as AES-256-GCM ciphertext. Because the ciphertext is randomized, a
separate keyed digest (blind index) is stored next to it so uniqueness can be
checked with a plain equality lookup.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import os
from functools import lru_cache
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from school_backend.settings import settings

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
KEY_SIZE = 32
DECRYPTION_ERROR = "[DECRYPTION_ERROR]"


class EncryptionError(Exception):
    """Raised when a ciphertext cannot be decoded or authenticated."""
    pass


class EncryptionService:
    """AES-256-GCM encryption plus HMAC-SHA256 blind index."""

    def __init__(self, key: str | bytes):
        byte_key = key.encode("utf-8") if isinstance(key, str) else key
        if len(byte_key) != KEY_SIZE:
            raise ValueError("encryption key must be 32 bytes long")
        self._key = byte_key
        self._aesgcm = AESGCM(byte_key)

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext with a fresh random nonce.

        Returns:
            base64(nonce || ciphertext || tag)
        """
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.b64encode(nonce + sealed).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """
        Reverse encrypt().

        Raises:
            EncryptionError: malformed base64, blob shorter than the nonce,
                or authentication tag mismatch
        """
        try:
            data = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncryptionError("failed to decrypt: invalid encoding") from e

        if len(data) < NONCE_SIZE:
            raise EncryptionError("ciphertext too short")

        nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, sealed, None).decode("utf-8")
        except (InvalidTag, UnicodeDecodeError) as e:
            raise EncryptionError("failed to decrypt") from e

    def hash(self, plaintext: str) -> str:
        """Deterministic keyed digest of plaintext, 64 hex characters."""
        return hmac.new(self._key, plaintext.encode("utf-8"), hashlib.sha256).hexdigest()

    # Helpers for nullable columns

    def encrypt_optional(self, plaintext: Optional[str]) -> Optional[str]:
        if not plaintext:
            return None
        return self.encrypt(plaintext)

    def hash_optional(self, plaintext: Optional[str]) -> Optional[str]:
        if not plaintext:
            return None
        return self.hash(plaintext)

    def decrypt_for_display(self, ciphertext: Optional[str], field: str = "value") -> Optional[str]:
        """Decrypt for a response body, substituting a sentinel on failure."""
        if ciphertext is None or ciphertext == "":
            return None
        try:
            return self.decrypt(ciphertext)
        except EncryptionError as e:
            logger.warning(f"Could not decrypt {field}: {e}")
            return DECRYPTION_ERROR


@lru_cache(maxsize=1)
def get_encryption_service() -> EncryptionService:
    return EncryptionService(settings.ENCRYPTION_KEY)
