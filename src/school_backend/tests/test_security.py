import base64
import pytest

from school_backend.api.exceptions import BadRequestException
from school_backend.encryption import DECRYPTION_ERROR, NONCE_SIZE, EncryptionError, EncryptionService
from school_backend.permissions.passwords import hash_password, validate_password_complexity, verify_password


class TestEncryption:
    """AES-GCM field encryption"""

    def test_round_trip(self, encryption):
        ciphertext = encryption.encrypt("3201234567890001")
        assert ciphertext != "3201234567890001"
        assert encryption.decrypt(ciphertext) == "3201234567890001"

    def test_fresh_nonce_per_call(self, encryption):
        first = encryption.encrypt("3201234567890001")
        second = encryption.encrypt("3201234567890001")
        assert first != second
        assert base64.b64decode(first)[:NONCE_SIZE] != base64.b64decode(second)[:NONCE_SIZE]

    def test_tampered_ciphertext_is_rejected(self, encryption):
        raw = bytearray(base64.b64decode(encryption.encrypt("secret")))
        raw[-1] ^= 0x01
        with pytest.raises(EncryptionError):
            encryption.decrypt(base64.b64encode(bytes(raw)).decode())

    def test_malformed_input(self, encryption):
        with pytest.raises(EncryptionError):
            encryption.decrypt("not base64 !!")
        with pytest.raises(EncryptionError):
            encryption.decrypt(base64.b64encode(b"short").decode())

    def test_other_key_cannot_decrypt(self, encryption):
        other = EncryptionService("x" * 32)
        with pytest.raises(EncryptionError):
            other.decrypt(encryption.encrypt("secret"))

    def test_key_must_be_32_bytes(self):
        with pytest.raises(ValueError):
            EncryptionService("too short")

    def test_display_sentinel(self, encryption):
        assert encryption.decrypt_for_display("garbage") == DECRYPTION_ERROR
        assert encryption.decrypt_for_display(None) is None
        assert encryption.decrypt_for_display(encryption.encrypt("abc")) == "abc"

    def test_optional_helpers_skip_empty_values(self, encryption):
        assert encryption.encrypt_optional("") is None
        assert encryption.encrypt_optional(None) is None
        assert encryption.hash_optional("") is None


class TestBlindIndex:
    """HMAC blind index"""

    def test_deterministic_hex(self, encryption):
        digest = encryption.hash("3201234567890001")
        assert digest == encryption.hash("3201234567890001")
        assert len(digest) == 64
        int(digest, 16)

    def test_distinct_inputs_and_keys(self, encryption):
        assert encryption.hash("1") != encryption.hash("2")
        assert EncryptionService("x" * 32).hash("1") != encryption.hash("1")


class TestPasswords:
    """Password hashing and complexity rules"""

    def test_hash_and_verify(self):
        hashed = hash_password("Secret123")
        assert hashed != "Secret123"
        assert verify_password("Secret123", hashed)
        assert not verify_password("secret123", hashed)

    def test_verify_against_non_bcrypt_value(self):
        assert not verify_password("Secret123", "plain-text")
        assert not verify_password("Secret123", "")

    @pytest.mark.parametrize("password", ["Short1", "alllower123", "ALLUPPER123", "NoDigitsHere"])
    def test_weak_passwords(self, password):
        with pytest.raises(BadRequestException):
            validate_password_complexity(password)

    def test_strong_password(self):
        validate_password_complexity("Secret123")
