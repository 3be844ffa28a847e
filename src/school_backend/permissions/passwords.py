import bcrypt

from school_backend.api.exceptions import BadRequestException

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def validate_password_complexity(password: str) -> None:
    """Require at least 8 characters with an upper-case letter, a lower-case letter and a digit."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequestException(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not any(c.isupper() for c in password):
        raise BadRequestException("password must contain at least one uppercase letter")
    if not any(c.islower() for c in password):
        raise BadRequestException("password must contain at least one lowercase letter")
    if not any(c.isdigit() for c in password):
        raise BadRequestException("password must contain at least one digit")
