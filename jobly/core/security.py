"""
Password hashing utilities.

Passwords are hashed using bcrypt. Token handling lives outside this package.
"""

from passlib.context import CryptContext
from jobly.core.config import settings

# Password hashing context (bcrypt)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return pwd_context.verify(password_bytes, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Note: Bcrypt has a 72-byte limit. Passwords longer than 72 bytes
    are automatically truncated to comply with this limitation.
    """
    password_bytes = password.encode('utf-8')[:72]
    return pwd_context.hash(password_bytes)
