"""
Authentication utilities: password hashing and JWT issuance/verification.
"""
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt

from app.core import config
from app.core.errors import UnauthenticatedError
from app.features.users.models import User


def hash_password(password: str) -> str:
    """Hash a password with bcrypt using the configured cost."""
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def create_access_token(user: User) -> str:
    """
    Issue a signed access token for a user.

    The token carries everything needed to build an AccessContext, so
    requests never need to reload the user to authorize.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "organization_id": user.organization_id,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(minutes=config.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_access_token(token: str) -> dict:
    """
    Verify a token's signature and expiry and return its payload.

    Raises:
        UnauthenticatedError: If the token is expired, malformed or forged
    """
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid token")
