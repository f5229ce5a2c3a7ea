"""Security utilities: password hashing and bearer token helpers.

The service does not run its own identity provider; these helpers issue and
verify the HS256 credentials the provider would hand to the browser.
"""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.errors import Unauthenticated

settings = get_settings()

# ── Password hashing (Argon2) ────────────────────────────────

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ── JWT ───────────────────────────────────────────────────────

def create_jwt(subject: str, expires_delta: timedelta | None = None) -> str:
    """Issue a token for a user identity.

    Only the identity goes into the token. Tenant and role are looked up on
    every request so they can never be stale or forged.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    payload = {
        "sub": subject,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jose.JWTError on failure."""
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def identity_from_token(token: str | None) -> uuid.UUID:
    """Return the user id carried by a bearer token.

    Every failure mode raises the same ``Unauthenticated`` so callers
    cannot tell a bad signature from an expired or malformed token.
    """
    if not token:
        raise Unauthenticated("Unauthorized")
    try:
        payload = decode_jwt(token)
        return uuid.UUID(payload["sub"])
    except (JWTError, KeyError, AttributeError, TypeError, ValueError) as exc:
        raise Unauthenticated("Unauthorized") from exc
