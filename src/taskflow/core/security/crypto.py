"""Cryptographic utilities - password hashing, JWT tokens, and token hashing."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from hashlib import sha256
from typing import Any
from uuid import UUID, uuid4

import argon2
from jose import ExpiredSignatureError, JWTError, jwt

from src.taskflow.core.config import get_settings
from src.taskflow.core.exceptions import TokenExpired, TokenInvalid


class TokenType:
    """Token type constants (the ``type`` claim)."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Decoded and validated token payload."""

    user_id: UUID
    email: str
    token_type: str
    expires_at: datetime
    organization_id: UUID | None = None
    role: str | None = None
    jti: str | None = None


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()


def _create_password_hasher() -> argon2.PasswordHasher:
    """Create password hasher with settings from config."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


_password_hasher = _create_password_hasher()

# Verified against when the email is unknown so login timing does not leak
# which addresses are registered.
DUMMY_PASSWORD_HASH = _password_hasher.hash("dummy-password-for-timing-equalization")


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _password_hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        _password_hasher.verify(hashed, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False
    except argon2.exceptions.VerificationError:
        return False


def create_access_token(
    user_id: str | UUID,
    email: str,
    organization_id: str | UUID | None = None,
    role: str | None = None,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    """Create a signed, short-lived access token.

    ``now`` overrides the issuing clock; the token expires relative to it.
    """
    settings = get_settings()
    issued_at = now or datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "type": TokenType.ACCESS,
        "jti": str(uuid4()),
    }
    if organization_id is not None:
        to_encode["org_id"] = str(organization_id)
        to_encode["role"] = role
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_refresh_token(
    user_id: str | UUID,
    email: str,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Create refresh token. Returns (token, expiry as naive UTC datetime).

    Includes a unique JWT ID (jti) so two tokens issued in the same second for
    the same user still hash differently.
    """
    settings = get_settings()
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(days=settings.refresh_token_expire_days)

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": expire,
        "type": TokenType.REFRESH,
        "jti": str(uuid4()),
    }
    token: str = jwt.encode(  # type: ignore[assignment]
        to_encode,
        settings.jwt_refresh_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    # Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns
    return token, expire.astimezone(UTC).replace(tzinfo=None)


def _decode(token: str, key: str, expected_type: str) -> TokenClaims:
    settings = get_settings()
    try:
        payload = jwt.decode(token, key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpired() from e
    except JWTError as e:
        raise TokenInvalid() from e

    if payload.get("type") != expected_type:
        raise TokenInvalid("Invalid token type")

    subject = payload.get("sub")
    email = payload.get("email")
    exp = payload.get("exp")
    if not subject or not email or not isinstance(exp, int | float):
        raise TokenInvalid("Invalid token payload")

    try:
        user_id = UUID(subject)
        organization_id = UUID(payload["org_id"]) if payload.get("org_id") else None
    except (TypeError, ValueError) as e:
        raise TokenInvalid("Invalid token payload") from e

    return TokenClaims(
        user_id=user_id,
        email=email,
        token_type=expected_type,
        expires_at=datetime.fromtimestamp(exp, UTC),
        organization_id=organization_id,
        role=payload.get("role"),
        jti=payload.get("jti"),
    )


def verify_access_token(token: str) -> TokenClaims:
    """Validate an access token's signature, expiry and type.

    Raises:
        TokenExpired: signature is valid but ``exp`` has passed
        TokenInvalid: bad signature, malformed payload or wrong token type
    """
    return _decode(token, get_settings().jwt_secret_key, TokenType.ACCESS)


def verify_refresh_token(token: str) -> TokenClaims:
    """Validate a refresh token against the refresh signing key.

    Same failure contract as :func:`verify_access_token`.
    """
    return _decode(token, get_settings().jwt_refresh_secret_key, TokenType.REFRESH)
