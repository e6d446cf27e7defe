"""Password hashing, opaque session tokens, and JWT creation/verification."""

import base64
import hashlib
import logging
import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from users_api.core.config import JWT_MIN_SECRET_BYTES, settings

if TYPE_CHECKING:
    from users_api.core.config import Settings

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
# Tolerated clock difference between issuer and validator.
JWT_LEEWAY = timedelta(minutes=1)
JWT_REQUIRED_CLAIMS = ["sub", "exp", "nbf", "iat", "iss", "aud", "jti"]

# Bytes of entropy in an opaque session token.
SESSION_TOKEN_BYTES = 32

# Min/max lengths in characters for password validation.
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 100

# bcrypt only looks at the first 72 bytes; longer passwords are rejected, not cut.
PASSWORD_MAX_BYTES = 72


class JwtConfigurationError(RuntimeError):
    """Raised at startup when the JWT signing key is missing or too short."""


def check_password_bytes(plain_password: str) -> str:
    """Raise ValueError when the UTF-8 form exceeds what bcrypt actually compares."""
    if len(plain_password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return plain_password


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Raises ValueError above PASSWORD_MAX_BYTES."""
    pw_bytes = check_password_bytes(plain_password).encode("utf-8")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def hash_session_token(token: str) -> str:
    """Lowercase hex SHA-256 of a bearer token; the only form that is persisted."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_session_token() -> tuple[str, str]:
    """
    Create an opaque bearer token and its lookup hash.

    The raw token (URL-safe base64, no padding) goes to the client once;
    only the hash is stored.
    """
    raw = secrets.token_bytes(SESSION_TOKEN_BYTES)
    token = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    return token, hash_session_token(token)


class JwtTokenService:
    """
    Issues and validates HS256 access tokens for one issuer/audience pair.

    Configuration is fixed at construction; instances are shared by all requests.
    """

    def __init__(
        self,
        secret_key: str | None,
        issuer: str,
        audience: str,
        expiry_hours: int,
    ) -> None:
        if not secret_key or not secret_key.strip():
            raise JwtConfigurationError("JWT_SECRET_KEY is required")
        if len(secret_key.encode("utf-8")) < JWT_MIN_SECRET_BYTES:
            raise JwtConfigurationError(
                f"JWT_SECRET_KEY must be at least {JWT_MIN_SECRET_BYTES} bytes"
            )
        self._secret_key = secret_key
        self._issuer = issuer
        self._audience = audience
        self._expiry = timedelta(hours=expiry_hours)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "JwtTokenService":
        secret = settings.JWT_SECRET_KEY.get_secret_value() if settings.JWT_SECRET_KEY else None
        return cls(
            secret_key=secret,
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            expiry_hours=settings.JWT_EXPIRY_HOURS,
        )

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def audience(self) -> str:
        return self._audience

    def generate_token(self, user_id: int, email: str, role: str, user_name: str) -> str:
        """Create a signed token carrying the user's identity claims."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "nameid": str(user_id),
            "email": email,
            "name": user_name,
            "role": role,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "nbf": now,
            "exp": now + self._expiry,
            "iss": self._issuer,
            "aud": self._audience,
        }
        return jwt.encode(payload, self._secret_key, algorithm=JWT_ALGORITHM)

    def validate_token(self, token: str) -> dict[str, Any] | None:
        """
        Return the claims when signature, issuer, audience and lifetime all check out.

        Any failure yields None; the reason is only logged at debug level.
        """
        if not isinstance(token, str) or not token:
            return None
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[JWT_ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                leeway=JWT_LEEWAY,
                options={"require": JWT_REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            logger.debug("JWT rejected: %s", type(e).__name__)
            return None
        except (ValueError, TypeError) as e:
            logger.debug("JWT could not be parsed: %s", type(e).__name__)
            return None

    def get_token_expiration(self) -> datetime:
        """Expiry a token issued now would carry."""
        return datetime.now(UTC) + self._expiry
