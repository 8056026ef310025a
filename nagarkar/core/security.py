"""Password hashing and bearer token handling.

Tokens are HS256 JWTs carrying the principal's role and database id. Admin
tokens also carry the username and citizen tokens the customer id.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from nagarkar.core.config import AuthConfig, get_settings
from nagarkar.core.exceptions import ForbiddenError, UnauthorizedError
from nagarkar.core.types import Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class Principal(BaseModel):
    """The authenticated caller of a request."""

    role: Role
    id: int
    username: str | None = None
    customer_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def label(self) -> str:
        """Short form used in logs, e.g. ``citizen:42``."""
        return f"{self.role}:{self.id}"


def hash_password(password: str) -> str:
    """Hash a password for storing."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    principal: Principal,
    config: AuthConfig | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for ``principal``.

    Args:
        principal: Who the token identifies.
        config: Auth settings, the application settings when omitted.
        expires_delta: Custom lifetime, ``token_expire_hours`` when omitted.

    Returns:
        str: Encoded JWT.
    """
    config = config or get_settings().auth_config
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(hours=config.token_expire_hours))

    claims: dict[str, Any] = {
        "sub": str(principal.id),
        "role": principal.role,
        "iat": now,
        "exp": expire,
    }
    if principal.username is not None:
        claims["username"] = principal.username
    if principal.customer_id is not None:
        claims["customer_id"] = principal.customer_id

    return jwt.encode(claims, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: AuthConfig | None = None) -> Principal:
    """Verify a token and return the principal it identifies.

    Raises:
        UnauthorizedError: If the token is malformed, expired or signed with
            another key.
    """
    config = config or get_settings().auth_config
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
        return Principal(
            role=claims.get("role"),
            id=int(claims["sub"]),
            username=claims.get("username"),
            customer_id=claims.get("customer_id"),
        )
    except (JWTError, KeyError, ValueError) as e:
        raise UnauthorizedError("Invalid or expired token", cause=e) from e


def ensure_citizen_access(
    principal: Principal, citizen_id: int, message: str = "Access denied"
) -> None:
    """Allow admins everywhere and citizens only on their own records.

    Raises:
        ForbiddenError: If a citizen targets another citizen's data.
    """
    if principal.is_admin or principal.id == citizen_id:
        return
    raise ForbiddenError(
        message,
        context={"principal": principal.label, "citizen_id": citizen_id},
    )
