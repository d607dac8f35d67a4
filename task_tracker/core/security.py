"""Password hashing (bcrypt) and access tokens (JWT)."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from task_tracker.core.config import Settings

# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a salted bcrypt hash suitable for storing in the users table."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def create_access_token(
    username: str,
    user_id: int,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT carrying the username (`sub`) and user id (`uid`).

    Args:
        username: Subject of the token.
        user_id: Database id of the user.
        settings: Provides the secret, algorithm and default lifetime.
        expires_delta: Overrides the configured lifetime.

    Returns:
        Encoded JWT.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload = {
        "sub": username,
        "uid": user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> str | None:
    """Verify a JWT and return its username, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.InvalidTokenError:
        return None

    username = payload.get("sub")
    if not isinstance(username, str) or not username:
        return None
    return username
