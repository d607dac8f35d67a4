import logging

from task_tracker.core.config import Settings
from task_tracker.core.exceptions import InternalFailure, InvalidCredentials, StorageError
from task_tracker.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from task_tracker.models import AuthCredentials, User
from task_tracker.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: UserRepository, settings: Settings):
        self.users = users
        self.settings = settings

    async def sign_up(self, credentials: AuthCredentials) -> User:
        """Hash the password and store a new user. Raises UsernameTaken on duplicates."""
        hashed = hash_password(credentials.password, rounds=self.settings.bcrypt_rounds)
        try:
            user = await self.users.create_user(credentials.username, hashed)
        except StorageError as e:
            logger.exception(f"Failed to sign up user '{credentials.username}'")
            raise InternalFailure() from e

        logger.info(f"User '{user.username}' signed up")
        return user

    async def sign_in(self, credentials: AuthCredentials) -> str:
        """Return an access token, or raise InvalidCredentials."""
        user = await self._find_user(credentials.username)
        if user is None or not verify_password(credentials.password, user.hashed_password):
            logger.warning(f"Failed sign in attempt for '{credentials.username}'")
            raise InvalidCredentials()

        return create_access_token(user.username, user.id, self.settings)

    async def resolve_token(self, token: str) -> User | None:
        """Map a bearer token to its user; None when the token or user is unknown."""
        username = decode_access_token(token, self.settings)
        if username is None:
            return None
        return await self._find_user(username)

    async def _find_user(self, username: str) -> User | None:
        try:
            return await self.users.find_by_username(username)
        except StorageError as e:
            logger.exception(f"Failed to look up user '{username}'")
            raise InternalFailure() from e
