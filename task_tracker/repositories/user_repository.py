from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker.core.exceptions import StorageError, UsernameTaken
from task_tracker.models import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_username(self, username: str) -> User | None:
        try:
            result = await self.session.exec(select(User).where(User.username == username))
            return result.first()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to look up user '{username}'") from e

    async def create_user(self, username: str, hashed_password: str) -> User:
        """Insert a user; a duplicate username raises UsernameTaken."""
        user = User(username=username, hashed_password=hashed_password)
        self.session.add(user)
        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            await self.session.rollback()
            raise UsernameTaken(username) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Failed to create user '{username}'") from e
        return user
