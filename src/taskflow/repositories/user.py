"""Repository for User entity."""

from sqlmodel import select

from src.taskflow.models import User
from src.taskflow.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    """Emails are stored stripped and lower-cased."""
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        user = await self.get_by_email(email)
        return user is not None
