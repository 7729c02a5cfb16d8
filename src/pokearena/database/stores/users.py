"""User directory."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pokearena.core.errors import ValidationError
from pokearena.database.models import User
from pokearena.logging import get_logger

logger = get_logger(__name__)


class UserStore:
    """Reads and creates user records."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create(
        self,
        user_id: str,
        first_name: str,
        email: str,
        password_hash: str,
    ) -> User:
        async with self.session_factory() as session:
            existing = await session.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                raise ValidationError("Email already registered")

            user = User(
                id=user_id,
                first_name=first_name,
                email=email,
                password_hash=password_hash,
            )
            session.add(user)
            await session.commit()

        logger.info("User created", user_id=user_id)
        return user

    async def get(self, user_id: str) -> User | None:
        async with self.session_factory() as session:
            return await session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        async with self.session_factory() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        async with self.session_factory() as session:
            result = await session.execute(select(User).order_by(User.created_at.asc()))
            return list(result.scalars().all())
