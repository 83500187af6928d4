"""
User Repository
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.models import User
from fundtracker.infrastructure.db.models import UserModel
from fundtracker.utils.time import now_ist_naive


class UserRepository:
    """Repository for registered users"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email,
            created_at=user.created_at or now_ist_naive(),
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_domain(model)

    async def get(self, user_id: int) -> Optional[User]:
        model = await self.session.get(UserModel, user_id)
        return self._to_domain(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            created_at=model.created_at,
        )
