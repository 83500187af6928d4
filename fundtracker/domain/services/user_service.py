import logging

from fundtracker.domain.exceptions import DuplicateUser, NotFound
from fundtracker.domain.models import User
from fundtracker.domain.repositories import UserStore

logger = logging.getLogger(__name__)


class UserService:
    """Registration and lookup; sessions and credentials live elsewhere."""

    def __init__(self, users: UserStore):
        self.users = users

    async def register(self, name: str, email: str) -> User:
        email = email.strip().lower()
        if await self.users.get_by_email(email) is not None:
            raise DuplicateUser(email)

        user = await self.users.create(User(id=None, name=name.strip(), email=email))
        logger.info("Registered user %s <%s>", user.id, email)
        return user

    async def get(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user
