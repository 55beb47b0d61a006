from typing import Optional

from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.dao.base import BaseDAO
from app.users.models import User


class UserDAO(BaseDAO):
    model = User

    @classmethod
    async def find_by_ids(cls, session: AsyncSession, user_ids) -> list[User]:
        if not user_ids:
            return []
        q = select(cls.model).where(cls.model.id.in_(user_ids)).order_by(cls.model.username)
        res = await session.execute(q)
        return list(res.scalars().all())

    @classmethod
    async def find_by_username_or_email(cls, session: AsyncSession, username: str, email: str) -> Optional[User]:
        q = select(cls.model).where(or_(cls.model.username == username, cls.model.email == email))
        res = await session.execute(q)
        return res.scalars().first()

    @classmethod
    async def search(cls, session: AsyncSession, query: str, exclude_id: int, limit: int) -> list[User]:
        """Регистронезависимый поиск подстроки в username/email. Спецсимволы LIKE экранируются."""
        needle = query.lower()
        q = (
            select(cls.model)
            .where(cls.model.id != exclude_id)
            .where(
                or_(
                    func.lower(cls.model.username).contains(needle, autoescape=True),
                    func.lower(cls.model.email).contains(needle, autoescape=True),
                )
            )
            .order_by(cls.model.username)
            .limit(limit)
        )
        res = await session.execute(q)
        return list(res.scalars().all())
