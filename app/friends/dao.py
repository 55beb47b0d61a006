from typing import Optional

from sqlalchemy import select, or_, and_, delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.dao.base import BaseDAO
from app.friends.models import Friend, FriendRequest
from app.users.dao import UserDAO
from app.users.models import User


class FriendDAO(BaseDAO):
    model = Friend

    @staticmethod
    async def exists(session: AsyncSession, user_id: int, friend_id: int) -> bool:
        query = select(Friend.id).where(
            or_(
                (Friend.user_id == user_id) & (Friend.friend_id == friend_id),
                (Friend.user_id == friend_id) & (Friend.friend_id == user_id),
            )
        )
        result = await session.execute(query)
        return result.first() is not None

    @staticmethod
    async def get_friend_ids(session: AsyncSession, user_id: int) -> list[int]:
        # Дружба хранится одной строкой, поэтому смотрим в обе стороны
        result = await session.execute(
            select(Friend.user_id, Friend.friend_id).where(
                (Friend.user_id == user_id) | (Friend.friend_id == user_id)
            )
        )
        return [
            row.friend_id if row.user_id == user_id else row.user_id
            for row in result.all()
        ]

    @classmethod
    async def get_friends(cls, session: AsyncSession, user_id: int) -> list[User]:
        friend_ids = await cls.get_friend_ids(session, user_id)
        return await UserDAO.find_by_ids(session, friend_ids)


class FriendRequestDAO(BaseDAO):
    model = FriendRequest

    @staticmethod
    async def find(session: AsyncSession, from_user_id: int, to_user_id: int) -> Optional[FriendRequest]:
        query = select(FriendRequest).where(
            FriendRequest.from_user_id == from_user_id,
            FriendRequest.to_user_id == to_user_id,
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_incoming(session: AsyncSession, user_id: int) -> list[FriendRequest]:
        query = (
            select(FriendRequest)
            .options(selectinload(FriendRequest.from_user))
            .where(FriendRequest.to_user_id == user_id)
            .order_by(FriendRequest.created_at, FriendRequest.id)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def accept(session: AsyncSession, from_user_id: int, to_user_id: int) -> Friend:
        """
        Принимает заявку одной транзакцией:
        удаляет заявку (и встречную, если обе стороны успели отправить) и создаёт ребро дружбы.
        """
        try:
            await session.execute(
                sa_delete(FriendRequest).where(
                    or_(
                        and_(FriendRequest.from_user_id == from_user_id, FriendRequest.to_user_id == to_user_id),
                        and_(FriendRequest.from_user_id == to_user_id, FriendRequest.to_user_id == from_user_id),
                    )
                )
            )
            friendship = Friend.between(from_user_id, to_user_id)
            session.add(friendship)
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
        return friendship
