from typing import Iterable, Optional

from sqlalchemy import select, func, delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.dao.base import BaseDAO
from app.posts.models import Post, PostLike, Comment


def _with_relations(query):
    # Автор поста, лайки и авторы комментариев подгружаются сразу
    return query.options(
        selectinload(Post.author),
        selectinload(Post.like_records),
        selectinload(Post.comments).selectinload(Comment.author),
    ).execution_options(populate_existing=True)


class PostDAO(BaseDAO):
    model = Post

    @classmethod
    async def find_with_relations(cls, session: AsyncSession, post_id: int) -> Optional[Post]:
        query = _with_relations(select(Post).where(Post.id == post_id))
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def find_by_authors(
        cls, session: AsyncSession, author_ids: Iterable[int], limit: Optional[int] = None
    ) -> list[Post]:
        """Посты указанных авторов, новые сверху; при равном времени - в порядке вставки."""
        query = _with_relations(
            select(Post)
            .where(Post.user_id.in_(list(author_ids)))
            .order_by(Post.created_at.desc(), Post.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await session.execute(query)
        return list(result.scalars().all())

    @classmethod
    async def delete_with_children(cls, session: AsyncSession, post_id: int) -> int:
        try:
            await session.execute(sa_delete(PostLike).where(PostLike.post_id == post_id))
            await session.execute(sa_delete(Comment).where(Comment.post_id == post_id))
            result = await session.execute(sa_delete(Post).where(Post.id == post_id))
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
        return result.rowcount


class PostLikeDAO(BaseDAO):
    model = PostLike

    @staticmethod
    async def count(session: AsyncSession, post_id: int) -> int:
        result = await session.execute(
            select(func.count(PostLike.id)).where(PostLike.post_id == post_id)
        )
        return result.scalar_one()


class CommentDAO(BaseDAO):
    model = Comment

    @staticmethod
    async def find_with_author(session: AsyncSession, comment_id: int) -> Optional[Comment]:
        query = (
            select(Comment)
            .options(selectinload(Comment.author))
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()
