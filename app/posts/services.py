"""
Посты: лента (свои посты + посты прямых друзей), создание/удаление, лайки и комментарии.
"""
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exception import (
    ForbiddenException,
    PostNotFoundException,
    ServerErrorException,
    UserNotFoundException,
    ValidationException,
)
from app.friends.dao import FriendDAO
from app.posts.dao import PostDAO, PostLikeDAO, CommentDAO
from app.posts.models import Post, Comment
from app.posts.schemas import LikeOut
from app.users.dao import UserDAO
from app.users.models import User


def _clean_text(text: Optional[str], max_length: int, what: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationException(f"{what} text is required")
    if len(cleaned) > max_length:
        raise ValidationException(f"{what} must be less than {max_length} characters")
    return cleaned


async def get_feed(session: AsyncSession, user_id: int) -> list[Post]:
    """
    Лента пользователя: посты самого пользователя и его прямых друзей
    (друзья друзей не попадают), новые сверху, не больше FEED_LIMIT.
    """
    user = await UserDAO.find_one_or_none_by_id(session, user_id)
    if not user:
        raise UserNotFoundException

    friend_ids = await FriendDAO.get_friend_ids(session, user.id)
    visible_ids = {user.id, *friend_ids}

    return await PostDAO.find_by_authors(session, visible_ids, limit=settings.FEED_LIMIT)


async def get_user_posts(session: AsyncSession, user_id: int) -> list[Post]:
    return await PostDAO.find_by_authors(session, [user_id])


async def get_post(session: AsyncSession, post_id: int) -> Post:
    post = await PostDAO.find_with_relations(session, post_id)
    if not post:
        raise PostNotFoundException
    return post


async def create_post(session: AsyncSession, user: User, text: Optional[str], image: Optional[str] = None) -> Post:
    cleaned = _clean_text(text, settings.POST_MAX_LENGTH, "Post")

    try:
        post = await PostDAO.add(session, user_id=user.id, text=cleaned, image=image or "")
    except SQLAlchemyError as e:
        logger.error(f"[POSTS] Failed to create post for user {user.id}: {e}")
        raise ServerErrorException

    logger.info(f"[POSTS] Post {post.id} created by user {user.id}")
    return await get_post(session, post.id)


async def delete_post(session: AsyncSession, user: User, post_id: int) -> None:
    post = await PostDAO.find_one_or_none_by_id(session, post_id)
    if not post:
        raise PostNotFoundException

    if post.user_id != user.id:
        logger.warning(f"[POSTS] User {user.id} tried to delete post {post_id} of user {post.user_id}")
        raise ForbiddenException("You can only delete your own posts")

    try:
        await PostDAO.delete_with_children(session, post_id)
    except SQLAlchemyError as e:
        logger.error(f"[POSTS] Failed to delete post {post_id}: {e}")
        raise ServerErrorException

    logger.info(f"[POSTS] Post {post_id} deleted by user {user.id}")


async def toggle_like(session: AsyncSession, post_id: int, user_id: int) -> LikeOut:
    """Лайк, если пользователя ещё нет среди лайкнувших, иначе снятие лайка."""
    post = await PostDAO.find_one_or_none_by_id(session, post_id)
    if not post:
        raise PostNotFoundException

    existing = await PostLikeDAO.find_one_or_none(session, post_id=post_id, user_id=user_id)
    try:
        if existing:
            await PostLikeDAO.delete(session, id=existing.id)
        else:
            await PostLikeDAO.add(session, post_id=post_id, user_id=user_id)
    except IntegrityError as e:
        # параллельный лайк того же пользователя успел раньше, итог тот же
        if existing or not await PostLikeDAO.find_one_or_none(session, post_id=post_id, user_id=user_id):
            logger.error(f"[POSTS] Failed to toggle like on post {post_id} by user {user_id}: {e}")
            raise ServerErrorException
        logger.warning(f"[POSTS] Duplicate like on post {post_id} by user {user_id} ignored")
    except SQLAlchemyError as e:
        logger.error(f"[POSTS] Failed to toggle like on post {post_id} by user {user_id}: {e}")
        raise ServerErrorException

    liked = existing is None
    likes_count = await PostLikeDAO.count(session, post_id)
    logger.info(f"[POSTS] Post {post_id} {'liked' if liked else 'unliked'} by user {user_id}")

    return LikeOut(
        message="Post liked" if liked else "Post unliked",
        liked=liked,
        likes_count=likes_count,
    )


async def add_comment(session: AsyncSession, post_id: int, user: User, text: Optional[str]) -> Comment:
    cleaned = _clean_text(text, settings.COMMENT_MAX_LENGTH, "Comment")

    post = await PostDAO.find_one_or_none_by_id(session, post_id)
    if not post:
        raise PostNotFoundException

    try:
        comment = await CommentDAO.add(session, post_id=post.id, user_id=user.id, text=cleaned)
    except SQLAlchemyError as e:
        logger.error(f"[POSTS] Failed to add comment to post {post_id}: {e}")
        raise ServerErrorException

    logger.info(f"[POSTS] Comment {comment.id} added to post {post_id} by user {user.id}")
    return await CommentDAO.find_with_author(session, comment.id)
