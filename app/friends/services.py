"""
Управление дружбой: заявки, принятие, отмена и флаги отношений между двумя пользователями.
"""
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exception import (
    AlreadyFriendsException,
    AlreadyRequestedException,
    FriendRequestNotFoundException,
    InvalidOperationException,
    ServerErrorException,
    UserNotFoundException,
)
from app.friends.dao import FriendDAO, FriendRequestDAO
from app.friends.models import FriendRequest
from app.users.dao import UserDAO
from app.users.models import User
from app.users.schemas import RelationshipOut

FRIEND_REQUEST_SENT = "Friend request sent"
FRIEND_REQUEST_ACCEPTED = "Friend request accepted"
FRIEND_REQUEST_CANCELLED = "Friend request cancelled"
FRIEND_REQUEST_DECLINED = "Friend request declined"


async def _get_target(session: AsyncSession, current_user: User, target_id: int) -> User:
    if current_user.id == target_id:
        raise InvalidOperationException
    target = await UserDAO.find_one_or_none_by_id(session, target_id)
    if not target:
        raise UserNotFoundException
    return target


async def send_friend_request(session: AsyncSession, current_user: User, target_id: int) -> FriendRequest:
    target = await _get_target(session, current_user, target_id)

    if await FriendDAO.exists(session, current_user.id, target.id):
        raise AlreadyFriendsException
    if await FriendRequestDAO.find(session, current_user.id, target.id):
        raise AlreadyRequestedException
    if await FriendRequestDAO.find(session, target.id, current_user.id):
        raise InvalidOperationException("This user has already sent you a friend request, accept it instead")

    try:
        request = await FriendRequestDAO.add(session, from_user_id=current_user.id, to_user_id=target.id)
    except SQLAlchemyError as e:
        logger.error(f"[FRIENDS] Failed to store request {current_user.id} -> {target.id}: {e}")
        raise ServerErrorException

    logger.info(f"[FRIENDS] Request sent: {current_user.id} -> {target.id}")
    return request


async def accept_friend_request(session: AsyncSession, current_user: User, from_user_id: int) -> None:
    sender = await _get_target(session, current_user, from_user_id)

    if await FriendDAO.exists(session, current_user.id, sender.id):
        raise AlreadyFriendsException

    # Заявка обязана существовать, иначе принимать нечего
    request = await FriendRequestDAO.find(session, sender.id, current_user.id)
    if not request:
        logger.warning(f"[FRIENDS] No pending request {sender.id} -> {current_user.id}")
        raise FriendRequestNotFoundException

    try:
        await FriendRequestDAO.accept(session, from_user_id=sender.id, to_user_id=current_user.id)
    except SQLAlchemyError as e:
        logger.error(f"[FRIENDS] Failed to accept request {sender.id} -> {current_user.id}: {e}")
        raise ServerErrorException

    logger.info(f"[FRIENDS] Request accepted: {sender.id} -> {current_user.id}")


async def request_or_accept(session: AsyncSession, current_user: User, target_id: int) -> str:
    """
    Одна точка входа для кнопки "Добавить в друзья":
    если target уже прислал заявку текущему пользователю - принимаем её,
    иначе отправляем новую заявку.

    Returns:
        Сообщение о выполненном действии.
    """
    target = await _get_target(session, current_user, target_id)

    if await FriendDAO.exists(session, current_user.id, target.id):
        raise AlreadyFriendsException

    if await FriendRequestDAO.find(session, target.id, current_user.id):
        await accept_friend_request(session, current_user, target.id)
        return FRIEND_REQUEST_ACCEPTED

    await send_friend_request(session, current_user, target.id)
    return FRIEND_REQUEST_SENT


async def cancel_friend_request(session: AsyncSession, current_user: User, target_id: int) -> None:
    target = await _get_target(session, current_user, target_id)

    request = await FriendRequestDAO.find(session, current_user.id, target.id)
    if not request:
        raise FriendRequestNotFoundException

    try:
        await FriendRequestDAO.delete(session, id=request.id)
    except SQLAlchemyError as e:
        logger.error(f"[FRIENDS] Failed to cancel request {current_user.id} -> {target.id}: {e}")
        raise ServerErrorException

    logger.info(f"[FRIENDS] Request cancelled: {current_user.id} -> {target.id}")


async def decline_friend_request(session: AsyncSession, current_user: User, from_user_id: int) -> None:
    sender = await _get_target(session, current_user, from_user_id)

    request = await FriendRequestDAO.find(session, sender.id, current_user.id)
    if not request:
        raise FriendRequestNotFoundException

    try:
        await FriendRequestDAO.delete(session, id=request.id)
    except SQLAlchemyError as e:
        logger.error(f"[FRIENDS] Failed to decline request {sender.id} -> {current_user.id}: {e}")
        raise ServerErrorException

    logger.info(f"[FRIENDS] Request declined: {sender.id} -> {current_user.id}")


async def get_friends(session: AsyncSession, user_id: int) -> list[User]:
    user = await UserDAO.find_one_or_none_by_id(session, user_id)
    if not user:
        raise UserNotFoundException
    return await FriendDAO.get_friends(session, user.id)


async def get_incoming_requests(session: AsyncSession, user: User) -> list[FriendRequest]:
    return await FriendRequestDAO.get_incoming(session, user.id)


async def get_relationship(session: AsyncSession, viewer: User, user: User) -> RelationshipOut:
    if viewer.id == user.id:
        return RelationshipOut(
            is_friend=False, has_pending_request=False, has_received_request=False, is_own=True
        )

    return RelationshipOut(
        is_friend=await FriendDAO.exists(session, viewer.id, user.id),
        has_pending_request=await FriendRequestDAO.find(session, viewer.id, user.id) is not None,
        has_received_request=await FriendRequestDAO.find(session, user.id, viewer.id) is not None,
        is_own=False,
    )
