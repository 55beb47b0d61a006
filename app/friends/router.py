from fastapi import APIRouter, Depends

from app.database import SessionDep
from app.friends import services
from app.friends.schemas import FriendRequestOut, FriendRequestsOut, FriendsOut
from app.schemas import MessageOut
from app.users.dependencies import get_current_user
from app.users.models import User
from app.users.schemas import UserShort

router = APIRouter(prefix="/users", tags=["Friends"])


@router.get("/me/friend-requests", response_model=FriendRequestsOut)
async def get_friend_requests(session: SessionDep, current_user: User = Depends(get_current_user)):
    requests = await services.get_incoming_requests(session, current_user)
    return FriendRequestsOut(friend_requests=[FriendRequestOut.model_validate(r) for r in requests])


@router.delete("/me/friend-requests/{from_user_id}", response_model=MessageOut)
async def decline_friend_request(
    from_user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)
):
    await services.decline_friend_request(session, current_user, from_user_id)
    return MessageOut(message=services.FRIEND_REQUEST_DECLINED)


@router.post("/{user_id}/friends", response_model=MessageOut)
async def send_or_accept_friend_request(
    user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)
):
    """
    Отправить заявку в друзья или принять встречную.
    Если user_id уже прислал заявку текущему пользователю - заявка принимается.
    """
    message = await services.request_or_accept(session, current_user, user_id)
    return MessageOut(message=message)


@router.delete("/{user_id}/friends/request", response_model=MessageOut)
async def cancel_friend_request(
    user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)
):
    await services.cancel_friend_request(session, current_user, user_id)
    return MessageOut(message=services.FRIEND_REQUEST_CANCELLED)


@router.get("/{user_id}/friends", response_model=FriendsOut)
async def get_friends(user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    friends = await services.get_friends(session, user_id)
    return FriendsOut(friends=[UserShort.model_validate(friend) for friend in friends])
