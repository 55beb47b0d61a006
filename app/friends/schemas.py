from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.users.schemas import UserShort


class FriendRequestOut(BaseModel):
    id: int
    from_user: UserShort = Field(alias="from")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class FriendRequestsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    friend_requests: list[FriendRequestOut] = Field(alias="friendRequests")


class FriendsOut(BaseModel):
    friends: list[UserShort]
