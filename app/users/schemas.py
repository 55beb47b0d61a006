from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserPublic(BaseModel):
    """Отображаемая личность автора поста/комментария."""
    id: int
    username: str
    profile_picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserShort(UserPublic):
    email: str
    bio: str = ""


class UserOut(UserShort):
    created_at: datetime


class ProfileUserOut(UserOut):
    friends: list[UserShort] = []


class RelationshipOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_friend: bool = Field(alias="isFriend")
    has_pending_request: bool = Field(alias="hasPendingRequest")
    has_received_request: bool = Field(alias="hasReceivedRequest")
    is_own: bool = Field(alias="isOwn")


class ProfileOut(BaseModel):
    user: ProfileUserOut
    relationship: RelationshipOut


class UserUpdate(BaseModel):
    bio: Optional[str] = None
    profile_picture: Optional[str] = None


class UserUpdateOut(BaseModel):
    message: str
    user: UserOut


class UsersOut(BaseModel):
    users: list[UserShort]


class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
