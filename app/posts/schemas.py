from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.users.schemas import UserPublic


class PostCreate(BaseModel):
    text: str
    image: Optional[str] = None


class CommentCreate(BaseModel):
    text: str


class CommentOut(BaseModel):
    id: int
    author: UserPublic
    text: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostOut(BaseModel):
    id: int
    author: UserPublic
    text: str
    image: str = ""
    likes: list[int]
    likes_count: int = Field(alias="likesCount")
    comments: list[CommentOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PostsOut(BaseModel):
    posts: list[PostOut]


class PostCreatedOut(BaseModel):
    message: str
    post: PostOut


class CommentCreatedOut(BaseModel):
    message: str
    comment: CommentOut


class LikeOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    liked: bool
    likes_count: int = Field(alias="likesCount")
