from fastapi import APIRouter, Depends, status

from app.database import SessionDep
from app.posts import services
from app.posts.schemas import (
    CommentCreate,
    CommentCreatedOut,
    CommentOut,
    LikeOut,
    PostCreate,
    PostCreatedOut,
    PostOut,
    PostsOut,
)
from app.schemas import MessageOut
from app.users.dependencies import get_current_user
from app.users.models import User

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", response_model=PostCreatedOut, status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, session: SessionDep, current_user: User = Depends(get_current_user)):
    post = await services.create_post(session, current_user, body.text, body.image)
    return PostCreatedOut(message="Post created successfully", post=PostOut.model_validate(post))


@router.get("/feed/{user_id}", response_model=PostsOut)
async def get_feed(user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    """Свои посты и посты друзей, новые сверху (не больше 50)."""
    posts = await services.get_feed(session, user_id)
    return PostsOut(posts=[PostOut.model_validate(post) for post in posts])


@router.get("/user/{user_id}", response_model=PostsOut)
async def get_user_posts(user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    posts = await services.get_user_posts(session, user_id)
    return PostsOut(posts=[PostOut.model_validate(post) for post in posts])


@router.get("/{post_id}", response_model=PostOut)
async def get_post(post_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    post = await services.get_post(session, post_id)
    return PostOut.model_validate(post)


@router.delete("/{post_id}", response_model=MessageOut)
async def delete_post(post_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    await services.delete_post(session, current_user, post_id)
    return MessageOut(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeOut)
async def toggle_like(post_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    return await services.toggle_like(session, post_id, current_user.id)


@router.post("/{post_id}/comment", response_model=CommentCreatedOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: int, body: CommentCreate, session: SessionDep, current_user: User = Depends(get_current_user)
):
    comment = await services.add_comment(session, post_id, current_user, body.text)
    return CommentCreatedOut(message="Comment added successfully", comment=CommentOut.model_validate(comment))
