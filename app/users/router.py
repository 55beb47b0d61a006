from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database import SessionDep
from app.exception import (
    ForbiddenException,
    IncorrectEmailOrPasswordException,
    ServerErrorException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)
from app.friends.dao import FriendDAO
from app.friends.services import get_relationship
from app.users.auth import authenticate_user, create_user_token, get_password_hash
from app.users.dao import UserDAO
from app.users.dependencies import get_current_user
from app.users.models import User
from app.users.schemas import (
    LoginRequest,
    ProfileOut,
    ProfileUserOut,
    TokenOut,
    UserOut,
    UserRegister,
    UserShort,
    UsersOut,
    UserUpdate,
    UserUpdateOut,
)

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
router = APIRouter(prefix="/users", tags=["User"])


@auth_router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister, session: SessionDep):
    email = body.email.lower()
    if await UserDAO.find_by_username_or_email(session, body.username, email):
        raise UserAlreadyExistsException("User with this username or email already exists")

    try:
        user = await UserDAO.add(
            session,
            username=body.username,
            email=email,
            password=get_password_hash(body.password),
        )
    except SQLAlchemyError as e:
        logger.error(f"[AUTH] Failed to register {body.username}: {e}")
        raise ServerErrorException

    logger.info(f"[AUTH] Registered user {user.id} ({user.username})")
    return TokenOut(access_token=create_user_token(user), user=UserOut.model_validate(user))


@auth_router.post("/login", response_model=TokenOut)
async def login(credentials: LoginRequest, session: SessionDep):
    user = await authenticate_user(session, credentials.email, credentials.password)
    if not user:
        raise IncorrectEmailOrPasswordException
    return TokenOut(access_token=create_user_token(user), user=UserOut.model_validate(user))


@auth_router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return UserOut.model_validate(current_user)


@router.get("/search/{query}", response_model=UsersOut)
async def search_users(query: str, session: SessionDep, current_user: User = Depends(get_current_user)):
    """Поиск по подстроке в username/email без учёта регистра, себя не показываем."""
    users = await UserDAO.search(session, query, exclude_id=current_user.id, limit=settings.SEARCH_LIMIT)
    return UsersOut(users=[UserShort.model_validate(user) for user in users])


@router.get("/{user_id}", response_model=ProfileOut)
async def get_profile(user_id: int, session: SessionDep, current_user: User = Depends(get_current_user)):
    user = await UserDAO.find_one_or_none_by_id(session, user_id)
    if not user:
        raise UserNotFoundException

    friends = await FriendDAO.get_friends(session, user.id)
    profile = ProfileUserOut(
        **UserOut.model_validate(user).model_dump(),
        friends=[UserShort.model_validate(friend) for friend in friends],
    )
    relationship = await get_relationship(session, current_user, user)
    return ProfileOut(user=profile, relationship=relationship)


@router.put("/{user_id}", response_model=UserUpdateOut)
async def update_profile(
    user_id: int,
    user_update: UserUpdate,
    session: SessionDep,
    current_user: User = Depends(get_current_user),
):
    if user_id != current_user.id:
        raise ForbiddenException("You can only update your own profile")

    values = user_update.model_dump(exclude_unset=True)
    if values.get("bio") is not None and len(values["bio"]) > settings.BIO_MAX_LENGTH:
        raise ValidationException(f"Bio must be less than {settings.BIO_MAX_LENGTH} characters")

    try:
        await UserDAO.update(session, {"id": user_id}, **values)
    except SQLAlchemyError as e:
        logger.error(f"[USERS] Failed to update profile {user_id}: {e}")
        raise ServerErrorException

    updated = await UserDAO.find_one_or_none_by_id(session, user_id)
    await session.refresh(updated)
    return UserUpdateOut(message="Profile updated successfully", user=UserOut.model_validate(updated))
