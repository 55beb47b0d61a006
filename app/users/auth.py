from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.users.dao import UserDAO
from app.users.models import User


pwd_context = CryptContext(schemes=['bcrypt'], deprecated="auto")


def _truncate(password: str) -> str:
    # bcrypt учитывает только первые 72 байта
    if len(password.encode('utf-8')) > 72:
        password = password.encode('utf-8')[:72].decode('utf-8', errors='ignore')
    return password


def get_password_hash(password: str) -> str:
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp': expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, settings.ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({'sub': str(user.id)})


async def authenticate_user(session: AsyncSession, email: str, password: str) -> Optional[User]:
    user = await UserDAO.find_one_or_none(session, email=email.lower())
    if not user or not verify_password(password, user.password):
        return None
    return user
