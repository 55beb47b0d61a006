from fastapi import Request
from jose import jwt, ExpiredSignatureError, JWTError
from loguru import logger

from app.config import settings
from app.database import SessionDep
from app.exception import IncorrectFormatTokenException, TokenExpireException, \
    UserIsNotPresentException, NoTokenException
from app.users.dao import UserDAO
from app.users.models import User


def get_token(request: Request) -> str:
    """Достаёт токен из заголовка `Authorization: Bearer <token>`."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        raise NoTokenException
    return token.strip()


async def get_current_user(request: Request, session: SessionDep) -> User:
    """Получение текущего пользователя из JWT токена"""
    token = get_token(request)
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpireException
    except JWTError as e:
        logger.warning(f"[AUTH] JWT decode error: {e}")
        raise IncorrectFormatTokenException

    user_id = payload.get('sub')
    if not user_id or not str(user_id).isdigit():
        raise UserIsNotPresentException

    user = await UserDAO.find_one_or_none_by_id(session, int(user_id))
    if not user:
        logger.warning(f"[AUTH] User with id {user_id} not found")
        raise UserIsNotPresentException

    return user
