from typing import Optional

from fastapi import HTTPException, status


class SocialException(HTTPException):  # <-- наследуемся от HTTPException,
    status_code = 500  # <-- задаем значения по умолчанию
    detail = ""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.detail)


# ---------- Доменные ошибки ----------

class NotFoundException(SocialException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class UserNotFoundException(NotFoundException):
    detail = "User not found"


class PostNotFoundException(NotFoundException):
    detail = "Post not found"


class FriendRequestNotFoundException(NotFoundException):
    detail = "Friend request not found"


class ValidationException(SocialException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"


class ForbiddenException(SocialException):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class InvalidOperationException(SocialException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "You cannot send friend request to yourself"


class AlreadyFriendsException(SocialException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "You are already friends"


class AlreadyRequestedException(SocialException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Friend request already sent"


class ServerErrorException(SocialException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Server error"


# ---------- Авторизация ----------

class UserAlreadyExistsException(SocialException):
    status_code = status.HTTP_409_CONFLICT
    detail = "User already exists"


class IncorrectFormatTokenException(SocialException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid token format"


class TokenExpireException(SocialException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Token expired"


class IncorrectEmailOrPasswordException(SocialException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid email or password"


class UserIsNotPresentException(SocialException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "User is not present"


class NoTokenException(SocialException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "No token provided"
