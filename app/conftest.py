"""
Общие фикстуры: in-memory SQLite вместо боевой БД и HTTP-клиент поверх ASGI-приложения.
"""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_session

# Важно: импортируем все модели до создания таблиц,
# чтобы SQLAlchemy могла правильно разрешить relationships
from app.users.models import User
from app.friends.models import Friend, FriendRequest
from app.posts.models import Post, PostLike, Comment

from app.main import app
from app.users.auth import create_user_token

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def fake_session():
    """Создаёт сессию на in-memory SQLite для тестов."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        try:
            yield session
        finally:
            await session.rollback()

    await engine.dispose()


@pytest_asyncio.fixture
async def make_user(fake_session):
    """Фабрика пользователей: make_user("alice") -> User."""
    async def _make_user(username: str, email: str = None) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password="not-a-real-hash",
            bio="",
        )
        fake_session.add(user)
        await fake_session.commit()
        await fake_session.refresh(user)
        return user

    return _make_user


@pytest_asyncio.fixture
async def test_users(make_user):
    """Создаёт трёх тестовых пользователей."""
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    return alice, bob, carol


@pytest_asyncio.fixture
async def make_post(fake_session):
    """Фабрика постов с явным временем создания (минуты от BASE_TIME)."""
    async def _make_post(author: User, text: str, minute: int = 0) -> Post:
        post = Post(
            user_id=author.id,
            text=text,
            image="",
            created_at=BASE_TIME + timedelta(minutes=minute),
            updated_at=BASE_TIME + timedelta(minutes=minute),
        )
        fake_session.add(post)
        await fake_session.commit()
        await fake_session.refresh(post)
        return post

    return _make_post


@pytest_asyncio.fixture
async def make_friends(fake_session):
    async def _make_friends(user: User, other: User) -> Friend:
        friendship = Friend.between(user.id, other.id)
        fake_session.add(friendship)
        await fake_session.commit()
        return friendship

    return _make_friends


@pytest_asyncio.fixture
async def client(fake_session):
    """HTTP-клиент, у которого зависимость сессии подменена на тестовую."""
    async def get_fake_session():
        yield fake_session

    app.dependency_overrides[get_session] = get_fake_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """auth_headers(user) -> заголовок с bearer-токеном пользователя."""
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_user_token(user)}"}

    return _auth_headers
