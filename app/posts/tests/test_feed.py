"""
Тесты ленты:
- в ленте только свои посты и посты прямых друзей
- сортировка по времени создания (новые сверху), при равном времени - порядок вставки
- ограничение в 50 постов
- пустая лента не ошибка
"""
import pytest

from app.config import settings
from app.exception import UserNotFoundException
from app.posts import services
from app.posts.models import Comment


@pytest.mark.asyncio
async def test_feed_contains_own_and_friends_posts(fake_session, make_user, make_post, make_friends):
    user = await make_user("user")
    friend_1 = await make_user("friend1")
    friend_2 = await make_user("friend2")
    stranger = await make_user("stranger")
    await make_friends(user, friend_1)
    await make_friends(friend_2, user)

    own = await make_post(user, "own", minute=1)
    f1 = await make_post(friend_1, "friend one", minute=3)
    f2 = await make_post(friend_2, "friend two", minute=2)
    await make_post(stranger, "stranger", minute=4)

    feed = await services.get_feed(fake_session, user.id)

    assert [p.id for p in feed] == [f1.id, f2.id, own.id]
    assert {p.user_id for p in feed} == {user.id, friend_1.id, friend_2.id}


@pytest.mark.asyncio
async def test_feed_excludes_friends_of_friends(fake_session, make_user, make_post, make_friends):
    user = await make_user("user")
    friend = await make_user("friend")
    friend_of_friend = await make_user("fof")
    await make_friends(user, friend)
    await make_friends(friend, friend_of_friend)

    await make_post(friend_of_friend, "far away", minute=1)
    friend_post = await make_post(friend, "close", minute=0)

    feed = await services.get_feed(fake_session, user.id)
    assert [p.id for p in feed] == [friend_post.id]


@pytest.mark.asyncio
async def test_feed_ties_keep_insertion_order(fake_session, make_user, make_post):
    user = await make_user("user")
    first = await make_post(user, "first", minute=5)
    second = await make_post(user, "second", minute=5)
    newest = await make_post(user, "newest", minute=6)

    feed = await services.get_feed(fake_session, user.id)
    assert [p.id for p in feed] == [newest.id, first.id, second.id]


@pytest.mark.asyncio
async def test_feed_is_capped(fake_session, make_user, make_post):
    user = await make_user("user")
    for minute in range(settings.FEED_LIMIT + 5):
        await make_post(user, f"post {minute}", minute=minute)

    feed = await services.get_feed(fake_session, user.id)

    assert len(feed) == settings.FEED_LIMIT == 50
    # Отброшены самые старые
    assert feed[0].text == f"post {settings.FEED_LIMIT + 4}"
    assert feed[-1].text == "post 5"


@pytest.mark.asyncio
async def test_empty_feed(fake_session, make_user):
    user = await make_user("lonely")
    assert await services.get_feed(fake_session, user.id) == []


@pytest.mark.asyncio
async def test_feed_for_missing_user(fake_session):
    with pytest.raises(UserNotFoundException):
        await services.get_feed(fake_session, 9999)


@pytest.mark.asyncio
async def test_feed_resolves_authors(fake_session, make_user, make_post, make_friends):
    user = await make_user("user")
    friend = await make_user("friend")
    await make_friends(user, friend)
    post = await make_post(friend, "hello", minute=0)
    fake_session.add(Comment(post_id=post.id, user_id=user.id, text="hi back"))
    await fake_session.commit()

    [item] = await services.get_feed(fake_session, user.id)

    assert item.author.username == "friend"
    assert [c.author.username for c in item.comments] == ["user"]
    assert item.likes == []
    assert item.likes_count == 0


@pytest.mark.asyncio
async def test_user_posts_only_author(fake_session, make_user, make_post, make_friends):
    user = await make_user("user")
    friend = await make_user("friend")
    await make_friends(user, friend)
    old = await make_post(user, "old", minute=0)
    new = await make_post(user, "new", minute=1)
    await make_post(friend, "friend's", minute=2)

    posts = await services.get_user_posts(fake_session, user.id)
    assert [p.id for p in posts] == [new.id, old.id]
