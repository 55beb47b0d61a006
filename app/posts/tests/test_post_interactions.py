"""
Тесты действий с постами: создание, удаление владельцем, лайки и комментарии.
"""
import pytest

from app.exception import (
    ForbiddenException,
    PostNotFoundException,
    ValidationException,
)
from app.posts import services
from app.posts.dao import PostLikeDAO
from app.posts.models import PostLike


@pytest.mark.asyncio
async def test_create_post_trims_text(fake_session, make_user):
    user = await make_user("author")

    post = await services.create_post(fake_session, user, "  hello world  ", "http://img/1.png")

    assert post.text == "hello world"
    assert post.image == "http://img/1.png"
    assert post.author.username == "author"
    assert post.comments == []


@pytest.mark.asyncio
async def test_create_post_validation(fake_session, make_user):
    user = await make_user("author")

    with pytest.raises(ValidationException):
        await services.create_post(fake_session, user, "   ")
    with pytest.raises(ValidationException):
        await services.create_post(fake_session, user, "x" * 1001)

    post = await services.create_post(fake_session, user, "x" * 1000)
    assert len(post.text) == 1000
    assert post.image == ""


@pytest.mark.asyncio
async def test_toggle_like_twice_restores_state(fake_session, make_user, make_post):
    author = await make_user("author")
    fan = await make_user("fan")
    post = await make_post(author, "likeable")

    first = await services.toggle_like(fake_session, post.id, fan.id)
    assert first.liked is True
    assert first.likes_count == 1

    second = await services.toggle_like(fake_session, post.id, fan.id)
    assert second.liked is False
    assert second.likes_count == 0

    reloaded = await services.get_post(fake_session, post.id)
    assert reloaded.likes == []


@pytest.mark.asyncio
async def test_likes_from_different_users(fake_session, make_user, make_post):
    author = await make_user("author")
    fan = await make_user("fan")
    post = await make_post(author, "likeable")

    await services.toggle_like(fake_session, post.id, author.id)
    result = await services.toggle_like(fake_session, post.id, fan.id)
    assert result.likes_count == 2

    reloaded = await services.get_post(fake_session, post.id)
    assert reloaded.likes == [author.id, fan.id]


@pytest.mark.asyncio
async def test_concurrent_duplicate_like_counts_once(fake_session, make_user, make_post, monkeypatch):
    author = await make_user("author")
    post = await make_post(author, "post")
    post_id, user_id = post.id, author.id
    fake_session.add(PostLike(post_id=post_id, user_id=user_id))
    await fake_session.commit()

    original_lookup = PostLikeDAO.find_one_or_none
    calls = []

    async def stale_lookup(session, **filter_by):
        calls.append(filter_by)
        if len(calls) == 1:
            return None  # второй запрос ещё не видит лайк первого
        return await original_lookup(session, **filter_by)

    monkeypatch.setattr(PostLikeDAO, "find_one_or_none", stale_lookup)

    result = await services.toggle_like(fake_session, post_id, user_id)

    assert result.liked is True
    assert result.likes_count == 1
    assert await PostLikeDAO.count(fake_session, post_id) == 1


@pytest.mark.asyncio
async def test_like_missing_post(fake_session, make_user):
    user = await make_user("user")
    with pytest.raises(PostNotFoundException):
        await services.toggle_like(fake_session, 9999, user.id)


@pytest.mark.asyncio
async def test_comment_length_limit(fake_session, make_user, make_post):
    author = await make_user("author")
    post = await make_post(author, "discuss")

    with pytest.raises(ValidationException):
        await services.add_comment(fake_session, post.id, author, "x" * 501)
    with pytest.raises(ValidationException):
        await services.add_comment(fake_session, post.id, author, "  ")

    comment = await services.add_comment(fake_session, post.id, author, "x" * 500)
    assert len(comment.text) == 500
    assert comment.author.username == "author"


@pytest.mark.asyncio
async def test_comments_are_appended_in_order(fake_session, make_user, make_post):
    author = await make_user("author")
    reader = await make_user("reader")
    post = await make_post(author, "discuss")

    await services.add_comment(fake_session, post.id, reader, " first ")
    await services.add_comment(fake_session, post.id, author, "second")

    reloaded = await services.get_post(fake_session, post.id)
    assert [(c.author.username, c.text) for c in reloaded.comments] == [
        ("reader", "first"),
        ("author", "second"),
    ]


@pytest.mark.asyncio
async def test_comment_on_missing_post(fake_session, make_user):
    user = await make_user("user")
    with pytest.raises(PostNotFoundException):
        await services.add_comment(fake_session, 9999, user, "hello")


@pytest.mark.asyncio
async def test_delete_post_permissions(fake_session, make_user, make_post):
    author = await make_user("author")
    other = await make_user("other")
    post = await make_post(author, "mine")
    await services.toggle_like(fake_session, post.id, other.id)
    await services.add_comment(fake_session, post.id, other, "nice")

    with pytest.raises(ForbiddenException):
        await services.delete_post(fake_session, other, post.id)
    assert (await services.get_post(fake_session, post.id)).id == post.id

    await services.delete_post(fake_session, author, post.id)

    with pytest.raises(PostNotFoundException):
        await services.get_post(fake_session, post.id)
    with pytest.raises(PostNotFoundException):
        await services.delete_post(fake_session, author, post.id)
