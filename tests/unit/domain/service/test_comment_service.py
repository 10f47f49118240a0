"""Unit tests for CommentService."""

from uuid import uuid4

import pytest

from blog.domain.error import InvalidRelationError, NotFoundError, ValidationError
from blog.domain.repository import CommentFilter, CommentRepository, PostRepository
from blog.domain.service import CommentService, DeletionMode
from blog.domain.service.moderation import TOMBSTONE_TEXT
from blog.domain.value import CommentId, CommentStatus, PostId, UserId
from tests.conftest import make_comment, make_post
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


async def _saved_post(env):
    post_repo = await env.get(PostRepository)
    return await post_repo.save(make_post())


class TestCreateComment:
    """Tests for create_comment method."""

    @pytest.mark.asyncio
    async def test_create_root_comment_is_pending(self, unit_env):
        """New root comments start PENDING and are persisted."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post = await _saved_post(unit_env)
        author_id = UserId(uuid4())

        # Act
        result = await comment_service.create_comment(
            post_id=post.id, author_id=author_id, content="Great read"
        )

        # Assert
        assert result.status == CommentStatus.PENDING
        assert result.parent_id is None
        assert result.is_root
        assert result.author_id == author_id
        assert result.created_at == result.updated_at

        saved = await comment_repo.find_by_id(result.id)
        assert saved == result

    @pytest.mark.asyncio
    async def test_create_reply_to_comment_on_same_post(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        parent = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Parent"
        )

        reply = await comment_service.create_comment(
            post_id=post.id,
            author_id=UserId(uuid4()),
            content="Reply",
            parent_id=parent.id,
        )

        assert reply.parent_id == parent.id
        assert reply.status == CommentStatus.PENDING

    @pytest.mark.asyncio
    async def test_create_comment_on_missing_post_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError, match="Post not found"):
            await comment_service.create_comment(
                post_id=PostId(uuid4()), author_id=UserId(uuid4()), content="Hi"
            )

    @pytest.mark.asyncio
    async def test_create_reply_to_missing_parent_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)

        with pytest.raises(NotFoundError, match="Comment not found"):
            await comment_service.create_comment(
                post_id=post.id,
                author_id=UserId(uuid4()),
                content="Reply",
                parent_id=CommentId(uuid4()),
            )

    @pytest.mark.asyncio
    async def test_reply_to_comment_from_other_post_is_rejected(self, unit_env):
        """The parent must live on the same post; nothing is stored otherwise."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        first_post = await _saved_post(unit_env)
        second_post = await _saved_post(unit_env)
        parent = await comment_service.create_comment(
            post_id=first_post.id, author_id=UserId(uuid4()), content="On P1"
        )

        # Act & Assert
        with pytest.raises(InvalidRelationError):
            await comment_service.create_comment(
                post_id=second_post.id,
                author_id=UserId(uuid4()),
                content="On P2",
                parent_id=parent.id,
            )

        assert await comment_repo.find_by_post(second_post.id) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   ", "\n\t", "x" * 1001])
    async def test_invalid_content_raises_validation_error(self, unit_env, content):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)

        with pytest.raises(ValidationError):
            await comment_service.create_comment(
                post_id=post.id, author_id=UserId(uuid4()), content=content
            )

    @pytest.mark.asyncio
    async def test_content_at_max_length_is_accepted(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)

        result = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="x" * 1000
        )

        assert len(result.content) == 1000


class TestReadComments:
    """Tests for the read operations."""

    @pytest.mark.asyncio
    async def test_get_missing_comment_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.get_comment(CommentId(uuid4()))

    @pytest.mark.asyncio
    async def test_list_for_post_filters_every_level(self, unit_env):
        """Pending replies are hidden from an approved-only listing."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post = await _saved_post(unit_env)
        root = make_comment(post.id, "root", status=CommentStatus.APPROVED)
        approved_reply = make_comment(
            post.id,
            "approved reply",
            parent_id=root.id,
            status=CommentStatus.APPROVED,
            minutes=1,
        )
        pending_reply = make_comment(
            post.id, "pending reply", parent_id=root.id, minutes=2
        )
        pending_root = make_comment(post.id, "pending root", minutes=3)
        for comment in (root, approved_reply, pending_reply, pending_root):
            await comment_repo.save(comment)

        # Act
        threads = await comment_service.list_for_post(
            post.id, status=CommentStatus.APPROVED
        )

        # Assert
        assert [node.comment.id for node in threads] == [root.id]
        assert [node.comment.id for node in threads[0].replies] == [
            approved_reply.id
        ]

    @pytest.mark.asyncio
    async def test_list_for_post_without_status_returns_everything(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post = await _saved_post(unit_env)
        approved = make_comment(post.id, "a", status=CommentStatus.APPROVED)
        rejected = make_comment(
            post.id, "b", status=CommentStatus.REJECTED, minutes=1
        )
        await comment_repo.save(approved)
        await comment_repo.save(rejected)

        threads = await comment_service.list_for_post(post.id)

        assert [node.comment.id for node in threads] == [rejected.id, approved.id]

    @pytest.mark.asyncio
    async def test_list_for_missing_post_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.list_for_post(PostId(uuid4()))

    @pytest.mark.asyncio
    async def test_get_comment_thread_includes_replies(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post = await _saved_post(unit_env)
        root = make_comment(post.id, "root")
        reply = make_comment(post.id, "reply", parent_id=root.id, minutes=1)
        await comment_repo.save(root)
        await comment_repo.save(reply)

        node = await comment_service.get_comment_thread(root.id)

        assert node.comment.id == root.id
        assert [r.comment.id for r in node.replies] == [reply.id]

    @pytest.mark.asyncio
    async def test_list_for_user_returns_only_their_comments(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post = await _saved_post(unit_env)
        author_id = UserId(uuid4())
        mine_old = make_comment(post.id, "old", author_id=author_id)
        mine_new = make_comment(post.id, "new", author_id=author_id, minutes=5)
        other = make_comment(post.id, "other", minutes=3)
        for comment in (mine_old, mine_new, other):
            await comment_repo.save(comment)

        comments = await comment_service.list_for_user(author_id)

        assert [c.id for c in comments] == [mine_new.id, mine_old.id]


class TestModeration:
    """Tests for status changes."""

    @pytest.mark.asyncio
    async def test_approve_then_reject(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Hello"
        )

        approved = await comment_service.approve(comment.id)
        rejected = await comment_service.reject(comment.id)

        assert approved.status == CommentStatus.APPROVED
        assert rejected.status == CommentStatus.REJECTED

    @pytest.mark.asyncio
    async def test_approving_twice_is_a_no_op(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Hello"
        )

        first = await comment_service.approve(comment.id)
        second = await comment_service.approve(comment.id)

        assert second == first

    @pytest.mark.asyncio
    async def test_any_status_can_be_restored(self, unit_env):
        """APPROVED back to PENDING is allowed at the service level."""
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Hello"
        )
        await comment_service.approve(comment.id)

        result = await comment_service.set_status(comment.id, CommentStatus.PENDING)

        assert result.status == CommentStatus.PENDING

    @pytest.mark.asyncio
    async def test_moderating_missing_comment_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.approve(CommentId(uuid4()))


class TestUpdate:
    """Tests for partial updates."""

    @pytest.mark.asyncio
    async def test_update_content_only_keeps_status(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Tpyo"
        )
        await comment_service.approve(comment.id)

        updated = await comment_service.update(comment.id, content="Typo")

        assert updated.content == "Typo"
        assert updated.status == CommentStatus.APPROVED

    @pytest.mark.asyncio
    async def test_update_status_only_keeps_content(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Keep me"
        )

        updated = await comment_service.update(
            comment.id, status=CommentStatus.REJECTED
        )

        assert updated.content == "Keep me"
        assert updated.status == CommentStatus.REJECTED

    @pytest.mark.asyncio
    async def test_update_with_nothing_returns_comment_unchanged(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Same"
        )

        result = await comment_service.update(comment.id)

        assert result == comment

    @pytest.mark.asyncio
    async def test_update_with_blank_content_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Text"
        )

        with pytest.raises(ValidationError):
            await comment_service.update(comment.id, content="  ")


class TestDelete:
    """Tests for hard and soft deletes."""

    @pytest.mark.asyncio
    async def test_delete_leaf_removes_row(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Bye"
        )

        result = await comment_service.delete(comment.id)

        assert result.mode is DeletionMode.HARD
        assert result.comment.id == comment.id
        assert await comment_repo.find_by_id(comment.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing_comment_raises(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.delete(CommentId(uuid4()))

    @pytest.mark.asyncio
    async def test_delete_twice_raises_second_time(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        comment = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Bye"
        )
        await comment_service.delete(comment.id)

        with pytest.raises(NotFoundError):
            await comment_service.delete(comment.id)


class TestCommentLifecycle:
    """Whole-flow checks across create, moderate, delete and search."""

    @pytest.mark.asyncio
    async def test_deleting_parent_tombstones_and_keeps_reply(self, unit_env):
        """Create, approve, reply, delete parent: the reply survives."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        parent = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="A"
        )
        assert parent.status == CommentStatus.PENDING

        approved = await comment_service.approve(parent.id)
        assert approved.status == CommentStatus.APPROVED

        reply = await comment_service.create_comment(
            post_id=post.id,
            author_id=UserId(uuid4()),
            content="B",
            parent_id=parent.id,
        )

        # Act
        result = await comment_service.delete(parent.id)

        # Assert
        assert result.mode is DeletionMode.SOFT
        tombstoned = await comment_service.get_comment(parent.id)
        assert tombstoned.content == TOMBSTONE_TEXT
        assert tombstoned.status == CommentStatus.REJECTED

        surviving = await comment_service.get_comment(reply.id)
        assert surviving.parent_id == parent.id
        assert surviving.content == "B"

    @pytest.mark.asyncio
    async def test_paginated_search_over_one_post(self, unit_env):
        """Twenty-five comments page as 20 then 5."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        for i in range(25):
            await comment_service.create_comment(
                post_id=post.id, author_id=UserId(uuid4()), content=f"Comment {i}"
            )

        # Act
        first = await comment_service.find(
            CommentFilter(post_id=post.id, take=20, skip=0)
        )
        second = await comment_service.find(
            CommentFilter(post_id=post.id, take=20, skip=20)
        )

        # Assert
        assert len(first.items) == 20
        assert first.total_count == 25
        assert first.has_more is True

        assert len(second.items) == 5
        assert second.total_count == 25
        assert second.has_more is False

        seen = {c.id for c in first.items} | {c.id for c in second.items}
        assert len(seen) == 25

    @pytest.mark.asyncio
    async def test_search_hit_on_a_reply_expands_its_own_replies(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post = await _saved_post(unit_env)
        root = await comment_service.create_comment(
            post_id=post.id, author_id=UserId(uuid4()), content="Root"
        )
        reply = await comment_service.create_comment(
            post_id=post.id,
            author_id=UserId(uuid4()),
            content="Reply with a keyword",
            parent_id=root.id,
        )
        await comment_service.create_comment(
            post_id=post.id,
            author_id=UserId(uuid4()),
            content="Answer",
            parent_id=reply.id,
        )

        # Act
        page, threads = await comment_service.find_threads(
            CommentFilter(search_term="keyword")
        )

        # Assert
        assert [c.id for c in page.items] == [reply.id]
        assert [node.comment.id for node in threads] == [reply.id]
        assert [r.comment.content for r in threads[0].replies] == ["Answer"]
