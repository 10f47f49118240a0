"""Integration tests for PostgresCommentRepository.

These tests run the repository against PostgreSQL with the migrations
applied. Every test writes to its own post, so rows left by earlier runs
do not affect the assertions.
"""

import os
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.domain.model import User
from blog.domain.repository import (
    CommentFilter,
    CommentRepository,
    PostRepository,
    UserRepository,
)
from blog.domain.service.moderation import TOMBSTONE_TEXT, tombstone
from blog.domain.value import CommentStatus, UserId
from tests.conftest import make_comment, make_post
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    not os.environ.get("DATABASE__URL"),
    reason="DATABASE__URL not set; integration tests need PostgreSQL",
)

# Integration test fixture - real persistence
integration_env = create_env_fixture(unmock={"persistence"})


async def _seed_post(env):
    """Store an author and a post for the comments of one test."""
    user_repo = await env.get(UserRepository)
    post_repo = await env.get(PostRepository)

    author = await user_repo.save(
        User(id=UserId(uuid4()), username=f"author-{uuid4().hex[:12]}")
    )
    post = await post_repo.save(make_post(author_id=author.id))
    return author, post


class TestCommentRepositoryIntegration:
    """Integration tests for PostgresCommentRepository."""

    @pytest.mark.asyncio
    async def test_save_inserts_then_updates(self, integration_env):
        # Arrange
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        comment = make_comment(post.id, "Draft", author_id=author.id)

        # Act
        await comment_repo.save(comment)
        await comment_repo.save(
            comment.model_copy(
                update={"content": "Final", "status": CommentStatus.APPROVED}
            )
        )

        # Assert
        found = await comment_repo.find_by_id(comment.id)
        assert found is not None
        assert found.content == "Final"
        assert found.status == CommentStatus.APPROVED
        assert len(await comment_repo.find_by_post(post.id)) == 1

    @pytest.mark.asyncio
    async def test_search_matches_like_wildcards_literally(self, integration_env):
        """A '%' in the term must not act as a wildcard."""
        # Arrange
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        literal = await comment_repo.save(
            make_comment(post.id, "I agree 100% with this", author_id=author.id)
        )
        await comment_repo.save(
            make_comment(post.id, "1000 reasons to disagree", author_id=author.id)
        )

        # Act
        page = await comment_repo.search(
            CommentFilter(post_id=post.id, search_term="100%")
        )

        # Assert
        assert [c.id for c in page.items] == [literal.id]
        assert page.total_count == 1

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        await comment_repo.save(
            make_comment(post.id, "Buy CHEAP pills", author_id=author.id)
        )

        page = await comment_repo.search(
            CommentFilter(post_id=post.id, search_term="cheap")
        )

        assert page.total_count == 1

    @pytest.mark.asyncio
    async def test_search_pages_twenty_five_comments(self, integration_env):
        # Arrange
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        for i in range(25):
            await comment_repo.save(
                make_comment(post.id, f"Comment {i}", author_id=author.id, minutes=i)
            )

        # Act
        first = await comment_repo.search(
            CommentFilter(post_id=post.id, take=20, skip=0)
        )
        second = await comment_repo.search(
            CommentFilter(post_id=post.id, take=20, skip=20)
        )

        # Assert
        assert len(first.items) == 20
        assert first.total_count == 25
        assert first.has_more is True
        assert first.items[0].content == "Comment 24"

        assert len(second.items) == 5
        assert second.has_more is False
        assert second.items[-1].content == "Comment 0"

    @pytest.mark.asyncio
    async def test_search_filters_status_and_roots(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        root = await comment_repo.save(
            make_comment(
                post.id, "root", author_id=author.id, status=CommentStatus.APPROVED
            )
        )
        await comment_repo.save(
            make_comment(
                post.id,
                "reply",
                author_id=author.id,
                parent_id=root.id,
                status=CommentStatus.APPROVED,
                minutes=1,
            )
        )
        await comment_repo.save(make_comment(post.id, "pending", author_id=author.id))

        page = await comment_repo.search(
            CommentFilter(
                post_id=post.id, status=CommentStatus.APPROVED, root_only=True
            )
        )

        assert [c.id for c in page.items] == [root.id]

    @pytest.mark.asyncio
    async def test_equal_timestamps_are_ordered_by_id(self, integration_env):
        # Arrange
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        comments = [
            make_comment(post.id, f"Same instant {i}", author_id=author.id)
            for i in range(4)
        ]
        for comment in comments:
            await comment_repo.save(comment)

        # Act
        listed = await comment_repo.find_by_post(post.id)
        page = await comment_repo.search(CommentFilter(post_id=post.id))

        # Assert
        expected = sorted((c.id for c in comments), reverse=True)
        assert [c.id for c in listed] == expected
        assert [c.id for c in page.items] == expected

    @pytest.mark.asyncio
    async def test_count_replies_counts_direct_replies_only(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        root = await comment_repo.save(
            make_comment(post.id, "root", author_id=author.id)
        )
        reply = await comment_repo.save(
            make_comment(post.id, "reply", author_id=author.id, parent_id=root.id)
        )
        await comment_repo.save(
            make_comment(post.id, "nested", author_id=author.id, parent_id=reply.id)
        )

        assert await comment_repo.count_replies(root.id) == 1
        assert await comment_repo.count_replies(reply.id) == 1

    @pytest.mark.asyncio
    async def test_tombstoned_parent_keeps_its_replies(self, integration_env):
        # Arrange
        comment_repo = await integration_env.get(CommentRepository)
        session = await integration_env.get(AsyncSession)
        author, post = await _seed_post(integration_env)
        parent = await comment_repo.save(
            make_comment(post.id, "Parent", author_id=author.id)
        )
        reply = await comment_repo.save(
            make_comment(
                post.id, "Reply", author_id=author.id, parent_id=parent.id, minutes=1
            )
        )

        # Act
        await comment_repo.save(tombstone(parent))

        # Assert
        stored = await comment_repo.find_by_id(parent.id)
        assert stored.content == TOMBSTONE_TEXT
        assert stored.status == CommentStatus.REJECTED
        kept = await comment_repo.find_by_id(reply.id)
        assert kept.parent_id == parent.id

        # A parent with replies can never be removed outright
        with pytest.raises(IntegrityError):
            async with session.begin_nested():
                await comment_repo.delete(parent.id)
        assert await comment_repo.find_by_id(parent.id) is not None

    @pytest.mark.asyncio
    async def test_delete_removes_leaf(self, integration_env):
        comment_repo = await integration_env.get(CommentRepository)
        author, post = await _seed_post(integration_env)
        leaf = await comment_repo.save(
            make_comment(post.id, "Leaf", author_id=author.id)
        )

        await comment_repo.delete(leaf.id)

        assert await comment_repo.find_by_id(leaf.id) is None


class TestUserRepositoryIntegration:
    """Integration tests for the batched author lookup."""

    @pytest.mark.asyncio
    async def test_find_by_ids_skips_unknown_ids(self, integration_env):
        user_repo = await integration_env.get(UserRepository)
        author, _ = await _seed_post(integration_env)

        users = await user_repo.find_by_ids([author.id, UserId(uuid4())])

        assert [u.username for u in users] == [author.username]

    @pytest.mark.asyncio
    async def test_find_by_ids_with_no_ids(self, integration_env):
        user_repo = await integration_env.get(UserRepository)

        assert await user_repo.find_by_ids([]) == []
